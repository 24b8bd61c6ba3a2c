"""
Tests for bounded channels and select.
"""

import queue
import threading
import time

import pytest

from ascii_webcam.channel import Channel, select


class TestChannel:
    def test_fifo(self):
        channel = Channel(3)
        for i in range(3):
            assert channel.send(i)
        assert [channel.recv_nowait() for _ in range(3)] == [0, 1, 2]

    def test_recv_empty_raises(self):
        with pytest.raises(queue.Empty):
            Channel(1).recv_nowait()

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            Channel(0)

    def test_full_channel_blocks_sender(self):
        channel = Channel(2)
        channel.send("a")
        channel.send("b")

        sent = threading.Event()

        def producer():
            channel.send("c", poll_interval=0.01)
            sent.set()

        threading.Thread(target=producer, daemon=True).start()
        assert not sent.wait(0.1)
        assert len(channel) == 2

        assert channel.recv_nowait() == "a"
        assert sent.wait(1.0)
        assert len(channel) == 2

    def test_close_releases_blocked_sender(self):
        channel = Channel(1)
        channel.send("a")
        result = []

        def producer():
            result.append(channel.send("b", poll_interval=0.01))

        thread = threading.Thread(target=producer, daemon=True)
        thread.start()
        time.sleep(0.05)
        channel.close()
        thread.join(1.0)

        assert result == [False]
        assert channel.closed

    def test_send_after_close(self):
        channel = Channel(1)
        channel.close()
        assert channel.send("a") is False
        assert len(channel) == 0


class TestSelect:
    def test_returns_ready_channel(self):
        notifier = threading.Condition()
        first = Channel(2, notifier)
        second = Channel(2, notifier)
        second.send("x")

        channel, item = select([first, second], timeout=0.1)
        assert channel is second
        assert item == "x"

    def test_earlier_channel_wins_ties(self):
        notifier = threading.Condition()
        first = Channel(2, notifier)
        second = Channel(2, notifier)
        second.send("late")
        first.send("early")

        channel, item = select([first, second], timeout=0.1)
        assert channel is first
        assert item == "early"

    def test_timeout(self):
        channel = Channel(1)
        start = time.monotonic()
        assert select([channel], timeout=0.05) == (None, None)
        assert time.monotonic() - start >= 0.04

    def test_zero_timeout_does_not_block(self):
        assert select([Channel(1)], timeout=0) == (None, None)

    def test_wakes_on_send_from_other_thread(self):
        channel = Channel(1)

        def producer():
            time.sleep(0.05)
            channel.send("hello")

        threading.Thread(target=producer, daemon=True).start()
        result, item = select([channel], timeout=2.0)
        assert result is channel
        assert item == "hello"

    def test_closed_and_drained(self):
        channel = Channel(1)
        channel.send("last")
        channel.close()
        assert select([channel], timeout=1.0) == (channel, "last")
        assert select([channel], timeout=1.0) == (None, None)
