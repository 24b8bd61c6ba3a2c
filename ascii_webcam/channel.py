"""
Bounded channels between producer threads and the render loop.

queue.Queue gives bounded FIFO delivery but has no way to close it or to
wait on several queues at once. Channel adds both: producers learn the
consumer is gone when send() returns False, and the consumer can block
on whichever of its channels fills first with select().
"""

import queue
import threading
import time
from typing import Any, Optional, Sequence, Tuple


class Channel:
    """
    Bounded FIFO with close semantics.

    Channels that a consumer selects over must share one notifier
    condition, which send() signals after every successful put.
    """

    def __init__(
        self,
        maxsize: int,
        notifier: Optional[threading.Condition] = None,
        name: str = "channel"
    ):
        """
        Initialize a channel.

        Args:
            maxsize: Capacity; send() blocks while this many items wait
            notifier: Condition shared with sibling channels
            name: Label used in logs
        """
        if maxsize <= 0:
            raise ValueError("Channel capacity must be positive")
        self.name = name
        self.maxsize = maxsize
        self.notifier = notifier or threading.Condition()
        self._queue: queue.Queue = queue.Queue(maxsize)
        self._closed = threading.Event()

    @property
    def closed(self) -> bool:
        return self._closed.is_set()

    def __len__(self) -> int:
        return self._queue.qsize()

    def send(self, item: Any, poll_interval: float = 0.05) -> bool:
        """
        Put an item, blocking while the channel is full.

        Args:
            item: Value to hand over; the sender must not touch it afterwards
            poll_interval: How often a blocked sender rechecks for close

        Returns:
            True if delivered, False if the channel was closed
        """
        while not self._closed.is_set():
            try:
                self._queue.put(item, timeout=poll_interval)
            except queue.Full:
                continue
            with self.notifier:
                self.notifier.notify_all()
            return True
        return False

    def recv_nowait(self) -> Any:
        """Take the oldest item. Raises queue.Empty if there is none."""
        return self._queue.get_nowait()

    def close(self):
        """Close the channel and wake anyone waiting on it."""
        self._closed.set()
        with self.notifier:
            self.notifier.notify_all()


def select(
    channels: Sequence[Channel],
    timeout: Optional[float] = None
) -> Tuple[Optional[Channel], Any]:
    """
    Wait until any channel has an item and take it.

    Channels are checked in the order given, so earlier ones win when
    several are ready at the same moment.

    Args:
        channels: Channels sharing one notifier
        timeout: Seconds to wait, None to wait forever

    Returns:
        (channel, item), or (None, None) on timeout or when every channel
        is closed and drained
    """
    notifier = channels[0].notifier
    deadline = None if timeout is None else time.monotonic() + timeout

    with notifier:
        while True:
            for channel in channels:
                try:
                    return channel, channel.recv_nowait()
                except queue.Empty:
                    pass

            if all(channel.closed for channel in channels):
                return None, None

            if deadline is None:
                notifier.wait()
            else:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    return None, None
                notifier.wait(remaining)
