"""
Test doubles for the camera, keyboard, display and terminal.
"""

import io
import threading
import time
from contextlib import contextmanager
from dataclasses import replace

import pytest

from ascii_webcam.camera import FrameSource
from ascii_webcam.controls import InputSource
from ascii_webcam.errors import DeviceError


class ListSource(FrameSource):
    """Frame source that hands out copies of one frame."""

    def __init__(self, frame, fail_at=None, on_read=None):
        self.frame = frame
        self.fail_at = fail_at
        self.on_read = on_read
        self.reads = 0
        self.is_open = False

    def open(self):
        self.is_open = True

    def close(self):
        self.is_open = False

    def read(self):
        self.reads += 1
        if self.on_read is not None:
            self.on_read(self.reads)
        if self.fail_at is not None and self.reads >= self.fail_at:
            raise DeviceError("camera unplugged")
        return self.frame.copy()


class ScriptedInput(InputSource):
    """
    Keyboard double.

    Each scripted entry is a key, or a (key, gate) pair where the key is
    held back until gate() returns True.
    """

    def __init__(self, keys=(), poll_interval=0.005, error=None):
        self._keys = [k if isinstance(k, tuple) else (k, None) for k in keys]
        self._lock = threading.Lock()
        self.poll_interval = poll_interval
        self.error = error

    def push(self, key):
        with self._lock:
            self._keys.append((key, None))

    def poll(self):
        if self.error is not None:
            raise self.error
        with self._lock:
            if self._keys:
                key, gate = self._keys[0]
                if gate is None or gate():
                    self._keys.pop(0)
                    return key
        time.sleep(self.poll_interval)
        return None


class RecordingDisplay:
    """Render sink that keeps a snapshot of every state drawn."""

    def __init__(self, size=(80, 24), draw_delay=0.0, error=None):
        self.size = size
        self.draw_delay = draw_delay
        self.error = error
        self.draws = []
        self.draw_times = []

    def get_frame_size(self):
        return self.size

    def draw(self, state):
        if self.error is not None:
            raise self.error
        self.draws.append(replace(state))
        self.draw_times.append(time.perf_counter())
        if self.draw_delay:
            time.sleep(self.draw_delay)


class FakeKey(str):
    """Stand-in for blessed's Keystroke."""

    def __new__(cls, text="", name=None):
        key = super().__new__(cls, text)
        key.name = name
        key.is_sequence = name is not None
        return key


class FakeTerminal:
    """
    Minimal blessed.Terminal replacement.

    Styling and cursor moves are empty strings so written output is the
    plain screen text, with clears left in as visible markers. Keys become
    available key_delay seconds after creation.
    """

    home = ""
    clear = "[clear]"
    clear_eol = "[eol]"

    def __init__(self, width=80, height=24, keys=(), key_delay=0.0,
                 is_a_tty=True, fail_on=None, fail_error=None, inkey_error=None):
        self.width = width
        self.height = height
        self.stream = io.StringIO()
        self.is_a_tty = is_a_tty
        self.fail_on = fail_on
        self.fail_error = fail_error
        self.inkey_error = inkey_error
        self.log = []
        self._keys = list(keys)
        self._ready_at = time.monotonic() + key_delay

    def move_xy(self, x, y):
        return ""

    def cyan(self, text):
        return text

    def bold(self, text):
        return text

    @contextmanager
    def _mode(self, name):
        if self.fail_on == name:
            raise self.fail_error or OSError(f"{name} not supported")
        self.log.append(f"enter {name}")
        try:
            yield
        finally:
            self.log.append(f"exit {name}")

    def fullscreen(self):
        return self._mode("fullscreen")

    def cbreak(self):
        return self._mode("cbreak")

    def hidden_cursor(self):
        return self._mode("hidden_cursor")

    def inkey(self, timeout=None):
        if self.inkey_error is not None:
            raise self.inkey_error
        if self._keys and time.monotonic() >= self._ready_at:
            return self._keys.pop(0)
        time.sleep(timeout or 0)
        return FakeKey("")


def run_loop(loop, timeout=5.0):
    """Run a PipelineLoop on a worker thread so a hang fails the test."""
    errors = []

    def target():
        try:
            loop.run()
        except Exception as e:
            errors.append(e)

    thread = threading.Thread(target=target, daemon=True)
    thread.start()
    thread.join(timeout)
    if thread.is_alive():
        loop.request_stop()
        thread.join(timeout)
        pytest.fail("render loop did not finish")
    if errors:
        raise errors[0]

