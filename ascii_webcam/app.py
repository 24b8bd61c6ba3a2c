"""
Application state and the render loop.

The loop runs two producer threads, one capturing camera frames and one
polling the keyboard, each feeding a bounded channel. The main thread
selects over both channels, converts and draws frames, applies key
commands, and paces itself to the target frame rate.
"""

import logging
import threading
import time
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .channel import Channel, select
from .controls import Command, command_for_key
from .converter import ASCIIConverter

logger = logging.getLogger(__name__)


@dataclass
class RenderState:
    """What the display shows. Only the loop thread writes it."""
    frame: str = ""
    fps: float = 0.0
    show_help: bool = False

    def toggle_help(self):
        """Toggle the visibility of the help menu."""
        self.show_help = not self.show_help


class FpsWindow:
    """
    Rolling frame-time average over a fixed number of frames.

    The window starts full of one-second entries so the estimate is
    defined from the first frame; each new duration pushes out the oldest.
    """

    SEED_DURATION = 1.0

    def __init__(self, capacity: int = 120):
        if capacity <= 0:
            raise ValueError("FPS window capacity must be positive")
        self.capacity = capacity
        self._durations = deque([self.SEED_DURATION] * capacity, maxlen=capacity)
        self._samples = 0

    def __len__(self) -> int:
        return len(self._durations)

    @property
    def is_warm(self) -> bool:
        """True once every seed entry has been replaced by a measurement."""
        return self._samples >= self.capacity

    def record(self, duration: float):
        """Add one frame duration in seconds."""
        self._durations.append(duration)
        self._samples += 1

    @property
    def fps(self) -> float:
        mean = sum(self._durations) / self.capacity
        if mean <= 0:
            return 0.0
        return 1.0 / mean


class LoopState(Enum):
    WARMING_UP = "warming_up"
    RUNNING = "running"
    TERMINATING = "terminating"


@dataclass
class PipelineConfig:
    """
    Render loop settings.

    Attributes:
        target_fps: Frame rate the loop paces itself to
        fps_window: Number of frames in the FPS average
        frame_queue_size: Frames the capture thread may run ahead by
        input_queue_size: Key presses buffered before the poller blocks
        select_timeout: Longest wait for a frame or key before rechecking stop
        join_timeout: How long to wait for producer threads on shutdown
    """
    target_fps: int = 30
    fps_window: int = 120
    frame_queue_size: int = 2
    input_queue_size: int = 10
    select_timeout: float = 0.1
    join_timeout: float = 1.0

    def __post_init__(self):
        if self.target_fps <= 0:
            raise ValueError(f"target_fps must be positive, got {self.target_fps}")
        if self.fps_window <= 0:
            raise ValueError(f"fps_window must be positive, got {self.fps_window}")
        if self.frame_queue_size <= 0 or self.input_queue_size <= 0:
            raise ValueError("queue sizes must be positive")

    @property
    def frame_time(self) -> float:
        return 1.0 / self.target_fps


class PipelineLoop:
    """
    Capture -> convert -> draw loop with keyboard control.

    Any error raised by the camera, converter, display or keyboard ends
    the loop and propagates out of run() after the producers are stopped.
    """

    def __init__(
        self,
        source,
        input_source,
        display,
        converter: Optional[ASCIIConverter] = None,
        config: Optional[PipelineConfig] = None
    ):
        """
        Initialize the loop.

        Args:
            source: FrameSource, already open
            input_source: InputSource for key presses
            display: Render surface with get_frame_size() and draw(state)
            converter: Frame converter (default settings if None)
            config: Loop settings (defaults if None)
        """
        self.source = source
        self.input_source = input_source
        self.display = display
        self.converter = converter or ASCIIConverter()
        self.config = config or PipelineConfig()

        self.state = RenderState()
        self.fps_window = FpsWindow(self.config.fps_window)
        self.loop_state = LoopState.WARMING_UP

        notifier = threading.Condition()
        self.frames = Channel(self.config.frame_queue_size, notifier, name="frames")
        self.keys = Channel(self.config.input_queue_size, notifier, name="keys")

        self._stop = threading.Event()
        self._threads: List[threading.Thread] = []

    @property
    def stopped(self) -> threading.Event:
        """Set once the loop has been asked to terminate."""
        return self._stop

    def request_stop(self):
        """Ask the loop to finish; safe to call from a signal handler."""
        self._stop.set()

    def run(self):
        """
        Run until quit or a fatal error.

        Raises:
            AsciiWebcamError: Whatever stopped the pipeline
        """
        logger.info("Render loop starting at %d fps target", self.config.target_fps)
        self._start_producers()
        try:
            while not self._stop.is_set():
                self._cycle()
        except Exception:
            logger.exception("Render loop failed")
            raise
        finally:
            self._shutdown()
        logger.info("Render loop stopped")

    def _start_producers(self):
        self._threads = [
            threading.Thread(target=self._capture_frames, name="capture", daemon=True),
            threading.Thread(target=self._poll_input, name="input", daemon=True),
        ]
        for thread in self._threads:
            thread.start()

    def _shutdown(self):
        self._set_loop_state(LoopState.TERMINATING)
        self._stop.set()
        self.frames.close()
        self.keys.close()
        for thread in self._threads:
            thread.join(timeout=self.config.join_timeout)
            if thread.is_alive():
                logger.warning("%s thread did not exit in time", thread.name)

    def _capture_frames(self):
        """Capture thread: read frames until the loop goes away."""
        while not self._stop.is_set():
            try:
                frame = self.source.read()
            except Exception as e:
                self.frames.send(e)
                break
            if not self.frames.send(frame):
                break
        logger.debug("Capture thread exiting")

    def _poll_input(self):
        """Input thread: forward key presses until the loop goes away."""
        while not self._stop.is_set():
            try:
                key = self.input_source.poll()
            except Exception as e:
                self.keys.send(e)
                break
            if key is None:
                continue
            if not self.keys.send(key):
                break
        logger.debug("Input thread exiting")

    def _cycle(self):
        cycle_start = time.perf_counter()

        channel, item = select([self.keys, self.frames], timeout=self.config.select_timeout)
        if channel is None:
            return
        if isinstance(item, Exception):
            raise item

        if channel is self.frames:
            self._handle_frame(item, cycle_start)
        else:
            self._handle_key(item)

        self._drain_keys()
        if self._stop.is_set():
            return

        elapsed = time.perf_counter() - cycle_start
        if elapsed < self.config.frame_time:
            time.sleep(self.config.frame_time - elapsed)

    def _handle_frame(self, frame, cycle_start: float):
        width, height = self.display.get_frame_size()
        self.state.frame = self.converter.convert(frame, width, height)
        self.display.draw(self.state)

        self.fps_window.record(time.perf_counter() - cycle_start)
        self.state.fps = self.fps_window.fps
        if self.fps_window.is_warm:
            self._set_loop_state(LoopState.RUNNING)

    def _handle_key(self, key: str):
        command = command_for_key(key)
        if command is Command.QUIT:
            logger.info("Quit requested")
            self._set_loop_state(LoopState.TERMINATING)
            self._stop.set()
        elif command is Command.TOGGLE_HELP:
            self.state.toggle_help()

    def _drain_keys(self):
        """Apply key presses already waiting, without blocking."""
        while not self._stop.is_set():
            channel, item = select([self.keys], timeout=0)
            if channel is None:
                return
            if isinstance(item, Exception):
                raise item
            self._handle_key(item)

    def _set_loop_state(self, state: LoopState):
        if state is not self.loop_state:
            logger.debug("Loop state %s -> %s", self.loop_state.value, state.value)
            self.loop_state = state
