"""
Camera capture module for live video streaming.

Defines the frame source contract used by the render pipeline and two
implementations: a real webcam through OpenCV and a synthetic source for
running without one.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Optional, Tuple
import cv2
import numpy as np

from .errors import DeviceError

logger = logging.getLogger(__name__)


class FrameSource(ABC):
    """
    Abstract source of raw BGR frames.

    Lifecycle:
        1. Call open() to acquire the device
        2. Call read() repeatedly; each call blocks until a frame is ready
        3. Call close() to release the device

    read() never returns an empty frame: an empty capture is a DeviceError.
    There is no retry inside a source.
    """

    @abstractmethod
    def open(self) -> None:
        """Acquire the device. Raises DeviceError if unavailable."""

    @abstractmethod
    def read(self) -> np.ndarray:
        """Capture the next frame. Raises DeviceError on failure."""

    @abstractmethod
    def close(self) -> None:
        """Release the device. Safe to call more than once."""

    def __enter__(self):
        """Context manager entry - opens the source."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - closes the source."""
        self.close()
        return False


class Camera(FrameSource):
    """
    Webcam capture through cv2.VideoCapture.

    The device handle is shared between the capture thread (read) and the
    owner that closes it, so both go through one lock.
    """

    # How long close() waits for an in-flight read before giving up
    CLOSE_TIMEOUT = 2.0

    def __init__(
        self,
        source: int = 0,
        width: Optional[int] = None,
        height: Optional[int] = None,
        fps: Optional[int] = None
    ):
        """
        Initialize the camera.

        Args:
            source: Camera index (0 for default)
            width: Desired capture width (optional)
            height: Desired capture height (optional)
            fps: Desired frame rate (optional)
        """
        self.source = source
        self.desired_width = width
        self.desired_height = height
        self.desired_fps = fps
        self._cap: Optional[cv2.VideoCapture] = None
        self._lock = threading.Lock()

    def open(self) -> None:
        """
        Open the camera.

        Raises:
            DeviceError: If the camera cannot be opened
        """
        with self._lock:
            try:
                cap = cv2.VideoCapture(self.source)
            except cv2.error as e:
                raise DeviceError(f"failed to create video capture: {e}") from e

            if not cap.isOpened():
                cap.release()
                raise DeviceError(f"could not open camera {self.source}")

            if self.desired_width:
                cap.set(cv2.CAP_PROP_FRAME_WIDTH, self.desired_width)
            if self.desired_height:
                cap.set(cv2.CAP_PROP_FRAME_HEIGHT, self.desired_height)
            if self.desired_fps:
                cap.set(cv2.CAP_PROP_FPS, self.desired_fps)

            self._cap = cap

        logger.info("Camera %s opened at %dx%d", self.source, *self.resolution)

    def close(self):
        """Release the camera resources."""
        if not self._lock.acquire(timeout=self.CLOSE_TIMEOUT):
            # A read is stuck in the driver
            logger.warning("Camera %s busy, skipping release", self.source)
            return
        try:
            if self._cap is not None:
                self._cap.release()
                self._cap = None
                logger.info("Camera %s closed", self.source)
        finally:
            self._lock.release()

    @property
    def is_open(self) -> bool:
        """Check if camera is open and ready."""
        return self._cap is not None and self._cap.isOpened()

    @property
    def resolution(self) -> Tuple[int, int]:
        """Get current capture resolution (width, height)."""
        if self._cap is None:
            return (0, 0)
        return (
            int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH)),
            int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))
        )

    def read(self) -> np.ndarray:
        """
        Read a single frame from the camera.

        Returns:
            Frame as numpy array (BGR format)

        Raises:
            DeviceError: If the camera is closed, the read fails, or the
                frame is empty
        """
        with self._lock:
            if self._cap is None:
                raise DeviceError("camera is not open")

            try:
                ret, frame = self._cap.read()
            except cv2.error as e:
                raise DeviceError(f"failed to read frame: {e}") from e

        if not ret:
            raise DeviceError("failed to read frame")
        if frame is None or frame.size == 0:
            raise DeviceError("empty frame")

        return frame


class MockCamera(FrameSource):
    """
    Mock camera for testing without a real webcam.

    Generates animated test patterns for development and testing.
    """

    PATTERNS = ("gradient", "noise", "checkerboard")

    def __init__(
        self,
        width: int = 640,
        height: int = 480,
        pattern: str = "gradient"
    ):
        """
        Initialize mock camera.

        Args:
            width: Frame width
            height: Frame height
            pattern: Test pattern type ('gradient', 'noise', 'checkerboard')
        """
        if pattern not in self.PATTERNS:
            raise ValueError(f"Unknown pattern: {pattern}")
        self._frame_width = width
        self._frame_height = height
        self._frame_count = 0
        self._pattern = pattern
        self._is_open = False

    def open(self) -> None:
        """Open the mock camera."""
        if self._frame_width <= 0 or self._frame_height <= 0:
            raise DeviceError("mock camera has zero area")
        self._is_open = True

    def close(self):
        """Close the mock camera."""
        self._is_open = False

    @property
    def is_open(self) -> bool:
        return self._is_open

    @property
    def resolution(self) -> Tuple[int, int]:
        return (self._frame_width, self._frame_height)

    def read(self) -> np.ndarray:
        """Generate a test pattern frame."""
        if not self._is_open:
            raise DeviceError("camera is not open")

        self._frame_count += 1

        if self._pattern == "noise":
            return self._generate_noise()
        elif self._pattern == "checkerboard":
            return self._generate_checkerboard()
        return self._generate_gradient()

    def _generate_gradient(self) -> np.ndarray:
        """Generate an animated horizontal gradient."""
        offset = (self._frame_count * 2) % 256
        x = np.arange(self._frame_width)
        value = ((x * 256 // self._frame_width + offset) % 256).astype(np.uint8)

        frame = np.empty((self._frame_height, self._frame_width, 3), dtype=np.uint8)
        frame[:, :, 0] = value
        frame[:, :, 1] = value
        frame[:, :, 2] = value
        return frame

    def _generate_noise(self) -> np.ndarray:
        """Generate random noise pattern."""
        return np.random.randint(
            0, 256,
            (self._frame_height, self._frame_width, 3),
            dtype=np.uint8
        )

    def _generate_checkerboard(self) -> np.ndarray:
        """Generate an animated checkerboard pattern."""
        frame = np.zeros((self._frame_height, self._frame_width, 3), dtype=np.uint8)

        block_size = 32
        offset = (self._frame_count // 10) % 2

        for y in range(0, self._frame_height, block_size):
            for x in range(0, self._frame_width, block_size):
                if ((x // block_size) + (y // block_size) + offset) % 2:
                    frame[y:y+block_size, x:x+block_size] = 255

        return frame
