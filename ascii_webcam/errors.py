"""
Error types for ASCII Webcam.

Every failure the pipeline can hit maps onto one of four kinds. All of
them are fatal to the render loop; none is retried automatically.
"""


class AsciiWebcamError(Exception):
    """Base class for all ASCII Webcam errors."""


class DeviceError(AsciiWebcamError):
    """Capture device unavailable, frame unreadable, or empty frame."""


class TransformError(AsciiWebcamError):
    """Grayscale conversion or resizing failed (malformed input)."""


class SurfaceError(AsciiWebcamError):
    """Terminal setup, size query, or draw failed."""


class InputError(AsciiWebcamError):
    """Keyboard event source could not be polled or read."""
