"""
Core ASCII conversion engine.

Turns a captured frame into a block of text sized to the terminal:
- Grayscale reduction using OpenCV's standard BGR weighting
- Bilinear resampling to the exact target grid
- Linear quantization onto a fixed character ramp
"""

from typing import Union
import cv2
import numpy as np
from PIL import Image

from .errors import TransformError


class CharacterSets:
    """The character ramp used for conversion."""

    # Ordered by perceived density (light to dark)
    STANDARD = " .:-=+*#%@"


RAMP = CharacterSets.STANDARD

# Lookup table for every byte value, built once at import
_RAMP_LUT = np.array(
    [RAMP[min(v * (len(RAMP) - 1) // 255, len(RAMP) - 1)] for v in range(256)]
)


def get_ascii_char(value: int) -> str:
    """
    Map a byte value (0-255) to a ramp character.

    0 maps to the first ramp character and 255 to the last; values in
    between are spread linearly and the mapping never decreases.

    Args:
        value: Intensity byte

    Returns:
        A single character from the ramp
    """
    index = (int(value) * (len(RAMP) - 1)) // 255
    return RAMP[max(0, min(index, len(RAMP) - 1))]


class ASCIIConverter:
    """
    Converts frames to ASCII art of an exact size.

    Holds no per-frame state, so one instance can be shared by threads.
    """

    def __init__(self, invert: bool = False):
        """
        Initialize the ASCII converter.

        Args:
            invert: Map bright pixels to dense characters instead of light
                ones (reads better as light-on-dark)
        """
        self.invert = invert

    def _to_gray(self, frame: Union[np.ndarray, Image.Image]) -> np.ndarray:
        """Reduce a frame to a 2D uint8 luminance array."""
        if isinstance(frame, Image.Image):
            # PIL is RGB, OpenCV expects BGR
            frame = np.asarray(frame.convert("RGB"))[:, :, ::-1]

        if not isinstance(frame, np.ndarray) or frame.size == 0:
            raise TransformError("frame is empty")

        if frame.dtype != np.uint8:
            frame = np.clip(frame, 0, 255).astype(np.uint8)

        try:
            if frame.ndim == 2:
                return frame
            if frame.ndim == 3 and frame.shape[2] == 3:
                return cv2.cvtColor(np.ascontiguousarray(frame), cv2.COLOR_BGR2GRAY)
            if frame.ndim == 3 and frame.shape[2] == 4:
                return cv2.cvtColor(np.ascontiguousarray(frame), cv2.COLOR_BGRA2GRAY)
        except cv2.error as e:
            raise TransformError(f"failed to convert frame to grayscale: {e}") from e

        raise TransformError(f"unsupported frame shape {frame.shape}")

    def convert(
        self,
        frame: Union[np.ndarray, Image.Image],
        width: int,
        height: int
    ) -> str:
        """
        Convert a frame to ASCII art.

        Args:
            frame: BGR numpy array (as read by OpenCV), grayscale array,
                or PIL Image
            width: Characters per row
            height: Number of rows

        Returns:
            Exactly `height` lines of `width` characters joined by newlines

        Raises:
            TransformError: If the frame or target size is unusable
        """
        if width <= 0 or height <= 0:
            raise TransformError(f"invalid target size {width}x{height}")

        if frame is None:
            raise TransformError("frame is empty")

        gray = self._to_gray(frame)

        try:
            resized = cv2.resize(gray, (width, height), interpolation=cv2.INTER_LINEAR)
        except cv2.error as e:
            raise TransformError(f"failed to resize frame: {e}") from e

        # Quantize ink density unless inverted: white paper stays blank
        if not self.invert:
            resized = 255 - resized

        chars = _RAMP_LUT[resized]
        return "\n".join("".join(row) for row in chars)


_default_converter = ASCIIConverter()


def process_frame(frame: Union[np.ndarray, Image.Image], width: int, height: int) -> str:
    """Convert a frame with the default converter settings."""
    return _default_converter.convert(frame, width, height)
