"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import numpy as np
import pytest

# Add the repo root to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from ascii_webcam.app import PipelineConfig  # noqa: E402


@pytest.fixture
def white_frame():
    """A 640x480 all-white BGR frame."""
    return np.full((480, 640, 3), 255, dtype=np.uint8)


@pytest.fixture
def black_rect_frame(white_frame):
    """White frame with a solid black rectangle in the middle."""
    frame = white_frame.copy()
    frame[100:380, 200:440] = 0
    return frame


@pytest.fixture
def fast_config():
    """Loop settings that keep tests quick."""
    return PipelineConfig(
        target_fps=200,
        fps_window=4,
        select_timeout=0.02,
        join_timeout=2.0,
    )
