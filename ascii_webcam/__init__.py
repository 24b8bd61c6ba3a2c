"""
ASCII Webcam - Live camera feed as ASCII art in the terminal

Captures frames on one thread, reads the keyboard on another, and
converts and draws on the main thread at a steady frame rate.
"""

__version__ = "0.1.0"

from .app import FpsWindow, LoopState, PipelineConfig, PipelineLoop, RenderState
from .camera import Camera, FrameSource, MockCamera
from .channel import Channel, select
from .controls import Command, InputSource, KeyboardInput, command_for_key
from .converter import ASCIIConverter, CharacterSets, get_ascii_char, process_frame
from .display import Display, terminal_session
from .errors import (
    AsciiWebcamError,
    DeviceError,
    InputError,
    SurfaceError,
    TransformError,
)

__all__ = [
    # Pipeline
    "PipelineLoop",
    "PipelineConfig",
    "RenderState",
    "FpsWindow",
    "LoopState",
    "Channel",
    "select",
    # Sources
    "FrameSource",
    "Camera",
    "MockCamera",
    "InputSource",
    "KeyboardInput",
    "Command",
    "command_for_key",
    # Conversion and output
    "ASCIIConverter",
    "CharacterSets",
    "get_ascii_char",
    "process_frame",
    "Display",
    "terminal_session",
    # Errors
    "AsciiWebcamError",
    "DeviceError",
    "TransformError",
    "SurfaceError",
    "InputError",
]
