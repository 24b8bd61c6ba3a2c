#!/usr/bin/env python3
"""
Interactive CLI for ASCII Webcam.

Opens the camera, takes over the terminal, and streams the feed as ASCII
art until the user quits.
"""

import argparse
import logging
import signal
import sys
from typing import List, Optional

from blessed import Terminal

from .app import PipelineConfig, PipelineLoop
from .camera import Camera, MockCamera
from .controls import KeyboardInput
from .converter import ASCIIConverter
from .display import Display, terminal_session
from .errors import AsciiWebcamError, SurfaceError
from .logging_setup import setup_logging

logger = logging.getLogger(__name__)


class ASCIIWebcamApp:
    """
    Main application class for ASCII Webcam.

    Handles initialization, the run, and cleanup.
    """

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        camera_id: int = 0,
        invert: bool = False,
        capture_width: Optional[int] = None,
        capture_height: Optional[int] = None
    ):
        """
        Initialize the application.

        Args:
            config: Render loop settings
            camera_id: Camera device ID
            invert: Map bright pixels to dense characters
            capture_width: Requested camera width in pixels (optional)
            capture_height: Requested camera height in pixels (optional)
        """
        self.config = config or PipelineConfig()
        self.camera_id = camera_id
        self.capture_width = capture_width
        self.capture_height = capture_height
        self.converter = ASCIIConverter(invert=invert)

    def _setup_signal_handlers(self, loop: PipelineLoop):
        """Turn SIGINT/SIGTERM into an orderly stop."""
        def handler(signum, frame):
            logger.info("Received signal %d, stopping", signum)
            loop.request_stop()
        signal.signal(signal.SIGINT, handler)
        signal.signal(signal.SIGTERM, handler)

    def run_camera(self, mock: bool = False, pattern: str = "gradient") -> int:
        """
        Run live camera mode.

        Args:
            mock: Use mock camera for testing
            pattern: Mock camera test pattern

        Returns:
            Exit code (0 on quit, 1 on error)
        """
        if mock:
            camera = MockCamera(pattern=pattern)
        else:
            camera = Camera(
                source=self.camera_id,
                width=self.capture_width,
                height=self.capture_height,
                fps=self.config.target_fps
            )

        previous_handlers = {
            signum: signal.getsignal(signum) for signum in (signal.SIGINT, signal.SIGTERM)
        }

        try:
            with camera:
                term = Terminal()
                if not term.is_a_tty:
                    raise SurfaceError("standard output is not a terminal")

                # The terminal is restored before any error reaches the user
                with terminal_session(term):
                    loop = PipelineLoop(
                        camera,
                        KeyboardInput(term),
                        Display(term),
                        converter=self.converter,
                        config=self.config
                    )
                    self._setup_signal_handlers(loop)
                    loop.run()
        except AsciiWebcamError as e:
            logger.error("Fatal: %s", e)
            print(f"Error: {e}", file=sys.stderr)
            return 1
        finally:
            for signum, handler in previous_handlers.items():
                signal.signal(signum, handler)

        return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ascii-webcam",
        description="ASCII Webcam - Stream your camera as ASCII art in the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ascii-webcam                  Start live camera mode
  ascii-webcam --camera 1       Use the second camera
  ascii-webcam --width 320 --height 240
                                Capture at a lower resolution
  ascii-webcam --fps 15         Lower the target frame rate
  ascii-webcam --mock           Test with mock camera (no webcam needed)

Keys:
  q  Quit
  ?  Toggle help
"""
    )

    parser.add_argument(
        "--camera",
        type=int,
        default=0,
        help="Camera device ID (default: 0)"
    )
    parser.add_argument(
        "--width",
        type=int,
        help="Capture width in pixels (default: camera default)"
    )
    parser.add_argument(
        "--height",
        type=int,
        help="Capture height in pixels (default: camera default)"
    )
    parser.add_argument(
        "--fps",
        type=int,
        default=30,
        help="Target frame rate (default: 30)"
    )
    parser.add_argument(
        "--fps-window",
        type=int,
        default=120,
        help="Frames averaged for the FPS readout (default: 120)"
    )
    parser.add_argument(
        "-i", "--invert",
        action="store_true",
        help="Invert brightness (light on dark)"
    )
    parser.add_argument(
        "--mock",
        action="store_true",
        help="Use mock camera for testing"
    )
    parser.add_argument(
        "--pattern",
        choices=list(MockCamera.PATTERNS),
        default="gradient",
        help="Mock camera test pattern (default: gradient)"
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to this file (default: no logging)"
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level (default: INFO)"
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = PipelineConfig(target_fps=args.fps, fps_window=args.fps_window)
    except ValueError as e:
        parser.error(str(e))
    for name in ("width", "height"):
        value = getattr(args, name)
        if value is not None and value <= 0:
            parser.error(f"--{name} must be positive")

    setup_logging(args.log_file, args.log_level)

    app = ASCIIWebcamApp(
        config=config,
        camera_id=args.camera,
        invert=args.invert,
        capture_width=args.width,
        capture_height=args.height
    )
    return app.run_camera(mock=args.mock, pattern=args.pattern)


if __name__ == "__main__":
    sys.exit(main())
