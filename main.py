#!/usr/bin/env python3
"""
ASCII Webcam - Live camera feed as ASCII art in the terminal.

Quick start:
    python main.py                    # Start camera mode
    python main.py --mock             # Test without camera
    python main.py --fps 15           # Lower target frame rate

For more options: python main.py --help
"""

import sys

from ascii_webcam.cli import main

if __name__ == "__main__":
    sys.exit(main())
