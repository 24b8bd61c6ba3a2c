"""
Terminal display module for rendering ASCII art.

Handles full-screen terminal mode, screen layout, and drawing the
current render state. Layout, top to bottom:

    +- Stats ------------------+
    | FPS: 29.97               |
    +--------------------------+
    +- ASCII Webcam -----------+
    | <frame>                  |
    +--------------------------+
         Quit <q> | Help <?>
"""

import logging
import termios
from contextlib import ExitStack, contextmanager
from typing import List, Tuple

from .controls import HELP_ENTRIES
from .errors import SurfaceError

logger = logging.getLogger(__name__)

STATS_HEIGHT = 3
INSTRUCTIONS_HEIGHT = 1
INSTRUCTIONS = "Quit <q> | Help <?>"


@contextmanager
def terminal_session(term):
    """
    Put the terminal in full-screen cbreak mode for the duration.

    Alternate screen, cbreak input and the hidden cursor are each undone
    on every way out of the block, exceptions included.

    Raises:
        SurfaceError: If the terminal cannot be set up
    """
    with ExitStack() as stack:
        try:
            stack.enter_context(term.fullscreen())
            stack.enter_context(term.cbreak())
            stack.enter_context(term.hidden_cursor())
        except (OSError, termios.error) as e:
            raise SurfaceError(f"failed to set up terminal: {e}") from e
        logger.debug("Terminal session started")
        try:
            yield term
        finally:
            logger.debug("Terminal session ending")


def _boxed(lines: List[str], width: int, height: int, title: str = "") -> List[str]:
    """Frame lines in a border, truncating or padding to fill the box."""
    inner_width = width - 2
    inner_height = height - 2

    top = "┌" + (title[:inner_width]).ljust(inner_width, "─") + "┐"
    bottom = "└" + "─" * inner_width + "┘"

    body = []
    for i in range(inner_height):
        line = lines[i] if i < len(lines) else ""
        body.append("│" + line[:inner_width].ljust(inner_width) + "│")

    return [top] + body + [bottom]


class Display:
    """
    Terminal render surface.

    Composes the whole screen from a RenderState and writes it in one go.
    """

    def __init__(self, term, output_stream=None):
        """
        Initialize display.

        Args:
            term: blessed.Terminal used for sizing, cursor moves and styles
            output_stream: Output stream (defaults to the terminal's stream)
        """
        self.term = term
        self.output = output_stream or term.stream
        self._last_size = None

    def get_terminal_size(self) -> Tuple[int, int]:
        """Get terminal dimensions (columns, rows)."""
        try:
            return (self.term.width, self.term.height)
        except OSError as e:
            raise SurfaceError(f"failed to get terminal size: {e}") from e

    @staticmethod
    def content_size(width: int, height: int) -> Tuple[int, int]:
        """Size of the frame area inside the video panel of a screen."""
        return (width - 2, height - STATS_HEIGHT - INSTRUCTIONS_HEIGHT - 2)

    def get_frame_size(self) -> Tuple[int, int]:
        """
        Get the drawable frame area (columns, rows).

        Raises:
            SurfaceError: If the terminal is too small for a single cell
        """
        cols, rows = self.get_terminal_size()
        width, height = self.content_size(cols, rows)
        if width < 1 or height < 1:
            raise SurfaceError(f"terminal too small ({cols}x{rows})")
        return (width, height)

    def compose(self, state, width: int, height: int) -> List[str]:
        """
        Lay out the screen as plain text lines.

        Args:
            state: RenderState to show
            width: Terminal columns
            height: Terminal rows

        Returns:
            Exactly `height` lines of `width` characters
        """
        video_height = height - STATS_HEIGHT - INSTRUCTIONS_HEIGHT

        lines = _boxed([f"FPS: {state.fps:.2f}"], width, STATS_HEIGHT, "Stats")
        lines += _boxed(state.frame.split("\n"), width, video_height, "ASCII Webcam")
        lines.append(INSTRUCTIONS.center(width)[:width])

        if state.show_help:
            self._overlay_help(lines, width, height)

        return lines

    def _overlay_help(self, lines: List[str], width: int, height: int):
        """Draw the help box over the middle of the screen."""
        left, top = width // 4, height // 4
        box_width, box_height = width // 2, height // 2
        if box_width < 3 or box_height < 3:
            return

        text = ["Help", ""] + [f"Press {key} {what}" for key, what in HELP_ENTRIES]
        text = [t[:box_width - 2].center(box_width - 2) for t in text]
        box = _boxed(text, box_width, box_height, "Help")

        for i, row in enumerate(box):
            line = lines[top + i]
            lines[top + i] = line[:left] + row + line[left + box_width:]

    def draw(self, state):
        """
        Render the state to the terminal.

        Raises:
            SurfaceError: If the terminal cannot be sized or written
        """
        cols, rows = self.get_terminal_size()
        lines = self.compose(state, cols, rows)

        # Cells outside the new layout would keep stale text after a resize
        out = [self.term.home]
        if (cols, rows) != self._last_size:
            out.insert(0, self.term.clear)
            self._last_size = (cols, rows)

        for y, line in enumerate(lines):
            if y == 1:
                line = self.term.cyan(line)
            elif y == len(lines) - 1:
                # Writing the bottom-right cell would scroll the screen
                line = self.term.bold(line.rstrip()) + self.term.clear_eol
            out.append(self.term.move_xy(0, y) + line)

        try:
            self.output.write("".join(out))
            self.output.flush()
        except (OSError, ValueError) as e:
            raise SurfaceError(f"failed to render frame: {e}") from e
