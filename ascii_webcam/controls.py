"""
Keyboard input for interactive mode.

An input source yields single key presses; the key map turns the ones
the app cares about into commands for the render loop.
"""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from .errors import InputError


class Command(Enum):
    """Effects a key press can have on the render loop."""
    QUIT = "quit"
    TOGGLE_HELP = "toggle_help"


KEYBINDINGS = {
    "q": Command.QUIT,
    "?": Command.TOGGLE_HELP,
}


def command_for_key(key: str) -> Optional[Command]:
    """Look up the command bound to a key, or None if it is unbound."""
    return KEYBINDINGS.get(key)


# Shown in the help overlay, in this order
HELP_ENTRIES = [
    ("q", "to quit the application"),
    ("?", "to toggle this help menu"),
]


class InputSource(ABC):
    """
    Source of key presses.

    poll() returns at most one key per call and must come back within its
    poll interval, so a caller is never starved by a silent keyboard.
    """

    @abstractmethod
    def poll(self) -> Optional[str]:
        """Return the next key, or None if nothing was pressed."""


class KeyboardInput(InputSource):
    """
    Reads keys from the terminal using blessed.

    The terminal must already be in cbreak mode (see
    display.terminal_session) so keys arrive unbuffered.
    """

    def __init__(self, term, poll_interval: float = 0.01):
        """
        Initialize keyboard input.

        Args:
            term: blessed.Terminal to read from
            poll_interval: Longest time a poll may block, in seconds
        """
        self.term = term
        self.poll_interval = poll_interval

    def poll(self) -> Optional[str]:
        try:
            key = self.term.inkey(timeout=self.poll_interval)
        except (OSError, ValueError) as e:
            raise InputError(f"failed to read keyboard: {e}") from e

        if not key:
            return None
        # Special keys (arrows, F-keys) have no binding; report them by name
        if key.is_sequence:
            return key.name
        return str(key)
