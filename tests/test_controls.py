"""
Tests for key bindings and keyboard input.
"""

import pytest

from ascii_webcam.controls import Command, KeyboardInput, command_for_key
from ascii_webcam.errors import InputError

from fakes import FakeKey, FakeTerminal


class TestKeybindings:
    def test_quit(self):
        assert command_for_key("q") is Command.QUIT

    def test_toggle_help(self):
        assert command_for_key("?") is Command.TOGGLE_HELP

    @pytest.mark.parametrize("key", ["Q", "h", " ", "KEY_ESCAPE", ""])
    def test_unbound(self, key):
        assert command_for_key(key) is None


class TestKeyboardInput:
    def test_returns_key(self):
        term = FakeTerminal(keys=[FakeKey("q")])
        assert KeyboardInput(term).poll() == "q"

    def test_no_key(self):
        assert KeyboardInput(FakeTerminal(), poll_interval=0.001).poll() is None

    def test_sequence_reported_by_name(self):
        term = FakeTerminal(keys=[FakeKey("\x1b[A", name="KEY_UP")])
        assert KeyboardInput(term).poll() == "KEY_UP"

    def test_read_failure(self):
        term = FakeTerminal(inkey_error=OSError("stdin closed"))
        with pytest.raises(InputError):
            KeyboardInput(term).poll()
