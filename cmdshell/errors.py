"""Exceptions raised by the shell core and its terminal adapters."""

from __future__ import annotations


class ShellError(Exception):
    """Base class for errors the shell reports to the user."""


class DuplicateCommandError(ShellError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'command "{name}" is already registered')


class CommandNotFoundError(ShellError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'command "{name}" not found')


class InsufficientArgumentsError(ShellError):
    def __init__(self, name: str, required: int, got: int) -> None:
        self.name = name
        self.required = required
        self.got = got
        super().__init__(
            f'command "{name}" needs {required} arguments, but {got} were provided'
        )


class KeyDecodeError(ShellError):
    """Raw terminal input could not be decoded into key events."""


class TerminalUnavailableError(ShellError):
    """The keystroke source needs an interactive POSIX terminal."""
