"""
Core data types shared across cmdshell components.

Key events cross the thread boundary between the keystroke reader and the
event loop, and dispatch results cross from the dispatcher back to the loop.
They live here rather than in a specific component to avoid circular imports.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class KeyKind(str, Enum):
    """Decoded key categories the event loop knows how to route."""
    CHAR = "char"
    ENTER = "enter"
    BACKSPACE = "backspace"
    UP = "up"
    DOWN = "down"
    INTERRUPT = "interrupt"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class KeyEvent:
    """
    A single decoded keystroke.

    ``char`` holds the text for CHAR events and is empty otherwise.  A key
    source that failed to decode some input emits an event carrying
    ``error`` instead of dropping the bytes silently.
    """
    kind: KeyKind
    char: str = ""
    error: Optional[Exception] = None

    @classmethod
    def text(cls, char: str) -> "KeyEvent":
        return cls(KeyKind.CHAR, char)

    @classmethod
    def named(cls, kind: KeyKind) -> "KeyEvent":
        return cls(kind)

    @classmethod
    def failed(cls, error: Exception) -> "KeyEvent":
        return cls(KeyKind.UNKNOWN, error=error)


class ShellState(str, Enum):
    RUNNING = "running"
    TERMINATING = "terminating"


@dataclass
class DispatchResult:
    """Outcome of one submitted line.

    ``name`` is None for a blank submission.  ``output`` is the formatted
    text that was emitted to the display (empty when the command wrote
    nothing).
    """
    name: Optional[str] = None
    args: list[str] = field(default_factory=list)
    output: str = ""
    committed: bool = False

    @property
    def is_empty(self) -> bool:
        return self.name is None
