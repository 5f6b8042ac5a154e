"""
Line Buffer — the editable prompt line and its history.

The buffer owns three pieces of state: the live line being typed, the list
of previously submitted lines (newest first), and a navigation index into
that list. The index is HISTORY_SENTINEL while the user is editing live;
any other value means the prompt is showing ``history[index]``.

What the prompt shows (the effective input) is derived from that state.
Editing while browsing copies the browsed entry into the live line and
leaves browse mode, so stored history is never modified in place.

Navigation wraps instead of stopping at either end:
  - Up past the oldest entry returns to a blank live line.
  - Down from the live line jumps to the oldest entry.

Only the event loop thread touches a LineBuffer; it has no locking.
"""

from __future__ import annotations

import structlog

logger = structlog.get_logger(__name__)

HISTORY_SENTINEL = -1


class LineBuffer:
    """Input line plus newest-first history with wrap-around navigation."""

    def __init__(self) -> None:
        self._current_input = ""
        self._history: list[str] = []
        self._history_index = HISTORY_SENTINEL

    @property
    def current_input(self) -> str:
        return self._current_input

    @property
    def history_index(self) -> int:
        return self._history_index

    @property
    def history(self) -> tuple[str, ...]:
        """Snapshot of submitted lines, most recent first."""
        return tuple(self._history)

    @property
    def is_browsing(self) -> bool:
        return self._history_index != HISTORY_SENTINEL

    def effective_input(self) -> str:
        """
        Return the text the prompt should show.

        While browsing, the live line is refreshed to the browsed entry so
        that the next edit starts from it.
        """
        if self._history_index == HISTORY_SENTINEL:
            return self._current_input
        entry = self._history[self._history_index]
        self._current_input = entry
        return entry

    def _replace_input(self, text: str) -> None:
        self._current_input = text
        self._history_index = HISTORY_SENTINEL

    def append(self, text: str) -> None:
        self._replace_input(self.effective_input() + text)

    def backspace(self) -> None:
        """Drop the last character. Empty input is left alone."""
        text = self.effective_input()
        if text:
            self._replace_input(text[:-1])
        elif self.is_browsing:
            self._replace_input("")

    def history_up(self) -> None:
        """Step to the next older entry, or back to a blank line past the oldest."""
        self._history_index += 1
        if self._history_index >= len(self._history):
            self._replace_input("")
            return
        self._current_input = self._history[self._history_index]

    def history_down(self) -> None:
        """Step to the next newer entry; from the live line, jump to the oldest."""
        self._history_index -= 1
        if self._history_index < HISTORY_SENTINEL:
            self._history_index = len(self._history) - 1
        if self._history_index != HISTORY_SENTINEL:
            self._current_input = self._history[self._history_index]

    def commit(self, raw_line: str) -> None:
        """Record a dispatched line as the newest history entry and clear the prompt."""
        self._history.insert(0, raw_line)
        self._replace_input("")
        logger.debug("line_buffer.committed", history_size=len(self._history))

    def reset(self) -> None:
        """Clear the prompt back to a blank live line without touching history."""
        self._replace_input("")
