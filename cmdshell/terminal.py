"""
Terminal adapters — raw keystrokes in, prompt redraws out.

TerminalKeySource switches a POSIX tty into raw mode and decodes the bytes
it reads into KeyEvents. TerminalDisplay draws the prompt line and command
output through a Rich console. Neither holds any shell state; the event
loop drives both.
"""

from __future__ import annotations

import codecs
import os
import re
import select
import sys
import threading
from typing import Iterator, Optional, TextIO

import structlog
from rich.console import Console
from rich.control import Control
from rich.markup import escape as markup_escape
from rich.segment import ControlType

from cmdshell.errors import KeyDecodeError, TerminalUnavailableError
from cmdshell.types import KeyEvent, KeyKind

try:  # pragma: no cover - platform-dependent optional module
    import termios as _termios
    import tty as _tty
except Exception:  # pragma: no cover
    _termios = None
    _tty = None

logger = structlog.get_logger(__name__)

# ESC, optionally followed by a CSI sequence, an SS3 key, or one more byte (Alt+key).
_ESCAPE_RE = re.compile(r"\x1b(?:\[[0-?]*[ -/]*[@-~]|O.|.)?", re.DOTALL)
# An escape sequence cut off at the end of a read.
_PARTIAL_ESCAPE_RE = re.compile(r"\x1b(?:\[[0-?]*[ -/]*|O)?\Z")

_ESCAPE_KEYS: dict[str, KeyKind] = {
    "\x1b[A": KeyKind.UP,
    "\x1bOA": KeyKind.UP,
    "\x1b[B": KeyKind.DOWN,
    "\x1bOB": KeyKind.DOWN,
}

_CONTROL_KEYS: dict[str, KeyKind] = {
    "\r": KeyKind.ENTER,
    "\n": KeyKind.ENTER,
    "\x7f": KeyKind.BACKSPACE,
    "\x08": KeyKind.BACKSPACE,
    "\x03": KeyKind.INTERRUPT,  # Ctrl+C
    "\x1a": KeyKind.INTERRUPT,  # Ctrl+Z
}


class KeyDecoder:
    """
    Incremental raw-byte → KeyEvent decoder.

    UTF-8 characters split across reads are reassembled, and so are escape
    sequences: an incomplete trailing ``ESC``, ``ESC [`` or ``ESC O`` is
    held back and completed by the next read. Invalid UTF-8 produces a
    single event carrying a KeyDecodeError and the decoder starts over with
    the next read.
    """

    def __init__(self) -> None:
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="strict")
        self._pending = ""

    @property
    def pending(self) -> str:
        """Escape-sequence prefix waiting for the rest of its bytes."""
        return self._pending

    def feed(self, data: bytes) -> list[KeyEvent]:
        try:
            text = self._utf8.decode(data)
        except UnicodeDecodeError as e:
            self._utf8.reset()
            self._pending = ""
            return [KeyEvent.failed(KeyDecodeError(f"invalid terminal input: {e.reason}"))]
        text, self._pending = self._pending + text, ""
        return self._split_keys(text)

    def _split_keys(self, text: str) -> list[KeyEvent]:
        events: list[KeyEvent] = []
        i = 0
        while i < len(text):
            ch = text[i]
            if ch == "\x1b":
                if _PARTIAL_ESCAPE_RE.match(text, i):
                    self._pending = text[i:]
                    break
                match = _ESCAPE_RE.match(text, i)
                seq = match.group(0)
                events.append(KeyEvent.named(_ESCAPE_KEYS.get(seq, KeyKind.UNKNOWN)))
                i = match.end()
                continue
            if ch in _CONTROL_KEYS:
                events.append(KeyEvent.named(_CONTROL_KEYS[ch]))
                # Pasted CRLF is one Enter, not two.
                if ch == "\r" and text.startswith("\n", i + 1):
                    i += 1
            elif ch < " ":
                events.append(KeyEvent.named(KeyKind.UNKNOWN))
            else:
                events.append(KeyEvent.text(ch))
            i += 1
        return events


class TerminalKeySource:
    """
    Keystrokes read from a raw-mode terminal.

    Iterating blocks on the terminal, so the shell runs it on a reader
    thread. The iteration ends when the terminal reports end of input or
    the source is closed. ``close()`` wakes a blocked iteration without
    consuming pending input, restores the saved terminal mode, and is safe
    to call more than once.
    """

    def __init__(self, stream: Optional[TextIO] = None, *, chunk_size: int = 64) -> None:
        stream = stream if stream is not None else sys.stdin
        if _termios is None or _tty is None or not stream.isatty():
            raise TerminalUnavailableError("an interactive POSIX terminal is required")
        self._fd = stream.fileno()
        self._chunk_size = max(1, chunk_size)
        self._decoder = KeyDecoder()
        self._closed = False
        self._reading = False
        self._lock = threading.Lock()
        self._saved_attrs = _termios.tcgetattr(self._fd)
        # close() writes to this pipe so a reader parked in select() returns.
        self._wake_r, self._wake_w = os.pipe()
        self._enter_raw_mode()

    def _enter_raw_mode(self) -> None:
        _tty.setraw(self._fd, when=_termios.TCSANOW)
        # Keep output post-processing so "\n" still returns the carriage.
        attrs = _termios.tcgetattr(self._fd)
        attrs[_tty.OFLAG] |= _termios.OPOST | _termios.ONLCR
        _termios.tcsetattr(self._fd, _termios.TCSANOW, attrs)

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[KeyEvent]:
        with self._lock:
            if self._closed:
                return
            self._reading = True
        try:
            while not self._closed:
                try:
                    ready, _, _ = select.select([self._fd, self._wake_r], [], [])
                    if self._closed or self._wake_r in ready:
                        return
                    data = os.read(self._fd, self._chunk_size)
                except OSError as e:
                    if not self._closed:
                        logger.warning("terminal.read_failed", error=str(e))
                    return
                if not data:
                    return
                yield from self._decoder.feed(data)
        finally:
            with self._lock:
                self._reading = False
                if self._closed:
                    os.close(self._wake_r)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            reading = self._reading
        os.write(self._wake_w, b"\0")
        os.close(self._wake_w)
        try:
            _termios.tcsetattr(self._fd, _termios.TCSADRAIN, self._saved_attrs)
        except Exception as e:
            logger.debug("terminal.tty_restore_failed", error=str(e))
        if not reading:
            os.close(self._wake_r)


class TerminalDisplay:
    """Prompt redraw and plain output on a Rich console."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console if console is not None else Console(highlight=False)

    @property
    def console(self) -> Console:
        return self._console

    def redraw(self, prefix: str, text: str) -> None:
        """Clear the current line and draw ``prefix`` + ``text`` on it."""
        self._console.control(
            Control(ControlType.CARRIAGE_RETURN, (ControlType.ERASE_IN_LINE, 2))
        )
        self._console.out(prefix + text, end="", highlight=False)

    def write(self, text: str) -> None:
        self._console.out(text, end="", highlight=False)

    def error(self, message: str) -> None:
        self._console.print(f"\n[red]{markup_escape(message)}[/red]")
