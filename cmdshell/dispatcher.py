"""
Dispatcher — turns a submitted line into a command invocation.

A submission runs through resolve → validate → invoke → display → commit:

1. The line is split on runs of whitespace. A blank line does nothing
   beyond starting a fresh prompt line.
2. The first token names the command; the rest are positional arguments.
3. Unknown names and too few arguments are reported as ShellErrors before
   the handler is touched.
4. The handler writes into an in-memory sink, never straight to the
   terminal, so its output cannot interleave with the prompt redraw.
5. Only a handler that returned normally gets its line committed to
   history. Errors leave the line in the prompt for correction.
"""

from __future__ import annotations

import io
from typing import Callable, Optional

import structlog

from cmdshell.commands.registry import CommandRegistry
from cmdshell.errors import CommandNotFoundError, InsufficientArgumentsError
from cmdshell.history import LineBuffer
from cmdshell.types import DispatchResult

logger = structlog.get_logger(__name__)


def tokenize(line: str) -> list[str]:
    """Split a line into tokens; consecutive whitespace never yields empty tokens."""
    return line.split()


def format_output(captured: str) -> str:
    """
    Lay out captured handler output below the prompt line.

    Non-empty output starts on a new line and always ends with exactly the
    newline it needs; empty output produces nothing.
    """
    if not captured:
        return ""
    if captured.endswith("\n"):
        return "\n" + captured
    return "\n" + captured + "\n"


class Dispatcher:
    """Resolves submitted lines against a registry and runs them."""

    def __init__(
        self,
        registry: CommandRegistry,
        buffer: LineBuffer,
        write: Optional[Callable[[str], None]] = None,
    ) -> None:
        self._registry = registry
        self._buffer = buffer
        self._write = write

    def _emit(self, text: str) -> None:
        if text and self._write is not None:
            self._write(text)

    def submit(self, raw_line: str) -> DispatchResult:
        """
        Dispatch one line.

        Raises CommandNotFoundError or InsufficientArgumentsError for lines
        that cannot run, and re-raises whatever the handler raised.
        """
        tokens = tokenize(raw_line)
        if not tokens:
            self._buffer.reset()
            self._emit("\n")
            return DispatchResult()

        name, args = tokens[0], tokens[1:]

        command = self._registry.lookup(name)
        if command is None:
            raise CommandNotFoundError(name)

        if len(args) < command.min_args:
            raise InsufficientArgumentsError(name, command.min_args, len(args))

        sink = io.StringIO()
        command.handler(args, sink)

        output = format_output(sink.getvalue())
        self._emit(output)

        self._buffer.commit(raw_line)
        logger.info("dispatcher.dispatched", command=name, arg_count=len(args))
        return DispatchResult(name=name, args=args, output=output, committed=True)
