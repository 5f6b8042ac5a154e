"""
Shell — the event loop that ties the pieces together.

Two activities run concurrently:

  - A reader thread blocks on the keystroke source and hands every decoded
    KeyEvent to the event loop through an unbounded asyncio.Queue, in the
    order the keys arrived. The reader owns no shell state.
  - The asyncio loop drains that queue without blocking, routes each key
    to the line buffer or the dispatcher, and redraws the prompt once per
    render tick.

All mutation of the line buffer, history and registry happens on the loop,
so nothing here needs a lock. The redraw is level-triggered: whatever the
buffer holds at tick time is drawn, so a late or skipped frame is only
stale for one interval.

The shell starts RUNNING and moves to TERMINATING exactly once: through the
``exit`` command, an interrupt key, or the keystroke source running dry.
Errors never terminate it.
"""

from __future__ import annotations

import asyncio
import threading
from typing import Iterable, Iterator, Optional, Protocol

import structlog

from cmdshell.commands.builtin import register_builtin_commands
from cmdshell.commands.registry import Command, CommandRegistry
from cmdshell.config import ShellConfig
from cmdshell.dispatcher import Dispatcher
from cmdshell.errors import KeyDecodeError, ShellError
from cmdshell.history import LineBuffer
from cmdshell.types import DispatchResult, KeyEvent, KeyKind, ShellState

logger = structlog.get_logger(__name__)

# How long shutdown waits for the reader thread to let go of the key source.
_READER_JOIN_TIMEOUT = 1.0


class KeySource(Protocol):
    def __iter__(self) -> Iterator[KeyEvent]: ...

    def close(self) -> None: ...


class Display(Protocol):
    def redraw(self, prefix: str, text: str) -> None: ...

    def write(self, text: str) -> None: ...

    def error(self, message: str) -> None: ...


class Shell:
    """
    An interactive command shell.

    Host commands are registered once, at construction, after the built-in
    ``exit`` and ``history`` commands. A name collision raises
    DuplicateCommandError and no shell is built.
    """

    def __init__(
        self,
        commands: Iterable[Command] = (),
        *,
        config: Optional[ShellConfig] = None,
        display: Optional[Display] = None,
    ):
        self._config = config if config is not None else ShellConfig()
        if display is None:
            from cmdshell.terminal import TerminalDisplay

            display = TerminalDisplay()
        self._display = display
        self._buffer = LineBuffer()

        self._registry = CommandRegistry()
        register_builtin_commands(
            self._registry,
            request_shutdown=self.request_shutdown,
            get_history=lambda: self._buffer.history,
            include_history=self._config.history_command,
        )
        for command in commands:
            self._registry.register(command)
        self._registry.seal()

        self._dispatcher = Dispatcher(self._registry, self._buffer, write=self._display.write)
        self._state = ShellState.RUNNING
        self._shutdown_event = asyncio.Event()
        logger.info("shell.initialized", commands=self._registry.names())

    @property
    def state(self) -> ShellState:
        return self._state

    @property
    def buffer(self) -> LineBuffer:
        return self._buffer

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    @property
    def history(self) -> tuple[str, ...]:
        return self._buffer.history

    # ------------------------------------------------------------------
    # Key routing
    # ------------------------------------------------------------------

    def handle_key(self, event: KeyEvent) -> Optional[DispatchResult]:
        """Apply one key event. Returns the dispatch result for a successful Enter."""
        if self._state is ShellState.TERMINATING:
            return None

        if event.error is not None:
            logger.warning("shell.key_decode_error", error=str(event.error))
            self._display.error(f"Input error: {event.error}")
            return None

        kind = event.kind
        if kind is KeyKind.CHAR:
            self._buffer.append(event.char)
        elif kind is KeyKind.BACKSPACE:
            self._buffer.backspace()
        elif kind is KeyKind.UP:
            self._buffer.history_up()
        elif kind is KeyKind.DOWN:
            self._buffer.history_down()
        elif kind is KeyKind.ENTER:
            return self._submit()
        elif kind is KeyKind.INTERRUPT:
            self.request_shutdown()
        return None

    def _submit(self) -> Optional[DispatchResult]:
        line = self._buffer.effective_input()
        try:
            return self._dispatcher.submit(line)
        except ShellError as e:
            logger.info("shell.dispatch_rejected", error=str(e))
            self._display.error(str(e))
        except Exception as e:
            logger.error("shell.handler_failed", error=str(e), exc_info=True)
            self._display.error(f"Error: {e}")
        return None

    def render(self) -> None:
        self._display.redraw(self._config.prompt, self._buffer.effective_input())

    # ------------------------------------------------------------------
    # Event loop
    # ------------------------------------------------------------------

    async def run(self, source: Optional[KeySource] = None) -> None:
        """
        Run until shutdown is requested.

        Without an explicit source, keys are read from the process's
        terminal. The source is closed and the reader thread is
        joined before this returns.
        """
        if self._state is ShellState.TERMINATING:
            raise RuntimeError("This shell has already terminated")
        if source is None:
            from cmdshell.terminal import TerminalKeySource

            source = TerminalKeySource()

        loop = asyncio.get_running_loop()
        events: asyncio.Queue[KeyEvent] = asyncio.Queue()
        reader = threading.Thread(
            target=self._read_keys,
            args=(source, loop, events),
            name="cmdshell-keys",
            daemon=True,
        )
        reader.start()
        logger.info("shell.started", render_interval=self._config.render_interval)

        try:
            while not self._shutdown_event.is_set():
                self._drain(events)
                if self._shutdown_event.is_set():
                    break
                self.render()
                try:
                    await asyncio.wait_for(
                        self._shutdown_event.wait(),
                        timeout=self._config.render_interval,
                    )
                except asyncio.TimeoutError:
                    pass
        finally:
            self.request_shutdown()
            source.close()
            reader.join(timeout=_READER_JOIN_TIMEOUT)
            if reader.is_alive():
                logger.warning("shell.reader_still_running", timeout=_READER_JOIN_TIMEOUT)
            self._display.write("\n")
            logger.info("shell.stopped", history_size=len(self._buffer.history))

    def _drain(self, events: asyncio.Queue[KeyEvent]) -> None:
        while not self._shutdown_event.is_set():
            try:
                event = events.get_nowait()
            except asyncio.QueueEmpty:
                return
            self.handle_key(event)

    @staticmethod
    def _read_keys(
        source: KeySource,
        loop: asyncio.AbstractEventLoop,
        events: asyncio.Queue[KeyEvent],
    ) -> None:
        """Reader thread body: forward every key, then an interrupt at end of input."""

        def _hand_off(event: KeyEvent) -> bool:
            try:
                loop.call_soon_threadsafe(events.put_nowait, event)
            except RuntimeError:
                # The loop is already closed; nobody is listening.
                return False
            return True

        try:
            for event in source:
                if not _hand_off(event):
                    return
        except Exception as e:
            logger.warning("shell.key_source_failed", error=str(e))
            _hand_off(KeyEvent.failed(KeyDecodeError(str(e))))
        _hand_off(KeyEvent.named(KeyKind.INTERRUPT))

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    def request_shutdown(self) -> None:
        """Move to TERMINATING. Later requests are no-ops."""
        if self._state is ShellState.TERMINATING:
            return
        self._state = ShellState.TERMINATING
        self._shutdown_event.set()
        logger.info("shell.shutdown_requested")
