"""
Built-in Commands — the commands every shell ships with.

``exit`` closes the shell. ``history`` lists previously submitted lines,
newest first. Both are registered before any host command, which reserves
their names: a host command called ``exit`` is a duplicate.
"""

from __future__ import annotations

from typing import Callable, Sequence, TextIO

from cmdshell.commands.registry import Command, CommandRegistry

EXIT_COMMAND = "exit"
HISTORY_COMMAND = "history"


def register_builtin_commands(
    registry: CommandRegistry,
    *,
    request_shutdown: Callable[[], None],
    get_history: Callable[[], Sequence[str]],
    include_history: bool = True,
) -> None:
    """Register the built-in commands, bound to the owning shell's callbacks."""

    def _exit(args: list[str], out: TextIO) -> None:
        request_shutdown()

    registry.register(Command(EXIT_COMMAND, 0, _exit))

    if not include_history:
        return

    def _history(args: list[str], out: TextIO) -> None:
        for index, line in enumerate(get_history()):
            out.write(f"{index:>4}  {line}\n")

    registry.register(Command(HISTORY_COMMAND, 0, _history))
