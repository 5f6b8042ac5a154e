"""
Command Registry — the shell's catalog of named commands.

Every command the shell can run is registered here with its name, the
minimum number of positional arguments it accepts, and its handler. The
registry serves two purposes:

1. VALIDATION: names are unique. The reserved built-ins (``exit`` and,
   when enabled, ``history``) are seeded first, so a host command that
   reuses one of those names fails exactly like any other collision.

2. DISPATCH: the dispatcher resolves the first token of a submitted line
   to a Command through ``lookup``.

Registration happens while the shell is being built. Once the shell seals
the registry it is read-only for the rest of the session.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional, TextIO

import structlog

from cmdshell.errors import DuplicateCommandError

logger = structlog.get_logger(__name__)

# handler(args, out): write output to ``out``, raise to report failure.
CommandHandler = Callable[[list[str], TextIO], None]


@dataclass(frozen=True)
class Command:
    """
    A registered command.

    ``min_args`` counts positional arguments only, not the command name.
    The shell never invokes the handler with fewer arguments than that.
    """
    name: str
    min_args: int
    handler: CommandHandler

    def __post_init__(self) -> None:
        if not self.name or any(ch.isspace() for ch in self.name):
            raise ValueError(f"Invalid command name {self.name!r}")
        if self.min_args < 0:
            raise ValueError(
                f"Command '{self.name}' has negative min_args ({self.min_args})"
            )


class CommandRegistry:
    """
    Central registry for all commands available to a shell.

    The registry supports:
    - Registering commands, rejecting name collisions
    - Looking up a command by name
    - Sealing, after which no further registrations are accepted
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._sealed = False

    def register(self, command: Command) -> None:
        """Register a command. Duplicate names raise DuplicateCommandError."""
        if self._sealed:
            raise RuntimeError(
                f"Cannot register '{command.name}': the command registry is sealed"
            )
        if command.name in self._commands:
            logger.warning("command_registry.name_collision", name=command.name)
            raise DuplicateCommandError(command.name)

        self._commands[command.name] = command
        logger.debug(
            "command_registry.registered",
            name=command.name,
            min_args=command.min_args,
        )

    def lookup(self, name: str) -> Optional[Command]:
        """Look up a command by name."""
        return self._commands.get(name)

    def seal(self) -> None:
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def names(self) -> list[str]:
        return sorted(self._commands)

    def __contains__(self, name: object) -> bool:
        return name in self._commands

    def __len__(self) -> int:
        return len(self._commands)
