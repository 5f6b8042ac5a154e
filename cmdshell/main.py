"""
Main — logging setup and the demo shell.

``configure_logging()`` is what every entry point calls before creating a
Shell. ``run_demo()`` builds a shell with a few sample commands; the
``cmdshell`` console script launches it through the Click CLI.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from typing import Optional, TextIO

import structlog
from rich.console import Console

from cmdshell.commands.registry import Command
from cmdshell.config import ShellConfig
from cmdshell.shell import Shell
from cmdshell.terminal import TerminalDisplay

_LOGGING_CONFIGURED = False


def configure_logging(level: int = logging.WARNING) -> None:
    """Send structlog events to stderr at ``level``; later calls only change the level."""
    global _LOGGING_CONFIGURED
    if not _LOGGING_CONFIGURED:
        # stderr keeps log lines out of the prompt and captured command output.
        logging.basicConfig(format="%(message)s", stream=sys.stderr)
        structlog.configure(
            processors=[
                structlog.stdlib.filter_by_level,
                structlog.stdlib.add_log_level,
                structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()),
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            logger_factory=structlog.stdlib.LoggerFactory(),
        )
        _LOGGING_CONFIGURED = True
    logging.getLogger().setLevel(level)


logger = structlog.get_logger(__name__)


def _hello(args: list[str], out: TextIO) -> None:
    out.write(f"Args: {args}")


def _greet(args: list[str], out: TextIO) -> None:
    out.write(f"Hello, {' '.join(args)}!\n")


def _echo(args: list[str], out: TextIO) -> None:
    out.write(" ".join(args))


def demo_commands() -> list[Command]:
    """Sample commands for trying the shell out."""
    return [
        Command("hello", 0, _hello),
        Command("greet", 1, _greet),
        Command("echo", 0, _echo),
    ]


def run_demo(config: Optional[ShellConfig] = None) -> None:
    """Run the demo shell on the current terminal until it exits."""
    config = config if config is not None else ShellConfig()
    configure_logging(config.log_level_number)

    display = TerminalDisplay(Console(highlight=False))
    shell = Shell(demo_commands(), config=config, display=display)
    display.console.print("[dim]Type 'exit' or press Ctrl+C to quit.[/dim]")
    try:
        asyncio.run(shell.run())
    except KeyboardInterrupt:
        pass
    logger.debug("demo.finished", history=list(shell.history))


def main() -> None:
    """Entry point for the cmdshell command."""
    from cmdshell.cli.app import cli

    cli()


if __name__ == "__main__":
    main()
