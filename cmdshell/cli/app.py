"""CLI application — Click entry point for cmdshell.

Without a subcommand the demo shell starts. ``keys`` prints the key events
the terminal decoder produces, which helps when a terminal sends sequences
the shell does not recognize.
"""

from __future__ import annotations

from typing import Optional

import click


@click.group(invoke_without_command=True)
@click.option("--prompt", default=None, help="Prompt prefix (overrides CMDSHELL_PROMPT)")
@click.option(
    "--interval",
    type=float,
    default=None,
    help="Redraw interval in seconds (overrides CMDSHELL_RENDER_INTERVAL)",
)
@click.option("--no-history-command", is_flag=True, help="Do not register the history command")
@click.option("--verbose", "-v", is_flag=True, help="Log at debug level")
@click.pass_context
def cli(
    ctx: click.Context,
    prompt: Optional[str],
    interval: Optional[float],
    no_history_command: bool,
    verbose: bool,
) -> None:
    """cmdshell - an embeddable interactive command shell."""
    ctx.ensure_object(dict)
    ctx.obj["prompt"] = prompt
    ctx.obj["interval"] = interval
    ctx.obj["no_history_command"] = no_history_command
    ctx.obj["verbose"] = verbose

    if ctx.invoked_subcommand is None:
        from cmdshell.cli.repl import run_repl

        run_repl(ctx.obj)


@cli.command("keys")
def keys_cmd() -> None:
    """Print decoded key events until Ctrl+C."""
    from cmdshell.errors import TerminalUnavailableError
    from cmdshell.terminal import TerminalKeySource
    from cmdshell.types import KeyKind

    try:
        source = TerminalKeySource()
    except TerminalUnavailableError as e:
        raise click.ClickException(str(e)) from e

    click.echo("Press keys to see how they decode; Ctrl+C to stop.")
    try:
        for event in source:
            if event.error is not None:
                click.echo(f"error: {event.error}")
                continue
            if event.kind is KeyKind.CHAR:
                click.echo(f"char {event.char!r}")
            else:
                click.echo(event.kind.value)
            if event.kind is KeyKind.INTERRUPT:
                break
    finally:
        source.close()
