"""REPL launcher — turns CLI flags into a ShellConfig and runs the demo shell."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import click
from pydantic import ValidationError

if TYPE_CHECKING:
    from cmdshell.config import ShellConfig


def build_config(ctx_obj: dict[str, Any] | None = None) -> ShellConfig:
    """Build a ShellConfig from the environment, overridden by CLI flags."""
    from cmdshell.config import ShellConfig

    ctx_obj = ctx_obj or {}
    overrides: dict[str, Any] = {}
    if ctx_obj.get("prompt") is not None:
        overrides["prompt"] = ctx_obj["prompt"]
    if ctx_obj.get("interval") is not None:
        overrides["render_interval"] = ctx_obj["interval"]
    if ctx_obj.get("no_history_command"):
        overrides["history_command"] = False
    if ctx_obj.get("verbose"):
        overrides["log_level"] = "DEBUG"
    return ShellConfig(**overrides)


def run_repl(ctx_obj: dict[str, Any] | None = None) -> None:
    """Launch the interactive demo shell."""
    from cmdshell.errors import TerminalUnavailableError
    from cmdshell.main import run_demo

    try:
        config = build_config(ctx_obj)
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    try:
        run_demo(config)
    except TerminalUnavailableError as e:
        raise click.ClickException(str(e)) from e
