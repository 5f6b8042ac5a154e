"""
cmdshell — an embeddable interactive command shell.

A host program hands the shell a set of named commands; the shell reads raw
keystrokes, keeps an editable prompt line with scrollable history, and runs
each submitted line against those commands, capturing their output.

Components (bottom to top):
    1. Command registry (names, argument minimums, handlers)
    2. Line buffer (prompt text + newest-first history navigation)
    3. Dispatcher (tokenize, resolve, validate, invoke, commit)
    4. Shell (key routing, render tick, shutdown)
"""

from cmdshell.commands.registry import Command, CommandRegistry
from cmdshell.config import ShellConfig
from cmdshell.errors import (
    CommandNotFoundError,
    DuplicateCommandError,
    InsufficientArgumentsError,
    ShellError,
)
from cmdshell.shell import Shell

__version__ = "0.1.0"

__all__ = [
    "Command",
    "CommandRegistry",
    "CommandNotFoundError",
    "DuplicateCommandError",
    "InsufficientArgumentsError",
    "Shell",
    "ShellConfig",
    "ShellError",
]
