"""
Shared fixtures for the cmdshell test suite.

Provides a recording display and a small set of host commands so individual
test modules can focus on behavior rather than setup.
"""

from __future__ import annotations

import os
from typing import TextIO

import pytest

from cmdshell.commands.registry import Command
from cmdshell.config import ShellConfig


class RecordingDisplay:
    """Display stand-in that remembers everything drawn on it."""

    def __init__(self) -> None:
        self.redraws: list[str] = []
        self.writes: list[str] = []
        self.errors: list[str] = []

    def redraw(self, prefix: str, text: str) -> None:
        self.redraws.append(prefix + text)

    def write(self, text: str) -> None:
        self.writes.append(text)

    def error(self, message: str) -> None:
        self.errors.append(message)


# ---------------------------------------------------------------------------
# Host command fixtures
# ---------------------------------------------------------------------------

class GreetRecorder:
    def __init__(self) -> None:
        self.calls: list[list[str]] = []

    def __call__(self, args: list[str], out: TextIO) -> None:
        self.calls.append(list(args))
        out.write(" ".join(args))


@pytest.fixture()
def greet() -> GreetRecorder:
    return GreetRecorder()


@pytest.fixture()
def greet_command(greet: GreetRecorder) -> Command:
    """``greet`` needs at least one argument and echoes its arguments."""
    return Command("greet", 1, greet)


@pytest.fixture()
def display() -> RecordingDisplay:
    return RecordingDisplay()


@pytest.fixture()
def fast_config() -> ShellConfig:
    return ShellConfig(prompt="> ", render_interval=0.005)


# ---------------------------------------------------------------------------
# Pseudo-terminal
# ---------------------------------------------------------------------------

@pytest.fixture()
def pty_pair():
    """``(master_fd, slave_file)`` for a fresh pseudo-terminal."""
    pty = pytest.importorskip("pty")
    pytest.importorskip("termios")
    master, slave = pty.openpty()
    slave_file = os.fdopen(slave, "r")
    try:
        yield master, slave_file
    finally:
        slave_file.close()
        os.close(master)
