"""Command system — what the shell can run."""
from cmdshell.commands.builtin import register_builtin_commands
from cmdshell.commands.registry import Command, CommandHandler, CommandRegistry

__all__ = ["Command", "CommandHandler", "CommandRegistry", "register_builtin_commands"]
