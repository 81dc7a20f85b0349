"""Shared repository layer for the chat bot."""

from .command_config import CommandRegistry, load_commands, parse_commands

__all__ = [
    "CommandRegistry",
    "load_commands",
    "parse_commands",
]
