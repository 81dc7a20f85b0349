"""Shared data models for the chat bot."""

from .command_config import CommandDefinition, CooldownScope
from .message import (
    Badges,
    BotCommand,
    EmoteSpan,
    Emotes,
    ParsedCommand,
    ParsedMessage,
    Reply,
    Source,
    TagValue,
)

__all__ = [
    "Badges",
    "BotCommand",
    "CommandDefinition",
    "CooldownScope",
    "EmoteSpan",
    "Emotes",
    "ParsedCommand",
    "ParsedMessage",
    "Reply",
    "Source",
    "TagValue",
]
