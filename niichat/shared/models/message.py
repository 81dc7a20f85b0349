"""Data models for decoded IRC lines and outgoing replies."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True)
class EmoteSpan:
    """Inclusive character offsets of one emote occurrence in the message text."""

    start: int
    end: int


# badge name -> tier, e.g. {"subscriber": "12"}
Badges: TypeAlias = dict[str, str]
# emote id -> spans in the message text
Emotes: TypeAlias = dict[str, list[EmoteSpan]]
TagValue: TypeAlias = str | Badges | Emotes


@dataclass
class Source:
    """Message origin, ``nick!user@host`` or just ``host``."""

    host: str
    nick: str | None = None


@dataclass
class BotCommand:
    """A ``!token params...`` command found in chat text."""

    token: str
    params: str | None = None


@dataclass
class ParsedCommand:
    """The IRC verb and the verb-specific fields we care about."""

    verb: str
    channel: str | None = None
    cap_ack: bool | None = None
    bot_command: BotCommand | None = None


@dataclass
class ParsedMessage:
    """A decoded IRC line. Every segment is optional."""

    tags: dict[str, TagValue] | None = None
    source: Source | None = None
    command: ParsedCommand | None = None
    parameters: str | None = None

    @property
    def display_name(self) -> str | None:
        if not self.tags:
            return None
        value = self.tags.get("display-name")
        return value if isinstance(value, str) and value else None


@dataclass(frozen=True)
class Reply:
    """A chat message to send to a channel."""

    channel: str
    message: str

    def __str__(self) -> str:
        return f"PRIVMSG {self.channel} :{self.message}"
