"""Decode raw Twitch IRC lines into ``ParsedMessage`` structures.

Line layout::

    [@tags ][:source ]COMMAND [args...][ :parameters]

Every segment is optional. Parsing never raises: malformed input produces a
partially populated (or empty) message.
"""

from __future__ import annotations

import logging

from niichat.shared.models.message import (
    Badges,
    BotCommand,
    EmoteSpan,
    Emotes,
    ParsedCommand,
    ParsedMessage,
    Source,
    TagValue,
)

LOGGER = logging.getLogger("Bot.Parser")

# Verbs whose second token is the channel
CHANNEL_VERBS = frozenset(
    {"JOIN", "PART", "NOTICE", "CLEARCHAT", "HOSTTARGET", "PRIVMSG", "USERSTATE", "ROOMSTATE"}
)
PLAIN_VERBS = frozenset({"PING", "GLOBALUSERSTATE", "RECONNECT"})
# Numeric/info replies sent after login that carry nothing we act on
IGNORED_VERBS = frozenset({"421", "002", "003", "004", "353", "366", "372", "375", "376"})


def parse_message(raw_line: str) -> ParsedMessage:
    """Parse one IRC line (without the trailing newline)."""
    message = ParsedMessage()
    rest = raw_line

    # Tags
    if rest.startswith("@"):
        raw_tags, sep, remainder = rest.partition(" ")
        if sep:
            message.tags = parse_tags(raw_tags[1:])
            rest = remainder

    # Source
    if rest.startswith(":"):
        raw_source, sep, remainder = rest.partition(" ")
        if sep:
            message.source = parse_source(raw_source[1:])
            rest = remainder

    # Command and parameters
    raw_command, sep, parameters = rest.partition(":")
    message.command = parse_command(raw_command.strip())
    if sep:
        message.parameters = parameters

    if message.command and message.parameters and message.parameters.startswith("!"):
        message.command.bot_command = parse_parameters(message.parameters)

    return message


def parse_tags(raw_tags: str) -> dict[str, TagValue]:
    """Parse ``key=value;key2=value2`` into a dict.

    ``badges`` and ``emotes`` get structured values, every other tag stays a string.
    """
    tags: dict[str, TagValue] = {}
    for tag in raw_tags.split(";"):
        key, _, value = tag.partition("=")
        if key == "badges":
            tags[key] = parse_badges(value)
        elif key == "emotes":
            tags[key] = parse_emotes(value)
        else:
            tags[key] = value
    return tags


def parse_badges(value: str) -> Badges:
    """``broadcaster/1,subscriber/12`` -> ``{"broadcaster": "1", "subscriber": "12"}``"""
    badges: Badges = {}
    for badge in value.split(","):
        name, sep, tier = badge.partition("/")
        if sep:
            badges[name] = tier
    return badges


def parse_emotes(value: str) -> Emotes:
    """``25:0-4,12-16/1902:6-10`` -> ``{"25": [0-4, 12-16], "1902": [6-10]}``"""
    emotes: Emotes = {}
    if not value:
        return emotes

    for emote in value.split("/"):
        emote_id, sep, ranges = emote.partition(":")
        spans: list[EmoteSpan] = []
        if sep:
            for position in ranges.split(","):
                start, dash, end = position.partition("-")
                if not dash:
                    LOGGER.debug(f"Skipping malformed emote range '{position}'")
                    continue
                try:
                    spans.append(EmoteSpan(start=int(start), end=int(end)))
                except ValueError:
                    LOGGER.debug(f"Skipping malformed emote range '{position}'")
        emotes[emote_id] = spans
    return emotes


def parse_source(raw_source: str) -> Source:
    """``nick!nick@nick.tmi.twitch.tv`` or a bare server host."""
    parts = raw_source.split("!")
    if len(parts) == 2:
        return Source(nick=parts[0], host=parts[1])
    return Source(nick=None, host=raw_source)


def parse_command(raw_command: str) -> ParsedCommand | None:
    """Decode the verb segment. Returns None for verbs we don't handle."""
    parts = raw_command.split()
    if not parts:
        return None

    verb = parts[0]
    if verb in CHANNEL_VERBS or verb == "001":
        return ParsedCommand(verb=verb, channel=parts[1] if len(parts) > 1 else None)
    if verb in PLAIN_VERBS:
        return ParsedCommand(verb=verb)
    if verb == "CAP":
        return ParsedCommand(verb=verb, cap_ack=len(parts) > 2 and parts[2] == "ACK")
    if verb not in IGNORED_VERBS:
        LOGGER.debug(f"Unknown verb: {verb}")
    return None


def parse_parameters(parameters: str) -> BotCommand | None:
    """Split ``!token arg1  arg2`` into token ``token`` and params ``arg1 arg2``."""
    if not parameters.startswith("!"):
        return None

    parts = parameters[1:].split()
    if not parts:
        return None

    params = " ".join(parts[1:]) if len(parts) > 1 else None
    return BotCommand(token=parts[0], params=params)
