"""Data models for command definitions loaded from the commands file."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from niichat.shared.placeholders import extract_placeholders


class CooldownScope(str, Enum):
    """Whether a cooldown applies per chatter or once for everyone."""

    USER = "user"
    GLOBAL = "global"


@dataclass(frozen=True)
class CommandDefinition:
    """A single chat command.

    ``name`` is the usage pattern, e.g. ``"hello {who}"``: its first word is the
    token typed after ``!`` and its placeholders are filled positionally from
    the chatter's arguments.
    """

    name: str
    response_template: str
    cooldown_seconds: int = 0
    # Unknown scopes are kept verbatim and rejected when the command triggers
    cooldown_scope: CooldownScope | str = CooldownScope.USER

    @property
    def token(self) -> str:
        parts = self.name.split()
        return parts[0] if parts else ""

    @property
    def placeholders(self) -> list[str]:
        return extract_placeholders(self.name)
