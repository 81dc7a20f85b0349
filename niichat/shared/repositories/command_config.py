"""Load and validate command definitions from the commands JSON file.

File shape::

    [
        {
            "name": "hello {who}",
            "response": "Hi {who}, from {sender}!",
            "cooldown_in_s": "30",
            "cooldown_scope": "user"
        }
    ]
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError

from niichat.errors import CommandConfigError
from niichat.shared.models.command_config import CommandDefinition, CooldownScope
from niichat.shared.placeholders import extract_placeholders

logger = logging.getLogger(__name__)


class CommandRecord(BaseModel):
    """One entry of the commands file, as written on disk."""

    model_config = ConfigDict(extra="ignore")

    name: str
    response: str
    cooldown_in_s: str | int
    # Matched exactly; unknown scopes are rejected when the command triggers
    cooldown_scope: str

    def to_definition(self) -> CommandDefinition:
        scope: CooldownScope | str
        try:
            scope = CooldownScope(self.cooldown_scope)
        except ValueError:
            scope = self.cooldown_scope
        return CommandDefinition(
            name=self.name,
            response_template=self.response,
            cooldown_seconds=_parse_cooldown(self.cooldown_in_s),
            cooldown_scope=scope,
        )


_RECORDS = TypeAdapter(list[CommandRecord])


def _parse_cooldown(value: str | int) -> int:
    """Parse a non-negative cooldown; anything unparseable means no cooldown."""
    try:
        seconds = int(str(value).strip())
    except ValueError:
        return 0
    return seconds if seconds >= 0 else 0


def validate_command_placeholders(command: CommandDefinition) -> None:
    """Name and response must use the same placeholders, ``{sender}`` aside."""
    name_placeholders = set(extract_placeholders(command.name))
    response_placeholders = set(extract_placeholders(command.response_template))

    if name_placeholders != response_placeholders:
        raise CommandConfigError(
            f"Placeholder mismatch in command '{command.name}': "
            f"{sorted(name_placeholders)} (name) != {sorted(response_placeholders)} (response)"
        )


class CommandRegistry:
    """Ordered, read-only collection of command definitions."""

    def __init__(self, commands: Iterable[CommandDefinition]) -> None:
        self._commands: tuple[CommandDefinition, ...] = tuple(commands)
        for command in self._commands:
            validate_command_placeholders(command)

    def find(self, token: str) -> CommandDefinition | None:
        """Return the first command whose name starts with ``token``."""
        for command in self._commands:
            if command.token == token:
                return command
        return None

    def __iter__(self) -> Iterator[CommandDefinition]:
        return iter(self._commands)

    def __len__(self) -> int:
        return len(self._commands)

    def __repr__(self) -> str:
        return f"CommandRegistry({[c.token for c in self._commands]!r})"


def parse_commands(raw: str | bytes) -> CommandRegistry:
    """Decode and validate the commands file contents."""
    try:
        records = _RECORDS.validate_json(raw)
    except ValidationError as e:
        raise CommandConfigError(f"Failed to parse commands: {e}") from e

    return CommandRegistry(record.to_definition() for record in records)


def load_commands(path: str | Path) -> CommandRegistry:
    """Read the commands file at ``path``. Any failure is a ``CommandConfigError``."""
    try:
        raw = Path(path).read_bytes()
    except OSError as e:
        raise CommandConfigError(f"Failed to open commands file {path}: {e}") from e

    registry = parse_commands(raw)
    logger.info(f"Validated and parsed {len(registry)} commands")
    return registry
