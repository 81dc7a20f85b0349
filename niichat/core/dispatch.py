"""Turn ``!token params`` chat commands into replies."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from niichat.shared.models.command_config import CommandDefinition
from niichat.shared.models.message import BotCommand, Reply
from niichat.shared.placeholders import fill_placeholders, replace_sender
from niichat.shared.repositories.command_config import CommandRegistry

from .guards import CooldownTracker

LOGGER = logging.getLogger("Bot.Dispatch")


class CommandDispatcher:
    """Look up a command, apply its cooldown and render its response.

    The dispatcher owns the cooldown tracker; nothing else mutates it.
    """

    def __init__(
        self,
        registry: CommandRegistry,
        cooldowns: CooldownTracker | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.registry = registry
        self.cooldowns = cooldowns or CooldownTracker()
        self._clock = clock

    def dispatch(self, bot_command: BotCommand, display_name: str, channel: str) -> Reply | None:
        command = self.registry.find(bot_command.token)
        if command is None:
            LOGGER.warning(f"Command {bot_command.token} not found")
            return None

        response = replace_sender(command.response_template, display_name)

        if not self._check_cooldown(command, display_name):
            return None

        response = fill_placeholders(response, command.placeholders, bot_command.params)

        LOGGER.info(f"Handled: {bot_command.token} - {bot_command.params or ''}")
        return Reply(channel=channel, message=response)

    def _check_cooldown(self, command: CommandDefinition, display_name: str) -> bool:
        return self.cooldowns.try_acquire(
            command.token,
            command.cooldown_scope,
            display_name,
            command.cooldown_seconds,
            int(self._clock()),
        )
