"""Command cooldown tracking."""

from __future__ import annotations

import copy
import logging
import threading

from niichat.shared.models.command_config import CooldownScope

LOGGER = logging.getLogger("CommandGuard")

# Scope key shared by every chatter for global cooldowns
GLOBAL_KEY = "global"


class CooldownTracker:
    """In-memory cooldown table (reset on bot restart).

    Layout: ``{token: {scope_key: last_trigger_unix_seconds}}`` where the scope key
    is the chatter's display name or ``"global"``. The table is only changed by
    :meth:`try_acquire`, which checks and records under one lock.
    """

    def __init__(self) -> None:
        self._last_triggers: dict[str, dict[str, int]] = {}
        self._lock = threading.Lock()

    def try_acquire(
        self,
        token: str,
        scope: CooldownScope | str,
        display_name: str,
        cooldown_seconds: int,
        now: int,
    ) -> bool:
        """Return True and record ``now`` if the command may trigger.

        Returns False without touching the table when the command is still on
        cooldown or ``scope`` is not a known cooldown scope.
        """
        if scope == CooldownScope.USER:
            key = display_name
        elif scope == CooldownScope.GLOBAL:
            key = GLOBAL_KEY
        else:
            LOGGER.error(f"Invalid cooldown_scope: {scope}")
            return False

        with self._lock:
            triggers = self._last_triggers.setdefault(token, {})
            last = triggers.get(key)
            if last is not None and now - last < cooldown_seconds:
                if key == GLOBAL_KEY:
                    LOGGER.info(f"Command {token} is still under global cooldown")
                else:
                    LOGGER.info(f"User: {display_name} is still under cooldown for {token} command")
                return False

            triggers[key] = now
            return True

    def last_trigger(self, token: str, key: str) -> int | None:
        with self._lock:
            return self._last_triggers.get(token, {}).get(key)

    def snapshot(self) -> dict[str, dict[str, int]]:
        """Return a copy of the table for inspection."""
        with self._lock:
            return copy.deepcopy(self._last_triggers)

    def __len__(self) -> int:
        with self._lock:
            return sum(len(triggers) for triggers in self._last_triggers.values())
