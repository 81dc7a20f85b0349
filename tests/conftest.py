"""Shared pytest fixtures for niichat tests."""

from __future__ import annotations

import asyncio

import pytest

from niichat.shared.models.command_config import CommandDefinition, CooldownScope
from niichat.shared.repositories.command_config import CommandRegistry


class FakeClock:
    def __init__(self, now: float = 1_700_000_000) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeWriter:
    """Stand-in for ``asyncio.StreamWriter`` that records written bytes."""

    def __init__(self, fail_after: int | None = None) -> None:
        self.buffer = bytearray()
        self.writes = 0
        self.fail_after = fail_after
        self.closed = False

    def write(self, data: bytes) -> None:
        if self.fail_after is not None and self.writes >= self.fail_after:
            raise ConnectionResetError("connection reset by peer")
        self.writes += 1
        self.buffer.extend(data)

    async def drain(self) -> None:
        await asyncio.sleep(0)

    def is_closing(self) -> bool:
        return self.closed

    def close(self) -> None:
        self.closed = True

    async def wait_closed(self) -> None:
        return None

    @property
    def lines(self) -> list[str]:
        return self.buffer.decode().split("\r\n")[:-1]


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def registry() -> CommandRegistry:
    return CommandRegistry(
        [
            CommandDefinition(
                name="hello {who}",
                response_template="Hi {who}, from {sender}!",
                cooldown_seconds=0,
                cooldown_scope=CooldownScope.USER,
            ),
            CommandDefinition(
                name="hug {target}",
                response_template="{sender} hugs {target}",
                cooldown_seconds=30,
                cooldown_scope=CooldownScope.USER,
            ),
            CommandDefinition(
                name="discord",
                response_template="Join the Discord!",
                cooldown_seconds=60,
                cooldown_scope=CooldownScope.GLOBAL,
            ),
            CommandDefinition(
                name="broken",
                response_template="never sent",
                cooldown_seconds=10,
                cooldown_scope="channel",
            ),
        ]
    )
