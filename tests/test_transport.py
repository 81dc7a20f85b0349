"""Tests for the IRC connection and its line pumps."""

from __future__ import annotations

import asyncio

import pytest

from niichat.core.transport import IrcConnection
from niichat.errors import TransportError
from tests.conftest import FakeWriter


def _connection(lines: list[bytes] | None = None, writer: FakeWriter | None = None) -> IrcConnection:
    connection = IrcConnection("niibot", "oauth:secret", "#bar")
    reader = asyncio.StreamReader()
    for line in lines or []:
        reader.feed_data(line)
    reader.feed_eof()
    connection.reader = reader
    connection.writer = writer or FakeWriter()  # type: ignore[assignment]
    return connection


class TestHandshake:
    async def test_sends_login_lines_in_order(self) -> None:
        writer = FakeWriter()
        connection = _connection(writer=writer)
        await connection.handshake()
        assert writer.lines == [
            "PASS oauth:secret",
            "NICK niibot",
            "JOIN #bar",
            "CAP REQ :twitch.tv/tags",
        ]
        assert writer.buffer.endswith(b"\r\n")

    async def test_write_failure_is_fatal(self) -> None:
        connection = _connection(writer=FakeWriter(fail_after=1))
        with pytest.raises(TransportError, match="Handshake failed"):
            await connection.handshake()

    async def test_connect_failure_is_fatal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        async def refuse(*args, **kwargs):
            raise ConnectionRefusedError("refused")

        monkeypatch.setattr(asyncio, "open_connection", refuse)
        connection = IrcConnection("niibot", "oauth:secret", "bar")
        with pytest.raises(TransportError, match="Connecting to"):
            await connection.connect()

    def test_channel_hash_not_doubled(self) -> None:
        assert IrcConnection("a", "b", "bar").handshake_lines()[2] == "JOIN #bar"
        assert IrcConnection("a", "b", "#bar").handshake_lines()[2] == "JOIN #bar"


class TestInboundPump:
    async def test_forwards_trimmed_lines_until_eof(self) -> None:
        connection = _connection(
            [b"PING :tmi.twitch.tv\r\n", b"\r\n", b":foo!foo@foo PRIVMSG #bar :hi  \r\n"]
        )
        inbound: asyncio.Queue[str] = asyncio.Queue()
        await connection.inbound_pump(inbound)
        assert inbound.get_nowait() == "PING :tmi.twitch.tv"
        assert inbound.get_nowait() == ":foo!foo@foo PRIVMSG #bar :hi"
        assert inbound.empty()

    async def test_invalid_utf8_is_replaced(self) -> None:
        connection = _connection([b"PRIVMSG #bar :\xff\n"])
        inbound: asyncio.Queue[str] = asyncio.Queue()
        await connection.inbound_pump(inbound)
        assert inbound.get_nowait() == "PRIVMSG #bar :\ufffd"


class TestOutboundPump:
    async def test_writes_in_order(self) -> None:
        writer = FakeWriter()
        connection = _connection(writer=writer)
        outbound: asyncio.Queue[str] = asyncio.Queue()
        for line in ["PONG tmi.twitch.tv", "PRIVMSG #bar :one", "PRIVMSG #bar :two"]:
            outbound.put_nowait(line)

        task = asyncio.create_task(connection.outbound_pump(outbound))
        await asyncio.wait_for(outbound.join(), timeout=1)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert writer.lines == ["PONG tmi.twitch.tv", "PRIVMSG #bar :one", "PRIVMSG #bar :two"]

    async def test_write_failure_is_fatal(self) -> None:
        connection = _connection(writer=FakeWriter(fail_after=0))
        outbound: asyncio.Queue[str] = asyncio.Queue()
        outbound.put_nowait("PRIVMSG #bar :hi")
        with pytest.raises(TransportError, match="Writing to TCP failed"):
            await connection.outbound_pump(outbound)


class TestRun:
    async def test_ends_when_server_closes(self) -> None:
        writer = FakeWriter()
        connection = _connection([b"PING :tmi.twitch.tv\r\n"], writer=writer)
        inbound: asyncio.Queue[str] = asyncio.Queue()
        outbound: asyncio.Queue[str] = asyncio.Queue()

        await asyncio.wait_for(connection.run(inbound, outbound), timeout=1)

        assert inbound.get_nowait() == "PING :tmi.twitch.tv"
        assert writer.closed
        assert not connection.connected

    async def test_write_failure_ends_session(self) -> None:
        connection = IrcConnection("niibot", "oauth:secret", "bar")
        connection.reader = asyncio.StreamReader()  # never sends anything
        connection.writer = FakeWriter(fail_after=0)  # type: ignore[assignment]
        inbound: asyncio.Queue[str] = asyncio.Queue()
        outbound: asyncio.Queue[str] = asyncio.Queue()
        outbound.put_nowait("PRIVMSG #bar :hi")

        with pytest.raises(TransportError):
            await asyncio.wait_for(connection.run(inbound, outbound), timeout=1)
        assert connection.writer is None
