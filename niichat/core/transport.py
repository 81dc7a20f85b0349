"""TLS connection to the chat server and the inbound/outbound line pumps."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import ssl

from niichat.errors import TransportError

from .config import DEFAULT_IRC_HOST, DEFAULT_IRC_PORT, TAGS_CAPABILITY

LOGGER = logging.getLogger("Bot.Transport")


class IrcConnection:
    """One persistent connection to the IRC server.

    No reconnect: when the server closes the connection the session is over.
    """

    def __init__(
        self,
        nickname: str,
        oauth_token: str,
        channel: str,
        *,
        host: str = DEFAULT_IRC_HOST,
        port: int = DEFAULT_IRC_PORT,
        use_tls: bool = True,
    ) -> None:
        self.nickname = nickname
        self.oauth_token = oauth_token
        self.channel = channel.lstrip("#")
        self.host = host
        self.port = port
        self.use_tls = use_tls
        self.reader: asyncio.StreamReader | None = None
        self.writer: asyncio.StreamWriter | None = None

    @property
    def connected(self) -> bool:
        return self.writer is not None and not self.writer.is_closing()

    async def connect(self) -> None:
        """Open the connection and send the login handshake."""
        ssl_context = ssl.create_default_context() if self.use_tls else None
        try:
            self.reader, self.writer = await asyncio.open_connection(
                self.host, self.port, ssl=ssl_context
            )
        except (OSError, ssl.SSLError) as e:
            raise TransportError(f"Connecting to {self.host}:{self.port} failed: {e}") from e

        LOGGER.info(f"Connected to IRC server {self.host}:{self.port}")
        await self.handshake()

    def handshake_lines(self) -> list[str]:
        return [
            f"PASS {self.oauth_token}",
            f"NICK {self.nickname}",
            f"JOIN #{self.channel}",
            f"CAP REQ :{TAGS_CAPABILITY}",
        ]

    async def handshake(self) -> None:
        try:
            for line in self.handshake_lines():
                await self.send_line(line)
        except (OSError, ConnectionError) as e:
            raise TransportError(f"Handshake failed: {e}") from e
        LOGGER.info(f"Authenticated as {self.nickname}, joining #{self.channel}")

    async def send_line(self, line: str) -> None:
        if self.writer is None:
            raise TransportError("Not connected")
        self.writer.write(f"{line}\r\n".encode())
        await self.writer.drain()

    async def inbound_pump(self, inbound: asyncio.Queue[str]) -> None:
        """Forward each received line, trimmed, to ``inbound`` until EOF or a read error."""
        if self.reader is None:
            raise TransportError("Not connected")

        LOGGER.info("Reading from TCP started")
        while True:
            try:
                data = await self.reader.readline()
            except (OSError, ValueError, asyncio.IncompleteReadError) as e:
                LOGGER.error(f"Reading from TCP failed: {e}")
                break

            if not data:
                LOGGER.info("Connection closed by server")
                break

            line = data.decode("utf-8", errors="replace").rstrip()
            if line:
                inbound.put_nowait(line)

    async def outbound_pump(self, outbound: asyncio.Queue[str]) -> None:
        """Write every queued reply to the server, in order. Write errors are fatal."""
        LOGGER.info("Writing to TCP started")
        while True:
            message = await outbound.get()
            try:
                await self.send_line(message)
            except (OSError, ConnectionError) as e:
                LOGGER.error(f"Writing to TCP failed: {e}")
                raise TransportError(f"Writing to TCP failed: {e}") from e
            finally:
                outbound.task_done()

    async def run(self, inbound: asyncio.Queue[str], outbound: asyncio.Queue[str]) -> None:
        """Pump lines both ways until the server closes the connection."""
        reader_task = asyncio.create_task(self.inbound_pump(inbound), name="irc-inbound")
        writer_task = asyncio.create_task(self.outbound_pump(outbound), name="irc-outbound")

        try:
            done, _ = await asyncio.wait(
                {reader_task, writer_task}, return_when=asyncio.FIRST_COMPLETED
            )
            for task in done:
                # Re-raise a fatal write error
                task.result()
        finally:
            pending = [task for task in (reader_task, writer_task) if not task.done()]
            for task in pending:
                task.cancel()
            for task in pending:
                with contextlib.suppress(asyncio.CancelledError):
                    await task
            await self.close()

    async def close(self) -> None:
        if self.writer is None:
            return
        writer, self.writer = self.writer, None
        writer.close()
        try:
            await writer.wait_closed()
        except (OSError, ConnectionError) as e:
            LOGGER.debug(f"Error while closing connection: {e}")
