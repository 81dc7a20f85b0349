"""Chat bot: wires the IRC connection, the line parser and the command dispatcher."""

from __future__ import annotations

import asyncio
import logging
import time

from niichat.shared.models.message import ParsedMessage
from niichat.shared.repositories.command_config import CommandRegistry

from .config import ChatBotSettings
from .dispatch import CommandDispatcher
from .guards import CooldownTracker
from .parser import parse_message
from .transport import IrcConnection

LOGGER: logging.Logger = logging.getLogger("Bot")


class ChatBot:
    """Single-channel chat bot.

    Three tasks run while connected: the connection's inbound and outbound pumps
    and :meth:`process_messages`. They only talk through ``inbound`` (raw lines
    from the server) and ``outbound`` (lines to send), both unbounded FIFO queues.
    """

    def __init__(
        self,
        *,
        registry: CommandRegistry,
        connection: IrcConnection,
        cooldowns: CooldownTracker | None = None,
    ) -> None:
        self.registry = registry
        self.connection = connection
        self.dispatcher = CommandDispatcher(registry, cooldowns)
        self.inbound: asyncio.Queue[str] = asyncio.Queue()
        self.outbound: asyncio.Queue[str] = asyncio.Queue()

        self.started_at: float = time.time()
        self.messages_seen: int = 0
        self.replies_sent: int = 0

    @classmethod
    def from_settings(cls, settings: ChatBotSettings, registry: CommandRegistry) -> ChatBot:
        connection = IrcConnection(
            settings.nickname,
            settings.oauth_token,
            settings.channel,
            host=settings.irc_host,
            port=settings.irc_port,
        )
        return cls(registry=registry, connection=connection)

    # ------------------------------------------------------------------
    # Message handling
    # ------------------------------------------------------------------

    def handle_message(self, message: ParsedMessage) -> str | None:
        """Return the line to send in response to ``message``, if any."""
        command = message.command
        if command is None:
            return None

        if command.verb == "PRIVMSG":
            if command.bot_command is None or command.channel is None:
                return None

            display_name = message.display_name
            if display_name is None:
                LOGGER.error(f"No display-name tag, ignoring !{command.bot_command.token}")
                return None

            reply = self.dispatcher.dispatch(command.bot_command, display_name, command.channel)
            return str(reply) if reply else None

        if command.verb == "PING":
            LOGGER.info(f"{command.verb} - {message.parameters or ''}")
            if message.parameters is None:
                return None
            return f"PONG {message.parameters}"

        LOGGER.info(f"Unhandled: {command.verb} - {message.parameters or ''}")
        return None

    def handle_line(self, raw_line: str) -> str | None:
        self.messages_seen += 1
        return self.handle_message(parse_message(raw_line))

    async def process_messages(self) -> None:
        """Consume server lines forever, queueing replies in order."""
        while True:
            raw_line = await self.inbound.get()
            try:
                response = self.handle_line(raw_line)
                if response is not None:
                    self.outbound.put_nowait(response)
                    self.replies_sent += 1
            finally:
                self.inbound.task_done()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def run(self) -> None:
        """Connect and serve until the server closes the connection."""
        await self.connection.connect()
        self.started_at = time.time()

        processor = asyncio.create_task(self.process_messages(), name="chat-bot")
        relay = asyncio.create_task(self.connection.run(self.inbound, self.outbound), name="irc")
        try:
            done, _ = await asyncio.wait({processor, relay}, return_when=asyncio.FIRST_COMPLETED)
            if processor in done:
                LOGGER.error("Message processing stopped, ending session")
            for task in done:
                # Re-raise transport or processing errors
                task.result()
        finally:
            for task in (processor, relay):
                if not task.done():
                    task.cancel()
                    try:
                        await task
                    except asyncio.CancelledError:
                        pass
        LOGGER.info("Session ended")
