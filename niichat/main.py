"""Entry point: ``niichat`` console script / ``python -m niichat``."""

import asyncio
import logging
import sys

from niichat.core.bot import ChatBot
from niichat.core.config import validate_env_vars
from niichat.core.health_server import HealthCheckServer
from niichat.core.logging import setup_logging
from niichat.errors import ConfigurationError, TransportError
from niichat.shared.repositories.command_config import load_commands

LOGGER: logging.Logger = logging.getLogger("Bot")


async def runner(bot: ChatBot, health_port: int = 0) -> None:
    health_server = HealthCheckServer(bot, port=health_port) if health_port > 0 else None
    if health_server:
        await health_server.start()
    try:
        await bot.run()
    finally:
        if health_server:
            await health_server.stop()


def main() -> None:
    setup_logging()

    try:
        settings = validate_env_vars()
        setup_logging(settings.log_level)
        registry = load_commands(settings.filepath)
    except ConfigurationError as e:
        LOGGER.error(f"Startup aborted: {e}")
        sys.exit(1)

    bot = ChatBot.from_settings(settings, registry)
    LOGGER.info(f"Starting bot as {settings.nickname} with {len(registry)} commands")

    try:
        asyncio.run(runner(bot, settings.health_port))
    except TransportError as e:
        LOGGER.error(f"Connection lost: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        LOGGER.warning("Shutting down due to KeyboardInterrupt...")


if __name__ == "__main__":
    main()
