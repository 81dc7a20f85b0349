"""HTTP health check server"""

import asyncio
import logging
import time
from typing import TYPE_CHECKING

from aiohttp import web

if TYPE_CHECKING:
    from .bot import ChatBot

logger = logging.getLogger("Bot.Health")

SERVICE_NAME = "niichat"


class HealthCheckServer:
    """HTTP health check server"""

    def __init__(self, bot: "ChatBot | None" = None, host: str = "0.0.0.0", port: int = 4344):
        self.bot = bot
        self.host = host
        self.port = port
        self.app = web.Application()
        self.runner: web.AppRunner | None = None
        self._start_time: float = time.time()
        self._heartbeat_task: asyncio.Task | None = None
        self._setup_routes()

    def _setup_routes(self) -> None:
        """Configure HTTP routes"""
        self.app.router.add_get("/", self.handle_root)
        self.app.router.add_get("/health", self.handle_health)
        self.app.router.add_get("/status", self.handle_status)
        self.app.router.add_get("/ping", self.handle_ping)

    @property
    def ready(self) -> bool:
        return self.bot is not None and self.bot.connection.connected

    async def handle_root(self, request: web.Request) -> web.Response:
        """Root endpoint - minimal service info"""
        return web.json_response({"service": SERVICE_NAME, "status": "running"})

    async def handle_health(self, request: web.Request) -> web.Response:
        """Health check endpoint, always 200 (liveness)"""
        ready = self.ready
        return web.json_response(
            {"status": "healthy" if ready else "starting", "ready": ready},
        )

    async def handle_status(self, request: web.Request) -> web.Response:
        """Status endpoint with session counters"""
        bot = self.bot
        return web.json_response(
            {
                "service": SERVICE_NAME,
                "nickname": bot.connection.nickname if bot else None,
                "channel": f"#{bot.connection.channel}" if bot else None,
                "uptime_seconds": int(time.time() - self._start_time),
                "messages_seen": bot.messages_seen if bot else 0,
                "replies_sent": bot.replies_sent if bot else 0,
                "commands_loaded": len(bot.registry) if bot else 0,
            }
        )

    async def handle_ping(self, request: web.Request) -> web.Response:
        """Ping endpoint"""
        return web.Response(text="pong")

    async def _heartbeat(self) -> None:
        """Periodic heartbeat: log uptime and bot status"""
        while True:
            await asyncio.sleep(300)
            uptime = int(time.time() - self._start_time)
            seen = self.bot.messages_seen if self.bot else 0
            logger.info(f"Heartbeat: uptime={uptime}s, ready={self.ready}, messages={seen}")

    async def start(self) -> None:
        """Start health check server"""
        try:
            self.runner = web.AppRunner(self.app)
            await self.runner.setup()

            site = web.TCPSite(self.runner, self.host, self.port)
            await site.start()

            self._heartbeat_task = asyncio.create_task(self._heartbeat())

            logger.info(f"Health server started on {self.host}:{self.port}")
        except Exception as e:
            logger.exception(f"Failed to start health server: {e}")
            raise

    async def stop(self) -> None:
        """Stop health check server"""
        if self._heartbeat_task:
            self._heartbeat_task.cancel()
        if self.runner:
            try:
                await self.runner.cleanup()
                logger.info("Health server stopped")
            except Exception as e:
                logger.exception(f"Error stopping health server: {e}")
