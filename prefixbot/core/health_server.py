"""HTTP health check server"""

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

from aiohttp import web

from .config import BOT_NAME, BOT_VERSION

if TYPE_CHECKING:
    from prefixbot.commands import Dispatcher

logger = logging.getLogger("prefixbot.health_server")

HEARTBEAT_INTERVAL = 300


class HealthCheckServer:
    """HTTP health check server"""

    def __init__(
        self,
        bot: Any = None,
        dispatcher: "Dispatcher | None" = None,
        host: str = "0.0.0.0",
        port: int = 8080,
    ) -> None:
        self.bot = bot
        self.dispatcher = dispatcher
        self.host = host
        self.port = port
        self.app = web.Application()
        self.runner: web.AppRunner | None = None
        self._start_time: float = time.time()
        self._heartbeat_task: asyncio.Task | None = None
        self._setup_routes()

    def _setup_routes(self) -> None:
        self.app.router.add_get("/", self.handle_root)
        self.app.router.add_get("/health", self.handle_health)
        self.app.router.add_get("/status", self.handle_status)
        self.app.router.add_get("/ping", self.handle_ping)

    def _ready(self) -> bool:
        return self.bot is not None and self.bot.is_ready()

    async def handle_root(self, request: web.Request) -> web.Response:
        return web.json_response({"service": BOT_NAME, "version": BOT_VERSION, "status": "running"})

    async def handle_health(self, request: web.Request) -> web.Response:
        """Liveness probe; always 200 so the container is not restarted while connecting."""
        ready = self._ready()
        return web.json_response({"status": "healthy" if ready else "starting", "ready": ready})

    async def handle_status(self, request: web.Request) -> web.Response:
        ready = self._ready()
        payload: dict[str, Any] = {
            "service": BOT_NAME,
            "bot_id": str(self.bot.user.id) if ready and self.bot.user else None,
            "uptime_seconds": int(time.time() - self._start_time),
            "guilds": len(self.bot.guilds) if ready else 0,
            "commands": 0,
            "cooldown_entries": 0,
        }
        if self.dispatcher is not None:
            payload["commands"] = len(self.dispatcher.registry)
            payload["cooldown_entries"] = self.dispatcher.cooldowns.tracked_entries()
        return web.json_response(payload)

    async def handle_ping(self, request: web.Request) -> web.Response:
        return web.Response(text="pong")

    async def _heartbeat(self) -> None:
        while True:
            await asyncio.sleep(HEARTBEAT_INTERVAL)
            uptime = int(time.time() - self._start_time)
            ready = self._ready()
            guilds = len(self.bot.guilds) if ready else 0
            logger.info(f"Heartbeat: uptime={uptime}s, ready={ready}, guilds={guilds}")

    async def start(self) -> None:
        try:
            self.runner = web.AppRunner(self.app)
            await self.runner.setup()
            site = web.TCPSite(self.runner, self.host, self.port)
            await site.start()

            self._heartbeat_task = asyncio.create_task(self._heartbeat())

            logger.info(f"Health server started on {self.host}:{self.port}")
            logger.info(f"  GET http://{self.host}:{self.port}/health - Health check")
            logger.info(f"  GET http://{self.host}:{self.port}/status - Detailed status")
        except Exception as e:
            logger.exception(f"Failed to start health server: {e}")
            raise

    async def stop(self) -> None:
        if self._heartbeat_task:
            self._heartbeat_task.cancel()
            self._heartbeat_task = None
        if self.runner:
            try:
                await self.runner.cleanup()
                logger.info("Health server stopped")
            except Exception as e:
                logger.exception(f"Error stopping health server: {e}")
            self.runner = None
