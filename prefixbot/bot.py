"""
prefixbot Discord runtime
Prefix commands over discord.py 2.x
"""

import asyncio
import logging
import sys

import discord

from prefixbot.adapters import inbound_from_discord
from prefixbot.cogs import load_cogs
from prefixbot.commands import (
    CommandRegistry,
    CooldownStore,
    Dispatcher,
    PermissionEvaluator,
    PermissionPolicy,
)
from prefixbot.core import BOT_NAME, BOT_VERSION, BotSettings, HealthCheckServer, get_settings, setup_logging
from prefixbot.services import Services, VoiceLockTable
from prefixbot.services.chat import OpenRouterChatBackend

logger = logging.getLogger("prefixbot.bot")


def build_services(settings: BotSettings) -> Services:
    chat = None
    if settings.openrouter_api_key:
        chat = OpenRouterChatBackend(settings.openrouter_api_key, settings.openrouter_model)
    else:
        logger.warning("OPENROUTER_API_KEY not set; AI chat is disabled")

    return Services(
        chat=chat,
        voice_locks=VoiceLockTable(settings.bot_owner_id or None, settings.bot_owner_name),
    )


def build_dispatcher(settings: BotSettings, services: Services | None = None) -> Dispatcher:
    """Fresh registry, cooldowns and permission policy wired from settings."""
    policy = PermissionPolicy(leadership_roles=settings.leadership_roles)
    return Dispatcher(
        CommandRegistry(),
        PermissionEvaluator(policy),
        CooldownStore(),
        services or build_services(settings),
        prefix=settings.command_prefix,
        bot_owner_id=settings.bot_owner_id or None,
    )


class PrefixBot(discord.Client):
    """Discord client that routes every message through the Dispatcher."""

    def __init__(self, settings: BotSettings):
        intents = discord.Intents.default()
        intents.message_content = True
        intents.members = True

        super().__init__(intents=intents)

        self.settings = settings
        self.dispatcher = build_dispatcher(settings)
        self.health_server = HealthCheckServer(
            bot=self,
            dispatcher=self.dispatcher,
            host=settings.health_host,
            port=settings.health_port,
        )

    async def setup_hook(self) -> None:
        loaded, failed = load_cogs(self.dispatcher.registry)

        if loaded:
            logger.info(f"[green]Loaded cogs:[/green] {', '.join(loaded)}")
        if failed:
            logger.error(f"[red]Failed to load:[/red] {', '.join(failed)}")
        logger.info(f"[cyan]Commands registered:[/cyan] {len(self.dispatcher.registry)}")

        await self.health_server.start()
        logger.info("[yellow]Connecting to Discord...[/yellow]")

    async def on_ready(self) -> None:
        if not self.dispatcher.bot_owner_id:
            app_info = await self.application_info()
            owner_id = str(app_info.owner.id)
            self.dispatcher.bot_owner_id = owner_id
            self.dispatcher.services.voice_locks.owner_id = owner_id
            owner_name = app_info.owner.global_name or app_info.owner.name
            logger.info(f"[cyan]Bot owner:[/cyan] {owner_name} (ID: {owner_id})")

        status = self.settings.get_status()
        activity = self.settings.get_activity()
        await self.change_presence(status=status, activity=activity)

        activity_str = activity.name if activity else "none"
        logger.info(f"[bold green]Bot ready:[/bold green] {self.user} [dim](ID: {self.user.id})[/dim]")
        logger.info(
            f"[cyan]Connected:[/cyan] {len(self.guilds)} guilds | discord.py {discord.__version__}"
        )
        logger.info(f"[cyan]Presence:[/cyan] {status.name} | {activity_str}")

    async def on_message(self, message: discord.Message) -> None:
        if self.user is not None and message.author.id == self.user.id:
            return
        await self.dispatcher.handle_message(inbound_from_discord(message, self.user))

    async def close(self) -> None:
        await self.health_server.stop()
        await super().close()


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)
    logger.info(f"Starting {BOT_NAME} v{BOT_VERSION}")

    if not settings.discord_bot_token:
        logger.error("[bold red]DISCORD_BOT_TOKEN is not set[/bold red]")
        logger.error("Set it in .env: DISCORD_BOT_TOKEN=your_token_here")
        sys.exit(1)

    async with PrefixBot(settings) as bot:
        try:
            await bot.start(settings.discord_bot_token)
        except (KeyboardInterrupt, asyncio.CancelledError):
            if not bot.is_closed():
                await bot.close()


def run() -> None:
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, asyncio.CancelledError):
        logger.info("[yellow]Bot stopped manually[/yellow]")
    except Exception as e:
        logger.error(f"[bold red]Bot crashed:[/bold red] {e}", exc_info=e)
        sys.exit(1)


if __name__ == "__main__":
    run()
