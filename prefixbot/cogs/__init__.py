"""Command modules. Each exposes ``setup(registry)`` and registers its commands."""

import importlib
import logging

from prefixbot.commands import CommandRegistry

LOGGER = logging.getLogger("prefixbot.cogs")

COG_MODULES = [
    "prefixbot.cogs.info",
    "prefixbot.cogs.moderation",
    "prefixbot.cogs.roles",
    "prefixbot.cogs.channels",
    "prefixbot.cogs.lookup",
    "prefixbot.cogs.voice",
    "prefixbot.cogs.fun",
    "prefixbot.cogs.messages",
]


def load_cogs(
    registry: CommandRegistry, modules: list[str] | None = None
) -> tuple[list[str], list[str]]:
    """Import each module and call its ``setup``; returns (loaded, failed)."""
    loaded: list[str] = []
    failed: list[str] = []

    for name in modules or COG_MODULES:
        short = name.split(".")[-1]
        try:
            module = importlib.import_module(name)
            module.setup(registry)
            loaded.append(short)
        except Exception as e:
            LOGGER.exception(f"Failed to load cog {name}: {e}")
            failed.append(f"{short} ({e})")

    return loaded, failed
