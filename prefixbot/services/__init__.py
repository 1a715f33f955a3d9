"""External collaborators and the wrapper that keeps their failures contained."""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, TypeVar

from prefixbot.commands.errors import CollaboratorUnavailable

from .market import ProbedMarketData
from .protocols import (
    ChatBackend,
    ClanSummary,
    MarketDataProvider,
    Mover,
    PlayerSummary,
    StatsProvider,
    VoiceBackend,
)
from .voice import VoiceLock, VoiceLockTable

LOGGER = logging.getLogger("prefixbot.services")

T = TypeVar("T")

FEATURE_NAMES = {
    "chat": "AI chat",
    "stats": "player stats",
    "voice": "voice",
    "market": "market data",
}


async def guarded(feature: str, call: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
    """Await a collaborator call, converting any failure to CollaboratorUnavailable."""
    try:
        return await call(*args, **kwargs)
    except CollaboratorUnavailable:
        raise
    except Exception as e:
        LOGGER.warning(f"{feature} call failed: {type(e).__name__}: {e}")
        raise CollaboratorUnavailable(feature, str(e)) from e


@dataclass
class Services:
    """Collaborators injected into every command context. Missing ones are None.

    A market provider is always health-probed before first use.
    """

    chat: ChatBackend | None = None
    stats: StatsProvider | None = None
    voice: VoiceBackend | None = None
    market: MarketDataProvider | None = None
    voice_locks: VoiceLockTable = field(default_factory=VoiceLockTable)
    started_at: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if self.market is not None and not isinstance(self.market, ProbedMarketData):
            self.market = ProbedMarketData(self.market)

    def require(self, name: str) -> Any:
        collaborator = getattr(self, name)
        if collaborator is None:
            raise CollaboratorUnavailable(FEATURE_NAMES[name], "not configured")
        return collaborator

    async def call(self, name: str, method: str, *args: Any, **kwargs: Any) -> Any:
        """``await services.<name>.<method>(...)`` through ``guarded``."""
        collaborator = self.require(name)
        return await guarded(FEATURE_NAMES[name], getattr(collaborator, method), *args, **kwargs)

    def uptime_seconds(self, now: float | None = None) -> int:
        return int((now or time.time()) - self.started_at)


__all__ = [
    "FEATURE_NAMES",
    "ChatBackend",
    "ClanSummary",
    "MarketDataProvider",
    "Mover",
    "PlayerSummary",
    "ProbedMarketData",
    "Services",
    "StatsProvider",
    "VoiceBackend",
    "VoiceLock",
    "VoiceLockTable",
    "guarded",
]
