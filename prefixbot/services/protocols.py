"""Narrow async contracts for the external collaborators command handlers call."""

from collections.abc import Awaitable, Callable
from typing import Protocol

from pydantic import BaseModel

# (failed model, next model)
RetryCallback = Callable[[str, str], Awaitable[None]]


class PlayerSummary(BaseModel):
    account_id: str
    nickname: str
    battles: int = 0
    win_rate: float = 0.0
    average_damage: float = 0.0
    clan_tag: str | None = None
    region: str = "na"


class ClanSummary(BaseModel):
    clan_id: str
    tag: str
    name: str
    members_count: int = 0
    description: str = ""
    region: str = "na"


class Mover(BaseModel):
    symbol: str
    price: float
    change_percent: float
    volume: float = 0.0


class ChatBackend(Protocol):
    async def chat(
        self,
        prompt: str,
        context: str | None = None,
        on_retry: RetryCallback | None = None,
    ) -> str: ...


class StatsProvider(Protocol):
    async def lookup_player(self, name: str) -> PlayerSummary | None: ...

    async def lookup_clan(self, query: str) -> ClanSummary | None: ...


class VoiceBackend(Protocol):
    async def join(self, guild_id: str, channel_id: str) -> None: ...

    async def leave(self, guild_id: str) -> bool: ...

    async def speak(self, guild_id: str, text: str, voice: str | None = None) -> None: ...


class MarketDataProvider(Protocol):
    async def get_movers(self, exchange: str, timeframe: str, limit: int) -> list[Mover]: ...

    async def health_check(self) -> bool: ...
