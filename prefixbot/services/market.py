"""Market data wrapper that health-checks the provider before first use."""

import asyncio
import logging

from prefixbot.commands.errors import CollaboratorUnavailable

from .protocols import MarketDataProvider, Mover

LOGGER = logging.getLogger("prefixbot.market")

PROBE_TIMEOUT = 5.0


class ProbedMarketData:
    """Wraps a MarketDataProvider; probes once, and again after every failed probe."""

    def __init__(self, provider: MarketDataProvider, probe_timeout: float = PROBE_TIMEOUT):
        self.provider = provider
        self.probe_timeout = probe_timeout
        self.healthy = False

    async def health_check(self) -> bool:
        try:
            ok = await asyncio.wait_for(self.provider.health_check(), timeout=self.probe_timeout)
        except asyncio.TimeoutError:
            LOGGER.warning(f"Market data probe timed out after {self.probe_timeout}s")
            ok = False
        except Exception as e:
            LOGGER.warning(f"Market data probe failed: {e}")
            ok = False
        self.healthy = bool(ok)
        return self.healthy

    async def get_movers(self, exchange: str, timeframe: str, limit: int) -> list[Mover]:
        if not self.healthy and not await self.health_check():
            raise CollaboratorUnavailable("market data", "health probe failed")
        return await self.provider.get_movers(exchange, timeframe, limit)
