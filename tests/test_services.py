"""
Collaborator wrappers: guarded calls, market probing, voice locks, chat fallback.
"""

import asyncio
from types import SimpleNamespace

import pytest

from conftest import GUILD_ID, MEMBER_ID, OWNER_ID
from prefixbot.commands import CollaboratorUnavailable
from prefixbot.services import Mover, Services, VoiceLockTable, guarded
from prefixbot.services.chat import OpenRouterChatBackend, strip_reasoning
from prefixbot.services.market import ProbedMarketData


class TestGuarded:
    async def test_passes_result_through(self):
        async def ok(x, y=0):
            return x + y

        assert await guarded("stats", ok, 1, y=2) == 3

    async def test_wraps_failures(self):
        async def boom():
            raise ConnectionError("refused at /var/run/api.sock")

        with pytest.raises(CollaboratorUnavailable) as exc_info:
            await guarded("player stats", boom)
        assert exc_info.value.feature == "player stats"
        assert isinstance(exc_info.value.__cause__, ConnectionError)

    async def test_missing_collaborator(self):
        services = Services()
        with pytest.raises(CollaboratorUnavailable) as exc_info:
            await services.call("voice", "leave", GUILD_ID)
        assert exc_info.value.feature == "voice"

    def test_uptime(self):
        services = Services(started_at=100.0)
        assert services.uptime_seconds(now=161.9) == 61


class FakeMarket:
    def __init__(self, healthy=True, delay=0.0):
        self.healthy = healthy
        self.delay = delay
        self.probes = 0

    async def health_check(self) -> bool:
        self.probes += 1
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.healthy

    async def get_movers(self, exchange, timeframe, limit):
        return [Mover(symbol="BTCUSDT", price=65000.0, change_percent=4.2)][:limit]


class TestProbedMarketData:
    async def test_probes_once_before_first_use(self):
        provider = FakeMarket()
        market = ProbedMarketData(provider)
        await market.get_movers("binance", "24h", 5)
        await market.get_movers("binance", "24h", 5)
        assert provider.probes == 1

    async def test_unhealthy_provider_is_unavailable(self):
        provider = FakeMarket(healthy=False)
        market = ProbedMarketData(provider)
        with pytest.raises(CollaboratorUnavailable):
            await market.get_movers("binance", "24h", 5)
        with pytest.raises(CollaboratorUnavailable):
            await market.get_movers("binance", "24h", 5)
        assert provider.probes == 2

    async def test_probe_timeout(self):
        market = ProbedMarketData(FakeMarket(delay=1.0), probe_timeout=0.01)
        assert await market.health_check() is False
        assert market.healthy is False

    async def test_recovers_after_failed_probe(self):
        provider = FakeMarket(healthy=False)
        market = ProbedMarketData(provider)
        assert await market.health_check() is False
        provider.healthy = True
        movers = await market.get_movers("binance", "1h", 1)
        assert movers[0].symbol == "BTCUSDT"


class TestVoiceLockTable:
    def test_only_owner_locks_and_unlocks(self):
        locks = VoiceLockTable(OWNER_ID, "Owner")
        assert locks.lock(GUILD_ID, MEMBER_ID) is False
        assert locks.lock(GUILD_ID, OWNER_ID) is True
        assert locks.unlock(GUILD_ID, MEMBER_ID) is False
        assert locks.is_locked(GUILD_ID)
        assert locks.unlock(GUILD_ID, OWNER_ID) is True
        assert not locks.is_locked(GUILD_ID)

    def test_check(self):
        locks = VoiceLockTable(OWNER_ID, "Owner")
        assert locks.check(GUILD_ID, MEMBER_ID) is None
        locks.lock(GUILD_ID, OWNER_ID)
        assert "locked by Owner" in locks.check(GUILD_ID, MEMBER_ID)
        assert locks.check(GUILD_ID, OWNER_ID) is None
        assert locks.check("another-guild", MEMBER_ID) is None

    def test_status(self):
        locks = VoiceLockTable(OWNER_ID, "Owner")
        assert locks.status(GUILD_ID).startswith("Voice commands are unlocked")
        locks.lock(GUILD_ID, OWNER_ID)
        locked_at = locks.get(GUILD_ID).locked_at
        assert locks.status(GUILD_ID, now=locked_at + 150) == "Voice locked by Owner for 2 minute(s)."

    def test_no_owner_configured(self):
        locks = VoiceLockTable()
        assert locks.lock(GUILD_ID, MEMBER_ID) is False


def completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


class ScriptedCompletions:
    def __init__(self, *results):
        self.results = list(results)
        self.models = []

    async def create(self, *, model, max_tokens, messages):
        self.models.append(model)
        return self.results.pop(0)


def backend(*results, model="primary/model"):
    completions = ScriptedCompletions(*results)
    client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return OpenRouterChatBackend("key", model=model, client=client), completions


class TestChatBackend:
    def test_strip_reasoning(self):
        assert strip_reasoning("<think>plan</think>  Answer") == "Answer"
        assert strip_reasoning("Answer <think>unfinished") == "Answer"

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            OpenRouterChatBackend("  ")

    async def test_first_model_answers(self):
        chat, completions = backend(completion("Hi there"))
        assert await chat.chat("hello", "context") == "Hi there"
        assert completions.models == ["primary/model"]

    async def test_empty_answer_falls_through(self):
        chat, completions = backend(
            completion("<think>only thinking</think>"),
            SimpleNamespace(choices=[]),
            completion("Real answer"),
        )
        assert await chat.chat("hello") == "Real answer"
        assert len(completions.models) == 3

    async def test_every_model_empty(self):
        chat, _ = backend(*[completion("") for _ in range(10)])
        with pytest.raises(RuntimeError):
            await chat.chat("hello")
