"""
Shared fixtures and fakes for prefixbot tests.
"""

from dataclasses import dataclass, field

import pytest

from prefixbot.commands import (
    Capability,
    CommandRegistry,
    CooldownStore,
    Dispatcher,
    InboundMessage,
    PermissionEvaluator,
)
from prefixbot.services import PlayerSummary, Services, VoiceLockTable

OWNER_ID = "100000000000000001"
GUILD_OWNER_ID = "100000000000000002"
MEMBER_ID = "100000000000000003"
TARGET_ID = "100000000000000004"
GUILD_ID = "200000000000000001"
CHANNEL_ID = "300000000000000001"
ROLE_ID = "400000000000000001"


class FakeClock:
    def __init__(self, start: float = 1_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@dataclass
class FakeHandle:
    replies: list[str] = field(default_factory=list)
    sent: list[str] = field(default_factory=list)
    reactions: list[str] = field(default_factory=list)
    typing_count: int = 0
    cleared: int = 0
    deleted: bool = False

    async def reply(self, content: str) -> None:
        self.replies.append(content)

    async def send(self, content: str) -> None:
        self.sent.append(content)

    async def typing(self) -> None:
        self.typing_count += 1

    async def add_reaction(self, emoji: str) -> None:
        self.reactions.append(emoji)

    async def clear_reactions(self) -> None:
        self.cleared += 1

    async def delete(self) -> None:
        self.deleted = True


class FakeGuild:
    """Records every guild action; prune counts are fixed."""

    def __init__(self, prunable: int = 12):
        self.calls: list[tuple] = []
        self.prunable = prunable
        self.voice_channels = {"war room": "500000000000000001", "lounge": "500000000000000002"}

    async def describe(self) -> str:
        return "**Test Guild**"

    async def member_summary(self, user_id: str) -> str | None:
        self.calls.append(("member_summary", user_id))
        return f"**member {user_id}**" if user_id != "404" else None

    async def ban(self, user_id: str, reason: str) -> None:
        self.calls.append(("ban", user_id, reason))

    async def unban(self, user_id: str) -> None:
        self.calls.append(("unban", user_id))

    async def kick(self, user_id: str, reason: str) -> None:
        self.calls.append(("kick", user_id, reason))

    async def timeout(self, user_id: str, seconds: int, reason: str) -> None:
        self.calls.append(("timeout", user_id, seconds, reason))

    async def remove_timeout(self, user_id: str) -> None:
        self.calls.append(("remove_timeout", user_id))

    async def purge(self, channel_id: str, limit: int) -> int:
        self.calls.append(("purge", channel_id, limit))
        return limit

    async def prune(self, days: int, *, dry_run: bool, reason: str | None = None) -> int:
        self.calls.append(("prune", days, dry_run, reason))
        return self.prunable

    async def create_role(self, name: str, color: int | None = None) -> str:
        self.calls.append(("create_role", name, color))
        return ROLE_ID

    async def add_role(self, user_id: str, role_id: str) -> None:
        self.calls.append(("add_role", user_id, role_id))

    async def remove_role(self, user_id: str, role_id: str) -> None:
        self.calls.append(("remove_role", user_id, role_id))

    async def create_text_channel(self, name: str) -> str:
        self.calls.append(("create_text_channel", name))
        return CHANNEL_ID

    async def create_voice_channel(self, name: str) -> str:
        self.calls.append(("create_voice_channel", name))
        return CHANNEL_ID

    async def delete_channel(self, channel_id: str) -> str:
        self.calls.append(("delete_channel", channel_id))
        return "old-channel"

    async def find_voice_channel(self, name: str) -> str | None:
        return self.voice_channels.get(name.strip().lower())

    async def voice_channel_names(self, limit: int = 10) -> list[str]:
        return list(self.voice_channels)[:limit]

    async def send_message(self, channel_id: str, content: str) -> None:
        self.calls.append(("send_message", channel_id, content))

    def called(self, action: str) -> list[tuple]:
        return [call for call in self.calls if call[0] == action]


class FakeChat:
    def __init__(self, response: str = "Hello from the model", error: Exception | None = None):
        self.response = response
        self.error = error
        self.prompts: list[tuple[str, str | None]] = []

    async def chat(self, prompt, context=None, on_retry=None) -> str:
        self.prompts.append((prompt, context))
        if self.error is not None:
            raise self.error
        return self.response


class FakeStats:
    async def lookup_player(self, name: str) -> PlayerSummary | None:
        if name == "ghost":
            return None
        return PlayerSummary(account_id="1", nickname=name, battles=1234, win_rate=55.5)

    async def lookup_clan(self, query: str):
        return None


class FakeVoice:
    def __init__(self):
        self.calls: list[tuple] = []

    async def join(self, guild_id: str, channel_id: str) -> None:
        self.calls.append(("join", guild_id, channel_id))

    async def leave(self, guild_id: str) -> bool:
        self.calls.append(("leave", guild_id))
        return True

    async def speak(self, guild_id: str, text: str, voice: str | None = None) -> None:
        self.calls.append(("speak", guild_id, text))


def make_message(
    content: str,
    *,
    author_id: str = MEMBER_ID,
    capabilities: set[Capability] | frozenset[Capability] = frozenset(),
    role_names: tuple[str, ...] = (),
    guild: FakeGuild | None = None,
    in_guild: bool = True,
    author_is_bot: bool = False,
    mentions_bot: bool = False,
    voice_channel_id: str | None = None,
) -> InboundMessage:
    return InboundMessage(
        content=content,
        author_id=author_id,
        handle=FakeHandle(),
        author_name=f"user-{author_id[-2:]}",
        author_is_bot=author_is_bot,
        channel_id=CHANNEL_ID,
        guild_id=GUILD_ID if in_guild else None,
        guild_name="Test Guild" if in_guild else None,
        guild_owner_id=GUILD_OWNER_ID if in_guild else None,
        capabilities=frozenset(capabilities),
        role_names=role_names,
        is_direct=not in_guild,
        mentions_bot=mentions_bot,
        voice_channel_id=voice_channel_id,
        guild=(guild or FakeGuild()) if in_guild else None,
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def registry() -> CommandRegistry:
    return CommandRegistry()


@pytest.fixture
def cooldowns(clock) -> CooldownStore:
    return CooldownStore(clock=clock)


@pytest.fixture
def guild() -> FakeGuild:
    return FakeGuild()


@pytest.fixture
def services() -> Services:
    return Services(
        chat=FakeChat(),
        stats=FakeStats(),
        voice=FakeVoice(),
        voice_locks=VoiceLockTable(OWNER_ID, "Owner"),
    )


@pytest.fixture
def dispatcher(registry, cooldowns, services) -> Dispatcher:
    return Dispatcher(
        registry,
        PermissionEvaluator(),
        cooldowns,
        services,
        prefix="!",
        bot_owner_id=OWNER_ID,
    )


@pytest.fixture
def loaded_dispatcher(dispatcher) -> Dispatcher:
    """Dispatcher whose registry holds every built-in command module."""
    from prefixbot.cogs import load_cogs

    loaded, failed = load_cogs(dispatcher.registry)
    assert not failed
    return dispatcher
