"""Platform-neutral views of an inbound message and of a running command."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol

from .cooldowns import CooldownStore
from .errors import GuildOnlyError
from .models import Capability, Caller, CommandSpec
from .permissions import PermissionEvaluator

if TYPE_CHECKING:
    from prefixbot.services import Services


class MessageHandle(Protocol):
    """Reply-capable handle on the message that triggered a command."""

    async def reply(self, content: str) -> None: ...

    async def send(self, content: str) -> None: ...

    async def typing(self) -> None: ...

    async def add_reaction(self, emoji: str) -> None: ...

    async def clear_reactions(self) -> None: ...

    async def delete(self) -> None: ...


class GuildActions(Protocol):
    """Guild-scoped platform actions used by command handlers.

    Implementations raise ActionFailed with a user-safe message when the
    platform refuses an action.
    """

    async def describe(self) -> str: ...

    async def member_summary(self, user_id: str) -> str | None: ...

    async def ban(self, user_id: str, reason: str) -> None: ...

    async def unban(self, user_id: str) -> None: ...

    async def kick(self, user_id: str, reason: str) -> None: ...

    async def timeout(self, user_id: str, seconds: int, reason: str) -> None: ...

    async def remove_timeout(self, user_id: str) -> None: ...

    async def purge(self, channel_id: str, limit: int) -> int: ...

    async def prune(self, days: int, *, dry_run: bool, reason: str | None = None) -> int: ...

    async def create_role(self, name: str, color: int | None = None) -> str: ...

    async def add_role(self, user_id: str, role_id: str) -> None: ...

    async def remove_role(self, user_id: str, role_id: str) -> None: ...

    async def create_text_channel(self, name: str) -> str: ...

    async def create_voice_channel(self, name: str) -> str: ...

    async def delete_channel(self, channel_id: str) -> str: ...

    async def find_voice_channel(self, name: str) -> str | None: ...

    async def voice_channel_names(self, limit: int = 10) -> list[str]: ...

    async def send_message(self, channel_id: str, content: str) -> None: ...


@dataclass
class InboundMessage:
    """Everything the dispatcher needs from one chat message."""

    content: str
    author_id: str
    handle: MessageHandle
    author_name: str = ""
    author_is_bot: bool = False
    channel_id: str = ""
    guild_id: str | None = None
    guild_name: str | None = None
    guild_owner_id: str | None = None
    capabilities: frozenset[Capability] = frozenset()
    role_names: tuple[str, ...] = ()
    is_direct: bool = False
    mentions_bot: bool = False
    voice_channel_id: str | None = None
    guild: GuildActions | None = None


@dataclass
class CommandContext:
    """Caller-scoped state for one command invocation."""

    message: InboundMessage
    caller: Caller
    spec: CommandSpec
    services: Services
    args: dict[str, Any] = field(default_factory=dict)
    raw_args: list[str] = field(default_factory=list)
    prefix: str = "!"
    permissions: PermissionEvaluator | None = None
    cooldowns: CooldownStore | None = None
    state: dict[str, Any] = field(default_factory=dict)

    @property
    def guild(self) -> GuildActions:
        if self.message.guild is None or self.message.guild_id is None:
            raise GuildOnlyError("This command can only be used in a server.")
        return self.message.guild

    @property
    def guild_id(self) -> str:
        if self.message.guild_id is None:
            raise GuildOnlyError("This command can only be used in a server.")
        return self.message.guild_id

    async def reply(self, content: str) -> None:
        await self.message.handle.reply(content)

    def release_cooldown(self) -> None:
        """Give back the cooldown window this invocation armed."""
        if self.cooldowns is not None:
            self.cooldowns.release(self.caller.user_id, self.spec.name)
