"""Command metadata model: capabilities, argument definitions, command specs, callers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import BaseModel

from .errors import CommandDefinitionError

if TYPE_CHECKING:
    from .context import CommandContext, InboundMessage

Handler = Callable[["CommandContext"], Awaitable[None]]
NextFn = Callable[[], Awaitable[None]]
Interceptor = Callable[["CommandContext", NextFn], Awaitable[None]]


class Capability(str, Enum):
    """Permission flags, named after discord.Permissions attributes."""

    ADMINISTRATOR = "administrator"
    KICK_MEMBERS = "kick_members"
    BAN_MEMBERS = "ban_members"
    MODERATE_MEMBERS = "moderate_members"
    MANAGE_MESSAGES = "manage_messages"
    MANAGE_CHANNELS = "manage_channels"
    MANAGE_ROLES = "manage_roles"
    MANAGE_GUILD = "manage_guild"
    MANAGE_NICKNAMES = "manage_nicknames"
    MANAGE_THREADS = "manage_threads"
    MANAGE_WEBHOOKS = "manage_webhooks"
    MANAGE_EXPRESSIONS = "manage_expressions"
    CREATE_PUBLIC_THREADS = "create_public_threads"
    CREATE_INSTANT_INVITE = "create_instant_invite"
    VIEW_AUDIT_LOG = "view_audit_log"
    SEND_MESSAGES = "send_messages"


MODERATION_CAPABILITIES: frozenset[Capability] = frozenset(
    {
        Capability.KICK_MEMBERS,
        Capability.BAN_MEMBERS,
        Capability.MANAGE_MESSAGES,
        Capability.MODERATE_MEMBERS,
    }
)


class ArgKind(str, Enum):
    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    USER = "user"
    CHANNEL = "channel"
    ROLE = "role"


@dataclass(frozen=True)
class ArgDef:
    """A positional argument declaration."""

    name: str
    kind: ArgKind = ArgKind.STRING
    required: bool = True
    rest: bool = False
    description: str = ""

    def display(self) -> str:
        label = f"{self.name}..." if self.rest else self.name
        return f"<{label}>" if self.required else f"[{label}]"


@dataclass(frozen=True)
class CommandSpec:
    """Immutable description of a registered command.

    The interceptor chain is composed once here, so a spec that reaches the
    registry is always runnable.
    """

    name: str
    description: str
    handler: Handler
    usage: str = ""  # argument part only, e.g. "<user> [reason...]"
    aliases: frozenset[str] = frozenset()
    args: tuple[ArgDef, ...] = ()
    required_capabilities: frozenset[Capability] = frozenset()
    cooldown_seconds: float = 0
    category: str = "General"
    interceptors: tuple[Interceptor, ...] = ()
    schema: type[BaseModel] | None = None
    chain: Handler = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        from .interceptors import compose

        if not self.name or self.name != self.name.strip() or " " in self.name:
            raise CommandDefinitionError(f"Invalid command name: {self.name!r}")
        if self.cooldown_seconds < 0:
            raise CommandDefinitionError(
                f"{self.name}: cooldown must be >= 0, got {self.cooldown_seconds}"
            )
        validate_arg_defs(self.name, self.args)

        object.__setattr__(self, "chain", compose(self.interceptors, self.handler))

    @property
    def cooldown_ms(self) -> int:
        return int(self.cooldown_seconds * 1000)

    def usage_for(self, prefix: str = "!") -> str:
        """Full usage line; a custom usage replaces only the argument part."""
        tail = self.usage or " ".join(arg.display() for arg in self.args)
        return f"{prefix}{self.name} {tail}".rstrip()


def validate_arg_defs(command_name: str, defs: tuple[ArgDef, ...]) -> None:
    """Reject duplicate names and any rest argument that is not the last one."""
    seen: set[str] = set()
    for index, arg in enumerate(defs):
        if arg.name in seen:
            raise CommandDefinitionError(f"{command_name}: duplicate argument '{arg.name}'")
        seen.add(arg.name)
        if arg.rest and index != len(defs) - 1:
            raise CommandDefinitionError(
                f"{command_name}: rest argument '{arg.name}' must be the last argument"
            )


@dataclass(frozen=True)
class Caller:
    """Who is invoking a command, snapshotted from one inbound message."""

    user_id: str
    guild_id: str | None = None
    capabilities: frozenset[Capability] = frozenset()
    role_names: tuple[str, ...] = ()
    is_bot_owner: bool = False
    is_guild_owner: bool = False

    @classmethod
    def from_message(cls, message: InboundMessage, bot_owner_id: str | None) -> Caller:
        return cls(
            user_id=message.author_id,
            guild_id=message.guild_id,
            capabilities=message.capabilities,
            role_names=message.role_names,
            is_bot_owner=bool(bot_owner_id) and message.author_id == bot_owner_id,
            is_guild_owner=message.guild_owner_id is not None
            and message.author_id == message.guild_owner_id,
        )

    def has(self, capability: Capability) -> bool:
        return capability in self.capabilities

    def has_any(self, capabilities: Iterable[Capability]) -> bool:
        return any(cap in self.capabilities for cap in capabilities)

    def has_all(self, capabilities: Iterable[Capability]) -> bool:
        return all(cap in self.capabilities for cap in capabilities)
