"""discord.py implementations of the engine's message and guild protocols."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import timedelta

import discord

from prefixbot.commands import ActionFailed, Capability, InboundMessage

LOGGER = logging.getLogger("prefixbot.adapters")

MESSAGE_LIMIT = 2000


def truncate(content: str, limit: int = MESSAGE_LIMIT) -> str:
    if len(content) <= limit:
        return content
    return content[: limit - 3] + "..."


def _snowflake(value: str, what: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ActionFailed(f"Invalid {what} ID: {value}") from None


@contextmanager
def platform_errors(action: str) -> Iterator[None]:
    """Turn discord.py HTTP failures into ActionFailed with a user-safe message."""
    try:
        yield
    except discord.Forbidden:
        raise ActionFailed(f"I don't have permission to {action}.") from None
    except discord.NotFound:
        raise ActionFailed(f"Could not {action}: not found.") from None
    except discord.HTTPException as e:
        LOGGER.warning(f"Discord rejected '{action}': status={e.status}, code={e.code}")
        raise ActionFailed(f"Could not {action} (Discord error {e.status}).") from None


class DiscordMessageHandle:
    def __init__(self, message: discord.Message):
        self.message = message

    async def reply(self, content: str) -> None:
        await self.message.reply(truncate(content), mention_author=False)

    async def send(self, content: str) -> None:
        await self.message.channel.send(truncate(content))

    async def typing(self) -> None:
        await self.message.channel.typing()

    async def add_reaction(self, emoji: str) -> None:
        await self.message.add_reaction(emoji)

    async def clear_reactions(self) -> None:
        await self.message.clear_reactions()

    async def delete(self) -> None:
        await self.message.delete()


class DiscordGuildActions:
    def __init__(self, guild: discord.Guild):
        self.guild = guild

    async def _member(self, user_id: str) -> discord.Member:
        member_id = _snowflake(user_id, "user")
        member = self.guild.get_member(member_id)
        if member is not None:
            return member
        with platform_errors("find that member"):
            return await self.guild.fetch_member(member_id)

    def _role(self, role_id: str) -> discord.Role:
        role = self.guild.get_role(_snowflake(role_id, "role"))
        if role is None:
            raise ActionFailed("Role not found.")
        return role

    async def describe(self) -> str:
        guild = self.guild
        owner = f"<@{guild.owner_id}>" if guild.owner_id else "unknown"
        return (
            f"**{guild.name}**\n"
            f"ID: {guild.id}\n"
            f"Owner: {owner}\n"
            f"Members: {guild.member_count or 0}\n"
            f"Channels: {len(guild.text_channels)} text, {len(guild.voice_channels)} voice\n"
            f"Roles: {len(guild.roles)}\n"
            f"Created: {guild.created_at:%Y-%m-%d}"
        )

    async def member_summary(self, user_id: str) -> str | None:
        try:
            member = await self._member(user_id)
        except ActionFailed:
            return None
        roles = [role.name for role in member.roles if role != self.guild.default_role]
        joined = f"{member.joined_at:%Y-%m-%d}" if member.joined_at else "unknown"
        return (
            f"**{member.display_name}** ({member})\n"
            f"ID: {member.id}\n"
            f"Joined: {joined}\n"
            f"Account created: {member.created_at:%Y-%m-%d}\n"
            f"Roles: {', '.join(roles) if roles else 'none'}"
        )

    async def ban(self, user_id: str, reason: str) -> None:
        with platform_errors("ban that user"):
            await self.guild.ban(discord.Object(id=_snowflake(user_id, "user")), reason=reason)

    async def unban(self, user_id: str) -> None:
        with platform_errors("unban that user"):
            await self.guild.unban(discord.Object(id=_snowflake(user_id, "user")))

    async def kick(self, user_id: str, reason: str) -> None:
        with platform_errors("kick that user"):
            await self.guild.kick(discord.Object(id=_snowflake(user_id, "user")), reason=reason)

    async def timeout(self, user_id: str, seconds: int, reason: str) -> None:
        member = await self._member(user_id)
        with platform_errors("time out that member"):
            await member.timeout(timedelta(seconds=seconds), reason=reason)

    async def remove_timeout(self, user_id: str) -> None:
        member = await self._member(user_id)
        with platform_errors("remove that timeout"):
            await member.timeout(None)

    async def purge(self, channel_id: str, limit: int) -> int:
        channel = self.guild.get_channel(_snowflake(channel_id, "channel"))
        if not isinstance(channel, discord.TextChannel):
            raise ActionFailed("Messages can only be bulk deleted in text channels.")
        with platform_errors("delete messages here"):
            deleted = await channel.purge(limit=limit)
        return len(deleted)

    async def prune(self, days: int, *, dry_run: bool, reason: str | None = None) -> int:
        with platform_errors("prune members"):
            if dry_run:
                return await self.guild.estimate_pruned_members(days=days)
            pruned = await self.guild.prune_members(
                days=days, compute_prune_count=True, reason=reason
            )
        return pruned or 0

    async def create_role(self, name: str, color: int | None = None) -> str:
        colour = discord.Colour(color) if color is not None else discord.Colour.default()
        with platform_errors("create that role"):
            role = await self.guild.create_role(name=name, colour=colour)
        return str(role.id)

    async def add_role(self, user_id: str, role_id: str) -> None:
        member = await self._member(user_id)
        role = self._role(role_id)
        with platform_errors("assign that role"):
            await member.add_roles(role)

    async def remove_role(self, user_id: str, role_id: str) -> None:
        member = await self._member(user_id)
        role = self._role(role_id)
        with platform_errors("remove that role"):
            await member.remove_roles(role)

    async def create_text_channel(self, name: str) -> str:
        with platform_errors("create that channel"):
            channel = await self.guild.create_text_channel(name)
        return str(channel.id)

    async def create_voice_channel(self, name: str) -> str:
        with platform_errors("create that voice channel"):
            channel = await self.guild.create_voice_channel(name)
        return str(channel.id)

    async def delete_channel(self, channel_id: str) -> str:
        channel = self.guild.get_channel(_snowflake(channel_id, "channel"))
        if channel is None:
            raise ActionFailed("Channel not found.")
        name = channel.name
        with platform_errors("delete that channel"):
            await channel.delete()
        return name

    async def find_voice_channel(self, name: str) -> str | None:
        wanted = name.strip().lower()
        for channel in self.guild.voice_channels:
            if channel.name.lower() == wanted:
                return str(channel.id)
        return None

    async def voice_channel_names(self, limit: int = 10) -> list[str]:
        return [channel.name for channel in self.guild.voice_channels[:limit]]

    async def send_message(self, channel_id: str, content: str) -> None:
        channel = self.guild.get_channel(_snowflake(channel_id, "channel"))
        if not isinstance(channel, discord.abc.Messageable):
            raise ActionFailed("That channel does not accept messages.")
        with platform_errors("send to that channel"):
            await channel.send(truncate(content))


def capabilities_of(member: discord.Member) -> frozenset[Capability]:
    permissions = member.guild_permissions
    return frozenset(cap for cap in Capability if getattr(permissions, cap.value, False))


def inbound_from_discord(message: discord.Message, bot_user: discord.ClientUser | None) -> InboundMessage:
    """Snapshot a discord.Message for the dispatcher; content is left as sent."""
    author = message.author
    mentions_bot = bot_user is not None and any(user.id == bot_user.id for user in message.mentions)

    inbound = InboundMessage(
        content=message.content,
        author_id=str(author.id),
        handle=DiscordMessageHandle(message),
        author_name=author.name,
        author_is_bot=author.bot,
        channel_id=str(message.channel.id),
        is_direct=message.guild is None,
        mentions_bot=mentions_bot,
    )

    guild = message.guild
    if guild is not None:
        inbound.guild_id = str(guild.id)
        inbound.guild_name = guild.name
        inbound.guild_owner_id = str(guild.owner_id) if guild.owner_id else None
        inbound.guild = DiscordGuildActions(guild)

    if isinstance(author, discord.Member):
        inbound.capabilities = capabilities_of(author)
        inbound.role_names = tuple(role.name for role in author.roles)
        if author.voice is not None and author.voice.channel is not None:
            inbound.voice_channel_id = str(author.voice.channel.id)

    return inbound
