"""Moderation commands: ban, unban, kick, timeout, removetimeout, bulkdelete, prune."""

import logging

from prefixbot.commands import (
    ArgKind,
    CommandContext,
    CommandRegistry,
    command,
    logging_interceptor,
    react_loading,
    typing,
)

from .info import format_duration
from .schemas import (
    MAX_TIMEOUT_SECONDS,
    BulkDeleteRequest,
    MemberAction,
    PruneRequest,
    TimeoutRequest,
)

LOGGER = logging.getLogger("prefixbot.cogs.moderation")

CONFIRM_FLAG = "--confirm"
PRUNE_COOLDOWN = 60


async def ban(ctx: CommandContext) -> None:
    user, reason = ctx.args["user"], ctx.args["reason"]
    await ctx.guild.ban(user, reason)
    await ctx.reply(f"🔨 Banned <@{user}>. Reason: {reason}")


async def unban(ctx: CommandContext) -> None:
    user = ctx.args["user"]
    await ctx.guild.unban(user)
    await ctx.reply(f"✅ Unbanned <@{user}>.")


async def kick(ctx: CommandContext) -> None:
    user, reason = ctx.args["user"], ctx.args["reason"]
    await ctx.guild.kick(user, reason)
    await ctx.reply(f"👢 Kicked <@{user}>. Reason: {reason}")


async def timeout(ctx: CommandContext) -> None:
    user, reason = ctx.args["user"], ctx.args["reason"]
    duration = ctx.args["duration"]
    if duration > MAX_TIMEOUT_SECONDS:
        duration = MAX_TIMEOUT_SECONDS
        await ctx.reply("⚠️ Note: Timeout clamped to maximum of 28 days.")

    await ctx.guild.timeout(user, duration, reason)
    await ctx.reply(f"🔇 Timed out <@{user}> for {format_duration(duration)}. Reason: {reason}")


async def remove_timeout(ctx: CommandContext) -> None:
    user = ctx.args["user"]
    await ctx.guild.remove_timeout(user)
    await ctx.reply(f"🔊 Removed timeout for <@{user}>.")


async def bulk_delete(ctx: CommandContext) -> None:
    count = ctx.args["count"]
    handle = ctx.message.handle
    try:
        await handle.delete()
    except Exception as e:
        LOGGER.debug(f"Could not delete bulkdelete command message: {e}")

    deleted = await ctx.guild.purge(ctx.message.channel_id, count)
    await handle.send(f"🗑️ Deleted {deleted} message(s).")


async def prune(ctx: CommandContext) -> None:
    days = ctx.args["days"]
    confirmed = CONFIRM_FLAG in ctx.raw_args
    reason = ctx.args["reason"].replace(CONFIRM_FLAG, "").strip() or "Inactive member cleanup"

    if not confirmed:
        count = await ctx.guild.prune(days, dry_run=True)
        # Previews never consume the cooldown
        ctx.release_cooldown()
        await ctx.reply(
            "⚠️ **Prune Preview**\n"
            f"This will remove **{count}** members who have been inactive for {days}+ days.\n\n"
            f"To confirm, run: `{ctx.prefix}prune {days} {CONFIRM_FLAG}`"
        )
        return

    LOGGER.info(f"Prune confirmed by {ctx.caller.user_id}: days={days}, reason={reason}")
    count = await ctx.guild.prune(days, dry_run=False, reason=reason)
    await ctx.reply(f"✅ Pruned {count} inactive members ({days}+ days inactive)")


def setup(registry: CommandRegistry) -> None:
    (
        command("ban", "Ban a member")
        .category("Moderation")
        .alias("b")
        .arg("user", ArgKind.USER)
        .arg("reason", rest=True, required=False)
        .cooldown(5)
        .intercept(logging_interceptor)
        .validate_with(MemberAction)
        .handle(ban)
        .register(registry)
    )

    (
        command("unban", "Lift a ban")
        .category("Moderation")
        .arg("user", ArgKind.USER, description="User ID")
        .arg("reason", rest=True, required=False)
        .intercept(logging_interceptor)
        .validate_with(MemberAction)
        .handle(unban)
        .register(registry)
    )

    (
        command("kick", "Kick a member")
        .category("Moderation")
        .alias("k")
        .arg("user", ArgKind.USER)
        .arg("reason", rest=True, required=False)
        .cooldown(5)
        .intercept(logging_interceptor)
        .validate_with(MemberAction)
        .handle(kick)
        .register(registry)
    )

    (
        command("timeout", "Time out a member")
        .category("Moderation")
        .alias("mute", "to")
        .arg("user", ArgKind.USER)
        .arg("duration", ArgKind.INTEGER, required=False, description="Seconds, default 300")
        .arg("reason", rest=True, required=False)
        .cooldown(5)
        .intercept(logging_interceptor)
        .validate_with(TimeoutRequest)
        .handle(timeout)
        .register(registry)
    )

    (
        command("removetimeout", "Remove a member's timeout")
        .category("Moderation")
        .alias("untimeout")
        .arg("user", ArgKind.USER)
        .arg("reason", rest=True, required=False)
        .intercept(logging_interceptor)
        .validate_with(MemberAction)
        .handle(remove_timeout)
        .register(registry)
    )

    (
        command("bulkdelete", "Delete recent messages in this channel")
        .category("Moderation")
        .alias("clear", "purge")
        .arg("count", ArgKind.INTEGER, description="1-100")
        .cooldown(10)
        .intercept(typing, logging_interceptor)
        .validate_with(BulkDeleteRequest)
        .handle(bulk_delete)
        .register(registry)
    )

    (
        command("prune", "Remove inactive members (preview unless --confirm)")
        .category("Moderation")
        .usage(f"[days] [{CONFIRM_FLAG}] [reason...]")
        .arg("days", ArgKind.INTEGER, required=False, description="1-30, default 7")
        .arg("reason", rest=True, required=False)
        .cooldown(PRUNE_COOLDOWN)
        .intercept(logging_interceptor, react_loading)
        .validate_with(PruneRequest)
        .handle(prune)
        .register(registry)
    )
