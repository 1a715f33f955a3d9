"""Informational commands: ping, help, serverinfo, uptime, memberinfo."""

from prefixbot.commands import (
    ArgKind,
    CommandContext,
    CommandRegistry,
    command,
    command_help,
    generate_help,
    logging_interceptor,
    typing,
)


def format_duration(seconds: int) -> str:
    days, rest = divmod(max(seconds, 0), 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    parts = [f"{days}d"] if days else []
    if days or hours:
        parts.append(f"{hours}h")
    if days or hours or minutes:
        parts.append(f"{minutes}m")
    parts.append(f"{secs}s")
    return " ".join(parts)


async def ping(ctx: CommandContext) -> None:
    await ctx.reply("🏓 Pong!")


async def server_info(ctx: CommandContext) -> None:
    await ctx.reply(await ctx.guild.describe())


async def uptime(ctx: CommandContext) -> None:
    await ctx.reply(f"⏱️ Uptime: {format_duration(ctx.services.uptime_seconds())}")


async def member_info(ctx: CommandContext) -> None:
    user_id = ctx.args.get("user", ctx.caller.user_id)
    summary = await ctx.guild.member_summary(user_id)
    if summary is None:
        await ctx.reply("❌ Member not found.")
        return
    await ctx.reply(summary)


def setup(registry: CommandRegistry) -> None:
    async def help_command(ctx: CommandContext) -> None:
        name = ctx.args.get("command")
        if name:
            spec = registry.resolve(name.removeprefix(ctx.prefix))
            if spec is None:
                await ctx.reply(f"❌ Unknown command: `{name}`")
                return
            await ctx.reply(command_help(spec, ctx.prefix, ctx.permissions))
            return

        first, *rest = generate_help(registry, ctx.prefix, ctx.permissions)
        await ctx.reply(first)
        for chunk in rest:
            await ctx.message.handle.send(chunk)

    (
        command("ping", "Check that the bot is responding")
        .category("Info")
        .cooldown(1)
        .handle(ping)
        .register(registry)
    )

    (
        command("help", "List commands or show details for one")
        .category("Info")
        .arg("command", required=False, description="Command to describe")
        .cooldown(2)
        .handle(help_command)
        .register(registry)
    )

    (
        command("serverinfo", "Show information about this server")
        .category("Info")
        .alias("server", "guild")
        .intercept(logging_interceptor)
        .handle(server_info)
        .register(registry)
    )

    (
        command("uptime", "Show how long the bot has been running")
        .category("Info")
        .alias("up")
        .handle(uptime)
        .register(registry)
    )

    (
        command("memberinfo", "Show information about a member")
        .category("Info")
        .alias("user", "whois")
        .arg("user", ArgKind.USER, required=False, description="Defaults to you")
        .intercept(typing)
        .handle(member_info)
        .register(registry)
    )
