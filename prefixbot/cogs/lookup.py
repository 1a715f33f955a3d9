"""Lookup commands backed by external collaborators: stats, clan, movers, ask."""

import logging

from prefixbot.commands import (
    ArgKind,
    CommandContext,
    CommandRegistry,
    command,
    logging_interceptor,
    timing,
    typing,
)
from prefixbot.services import ClanSummary, Mover, PlayerSummary

from .schemas import MoversRequest

LOGGER = logging.getLogger("prefixbot.cogs.lookup")

CHAT_REPLY_LIMIT = 1900


def format_player(player: PlayerSummary) -> str:
    lines = [f"**{player.nickname}** - World of Warships Stats"]
    if player.clan_tag:
        lines.append(f"**Clan:** [{player.clan_tag}]")
    lines += [
        "",
        f"⚔️ **Battles:** {player.battles:,}",
        f"🏆 **Win Rate:** {player.win_rate:.2f}%",
        f"💥 **Avg Damage:** {player.average_damage:,.0f}",
    ]
    return "\n".join(lines)


def format_clan(clan: ClanSummary) -> str:
    lines = [f"**[{clan.tag}] {clan.name}**", f"👥 **Members:** {clan.members_count}"]
    if clan.description:
        lines.append(clan.description[:500])
    return "\n".join(lines)


def format_movers(exchange: str, timeframe: str, movers: list[Mover]) -> str:
    if not movers:
        return f"No movers found on {exchange} ({timeframe})."
    lines = [f"📈 **Top movers** on {exchange} ({timeframe})"]
    for rank, mover in enumerate(movers, start=1):
        lines.append(
            f"{rank}. `{mover.symbol}` {mover.change_percent:+.2f}% @ {mover.price:,.4f}"
        )
    return "\n".join(lines)


async def stats(ctx: CommandContext) -> None:
    name = ctx.args["player"]
    player = await ctx.services.call("stats", "lookup_player", name)
    if player is None:
        await ctx.reply(f'❌ Player "{name}" not found.')
        return
    await ctx.reply(format_player(player))


async def clan(ctx: CommandContext) -> None:
    query = ctx.args["query"]
    summary = await ctx.services.call("stats", "lookup_clan", query)
    if summary is None:
        await ctx.reply(f'❌ Clan "{query}" not found.')
        return
    await ctx.reply(format_clan(summary))


async def movers(ctx: CommandContext) -> None:
    exchange, timeframe, limit = ctx.args["exchange"], ctx.args["timeframe"], ctx.args["limit"]
    result = await ctx.services.call("market", "get_movers", exchange, timeframe, limit)
    await ctx.reply(format_movers(exchange, timeframe, result))


async def ask(ctx: CommandContext) -> None:
    handle = ctx.message.handle

    async def on_retry(failed_model: str, next_model: str) -> None:
        try:
            await handle.send(f"⚠️ `{failed_model}` failed, trying `{next_model}`...")
            await handle.typing()
        except Exception as e:
            LOGGER.debug(f"Could not announce chat retry: {e}")

    response = await ctx.services.call("chat", "chat", ctx.args["question"], None, on_retry)
    if len(response) > CHAT_REPLY_LIMIT:
        response = response[:CHAT_REPLY_LIMIT] + "..."
    await ctx.reply(response)


def setup(registry: CommandRegistry) -> None:
    (
        command("stats", "Look up a World of Warships player")
        .category("Lookup")
        .alias("wows", "player", "lookup")
        .arg("player", rest=True)
        .cooldown(5)
        .intercept(typing, timing)
        .handle(stats)
        .register(registry)
    )

    (
        command("clan", "Look up a World of Warships clan")
        .category("Lookup")
        .alias("claninfo", "clanlookup")
        .arg("query", rest=True, description="Clan tag or name")
        .cooldown(5)
        .intercept(typing, timing)
        .handle(clan)
        .register(registry)
    )

    (
        command("movers", "Show the biggest market movers")
        .category("Lookup")
        .arg("exchange", required=False, description="Default binance")
        .arg("timeframe", required=False, description="1h, 4h, 24h or 7d")
        .arg("limit", ArgKind.INTEGER, required=False, description="1-25, default 10")
        .cooldown(5)
        .intercept(typing, timing)
        .validate_with(MoversRequest)
        .handle(movers)
        .register(registry)
    )

    (
        command("ask", "Ask the AI a question")
        .category("Lookup")
        .alias("ai", "chat")
        .arg("question", rest=True)
        .cooldown(10)
        .intercept(logging_interceptor, typing)
        .handle(ask)
        .register(registry)
    )
