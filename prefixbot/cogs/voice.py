"""Voice commands, gated by the per-guild voice lock."""

from prefixbot.commands import CommandContext, CommandRegistry, NextFn, command, logging_interceptor

MAX_SPEAK_LENGTH = 500


async def voice_lock_guard(ctx: CommandContext, call_next: NextFn) -> None:
    """Short-circuit when the guild's voice lock excludes the caller."""
    denial = ctx.services.voice_locks.check(ctx.guild_id, ctx.caller.user_id)
    if denial is not None:
        await ctx.reply(denial)
        return
    await call_next()


async def join(ctx: CommandContext) -> None:
    name = ctx.args["channel"]
    channel_id = await ctx.guild.find_voice_channel(name)
    if channel_id is None:
        available = await ctx.guild.voice_channel_names(10)
        await ctx.reply(f'Voice channel "{name}" not found. Available: {", ".join(available)}')
        return
    await ctx.services.call("voice", "join", ctx.guild_id, channel_id)
    await ctx.reply(f"🎤 Joined **{name}**")


async def leave(ctx: CommandContext) -> None:
    left = await ctx.services.call("voice", "leave", ctx.guild_id)
    await ctx.reply("👋 Left the voice channel." if left else "I'm not in a voice channel.")


async def say(ctx: CommandContext) -> None:
    text = ctx.args["text"]
    if len(text) > MAX_SPEAK_LENGTH:
        await ctx.reply(f"Text too long. Maximum {MAX_SPEAK_LENGTH} characters.")
        return
    await ctx.services.call("voice", "speak", ctx.guild_id, text)
    await ctx.reply("🔊 Speaking...")


async def lock_voice(ctx: CommandContext) -> None:
    locks = ctx.services.voice_locks
    if not locks.lock(ctx.guild_id, ctx.caller.user_id, ctx.message.voice_channel_id):
        await ctx.reply(f"❌ Only {locks.owner_name} can lock voice commands.")
        return

    await ctx.reply(f"🔒 Voice commands locked! Only you can control the bot now, {locks.owner_name}.")
    if ctx.message.voice_channel_id and ctx.services.voice is not None:
        await ctx.services.call("voice", "join", ctx.guild_id, ctx.message.voice_channel_id)
        await ctx.reply("🎤 Joined your voice channel!")


async def unlock_voice(ctx: CommandContext) -> None:
    locks = ctx.services.voice_locks
    if not locks.unlock(ctx.guild_id, ctx.caller.user_id):
        await ctx.reply(f"❌ Only {locks.owner_name} can unlock voice commands.")
        return
    await ctx.reply("🔓 Voice commands unlocked! Everyone can control the bot now.")


async def voice_status(ctx: CommandContext) -> None:
    await ctx.reply(ctx.services.voice_locks.status(ctx.guild_id))


def setup(registry: CommandRegistry) -> None:
    (
        command("join", "Join a voice channel by name")
        .category("Voice")
        .alias("vc", "voicejoin")
        .arg("channel", rest=True, description="Voice channel name")
        .intercept(logging_interceptor, voice_lock_guard)
        .handle(join)
        .register(registry)
    )

    (
        command("leave", "Leave the voice channel")
        .category("Voice")
        .alias("disconnect", "voiceleave")
        .intercept(logging_interceptor, voice_lock_guard)
        .handle(leave)
        .register(registry)
    )

    (
        command("say", "Speak text in the voice channel")
        .category("Voice")
        .alias("speak", "tts")
        .arg("text", rest=True)
        .cooldown(3)
        .intercept(logging_interceptor, voice_lock_guard)
        .handle(say)
        .register(registry)
    )

    (
        command("lockvoice", "Restrict voice commands to the bot owner")
        .category("Voice")
        .alias("vlock")
        .intercept(logging_interceptor)
        .handle(lock_voice)
        .register(registry)
    )

    (
        command("unlockvoice", "Let everyone use voice commands again")
        .category("Voice")
        .alias("vunlock")
        .intercept(logging_interceptor)
        .handle(unlock_voice)
        .register(registry)
    )

    (
        command("voicestatus", "Show the voice lock status")
        .category("Voice")
        .alias("vstatus")
        .handle(voice_status)
        .register(registry)
    )
