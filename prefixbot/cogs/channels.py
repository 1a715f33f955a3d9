"""Channel commands: createchannel, createvoice, deletechannel."""

from prefixbot.commands import ArgKind, CommandContext, CommandRegistry, command, logging_interceptor

from .schemas import ChannelName, ChannelTarget


async def create_channel(ctx: CommandContext) -> None:
    channel_id = await ctx.guild.create_text_channel(ctx.args["name"])
    await ctx.reply(f"✅ Created text channel <#{channel_id}>")


async def create_voice(ctx: CommandContext) -> None:
    channel_id = await ctx.guild.create_voice_channel(ctx.args["name"])
    await ctx.reply(f"✅ Created voice channel <#{channel_id}>")


async def delete_channel(ctx: CommandContext) -> None:
    name = await ctx.guild.delete_channel(ctx.args["channel"])
    await ctx.reply(f"🗑️ Deleted channel **{name}**")


def setup(registry: CommandRegistry) -> None:
    (
        command("createchannel", "Create a text channel")
        .category("Channels")
        .arg("name")
        .cooldown(5)
        .intercept(logging_interceptor)
        .validate_with(ChannelName)
        .handle(create_channel)
        .register(registry)
    )

    (
        command("createvoice", "Create a voice channel")
        .category("Channels")
        .arg("name", rest=True)
        .intercept(logging_interceptor)
        .validate_with(ChannelName)
        .handle(create_voice)
        .register(registry)
    )

    (
        command("deletechannel", "Delete a channel")
        .category("Channels")
        .arg("channel", ArgKind.CHANNEL)
        .cooldown(5)
        .intercept(logging_interceptor)
        .validate_with(ChannelTarget)
        .handle(delete_channel)
        .register(registry)
    )
