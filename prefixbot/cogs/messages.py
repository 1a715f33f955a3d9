"""Message commands. ``send`` sits in the disabled tier: only the bot owner can use it."""

from prefixbot.commands import (
    ArgKind,
    CommandContext,
    CommandRegistry,
    command,
    delete_command,
    logging_interceptor,
)

from .schemas import SendRequest


async def send(ctx: CommandContext) -> None:
    await ctx.guild.send_message(ctx.args["channel"], ctx.args["content"])


def setup(registry: CommandRegistry) -> None:
    (
        command("send", "Post a message to a channel as the bot")
        .category("Messages")
        .arg("channel", ArgKind.CHANNEL)
        .arg("content", rest=True)
        .intercept(logging_interceptor, delete_command)
        .validate_with(SendRequest)
        .handle(send)
        .register(registry)
    )
