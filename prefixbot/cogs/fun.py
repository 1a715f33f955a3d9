import random

from prefixbot.commands import CommandContext, CommandRegistry, command, logging_interceptor

RESPONSES = [
    "It is certain.",
    "It is decidedly so.",
    "Without a doubt.",
    "Yes - definitely.",
    "You may rely on it.",
    "As I see it, yes.",
    "Most likely.",
    "Outlook good.",
    "Yes.",
    "Signs point to yes.",
    "Reply hazy, try again.",
    "Ask again later.",
    "Better not tell you now.",
    "Cannot predict now.",
    "Concentrate and ask again.",
    "Don't count on it.",
    "My reply is no.",
    "My sources say no.",
    "Outlook not so good.",
    "Very doubtful.",
]


async def eight_ball(ctx: CommandContext) -> None:
    if not ctx.args.get("question"):
        await ctx.reply("You need to ask a question!")
        return
    await ctx.reply(f"🎱 {random.choice(RESPONSES)}")


def setup(registry: CommandRegistry) -> None:
    (
        command("8ball", "Ask the magic 8 ball")
        .category("Fun")
        .arg("question", rest=True, required=False)
        .cooldown(5)
        .intercept(logging_interceptor)
        .handle(eight_ball)
        .register(registry)
    )
