"""Single entry point from an inbound message to a command handler.

    Received -> AliasResolved -> PermissionChecked -> CooldownChecked
             -> ArgsParsed -> SchemaValidated -> Executing -> Terminal

Direct messages, and unprefixed messages that mention the bot, take the chat
path instead. ``handle_message`` never raises; every terminal state except
IGNORED produces exactly one reply.
"""

import logging
import re
from enum import Enum
from typing import TYPE_CHECKING

from pydantic import ValidationError

from .arguments import parse_args, sanitize_tokens
from .context import CommandContext, InboundMessage
from .cooldowns import CooldownStore
from .errors import ArgumentError, SchemaValidationError, user_message_for
from .models import Caller, CommandSpec
from .permissions import PermissionEvaluator
from .registry import CommandRegistry

if TYPE_CHECKING:
    from prefixbot.services import Services

LOGGER = logging.getLogger("prefixbot.dispatcher")

CHAT_COOLDOWN_KEY = "ai_mention"
CHAT_COOLDOWN_MS = 5000
CHAT_REPLY_LIMIT = 1900

_USER_MENTION = re.compile(r"<@!?\d+>")


class DispatchOutcome(str, Enum):
    IGNORED = "ignored"
    DENIED = "denied"
    THROTTLED = "throttled"
    INVALID_ARGS = "invalid_args"
    COMPLETED = "completed"
    FAILED = "failed"
    CHATTED = "chatted"


def format_validation_error(error: ValidationError) -> str:
    parts = []
    for item in error.errors():
        location = ".".join(str(part) for part in item.get("loc", ()))
        parts.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(parts)


class Dispatcher:
    def __init__(
        self,
        registry: CommandRegistry,
        permissions: PermissionEvaluator | None = None,
        cooldowns: CooldownStore | None = None,
        services: "Services | None" = None,
        *,
        prefix: str = "!",
        bot_owner_id: str | None = None,
    ):
        self.registry = registry
        self.permissions = permissions or PermissionEvaluator()
        self.cooldowns = cooldowns or CooldownStore()
        if services is None:
            from prefixbot.services import Services

            services = Services()
        self.services = services
        self.prefix = prefix
        self.bot_owner_id = bot_owner_id

    async def handle_message(self, message: InboundMessage) -> DispatchOutcome:
        try:
            return await self._dispatch(message)
        except Exception as e:
            LOGGER.exception(f"Unhandled error while dispatching message from {message.author_id}: {e}")
            await self._safe_reply(message, user_message_for(e))
            return DispatchOutcome.FAILED

    async def _dispatch(self, message: InboundMessage) -> DispatchOutcome:
        if message.author_is_bot:
            return DispatchOutcome.IGNORED

        content = message.content.strip()
        if message.is_direct or (message.mentions_bot and not content.startswith(self.prefix)):
            return await self._chat(message, _USER_MENTION.sub("", content).strip())
        if not content.startswith(self.prefix):
            return DispatchOutcome.IGNORED

        tokens = content[len(self.prefix) :].split()
        if not tokens:
            return DispatchOutcome.IGNORED

        spec = self.registry.resolve(tokens[0])
        if spec is None:
            LOGGER.debug(f"Unknown command '{tokens[0]}' from {message.author_id}")
            return DispatchOutcome.IGNORED

        return await self._run_command(message, spec, tokens[1:])

    async def _run_command(
        self, message: InboundMessage, spec: CommandSpec, raw_tokens: list[str]
    ) -> DispatchOutcome:
        caller = Caller.from_message(message, self.bot_owner_id)

        permission = self.permissions.evaluate(caller, spec.name, spec.required_capabilities)
        if not permission.allowed:
            await self._safe_reply(message, permission.reason or "❌ Permission denied.")
            return DispatchOutcome.DENIED

        cooldown = self.cooldowns.check_and_arm(caller.user_id, spec.name, spec.cooldown_ms)
        if not cooldown.allowed:
            LOGGER.debug(
                f"Cooldown hit: user={caller.user_id}, command={spec.name}, "
                f"remaining={cooldown.remaining_ms:.0f}ms"
            )
            await self._safe_reply(
                message,
                f"⏳ Please wait {cooldown.remaining_seconds} second(s) before using "
                f"`{self.prefix}{spec.name}` again.",
            )
            return DispatchOutcome.THROTTLED

        usage = spec.usage_for(self.prefix)
        raw_args = sanitize_tokens(raw_tokens)
        try:
            args = parse_args(raw_args, spec.args)
        except ArgumentError as e:
            await self._safe_reply(message, f"❌ {e}\nUsage: `{usage}`")
            return DispatchOutcome.INVALID_ARGS

        if spec.schema is not None:
            try:
                args = spec.schema.model_validate(args).model_dump()
            except ValidationError as e:
                error = SchemaValidationError(format_validation_error(e))
                await self._safe_reply(message, f"❌ Validation error: {error}\nUsage: `{usage}`")
                return DispatchOutcome.INVALID_ARGS

        ctx = CommandContext(
            message=message,
            caller=caller,
            spec=spec,
            services=self.services,
            args=args,
            raw_args=raw_args,
            prefix=self.prefix,
            permissions=self.permissions,
            cooldowns=self.cooldowns,
        )
        try:
            await spec.chain(ctx)
        except Exception as e:
            LOGGER.exception(f"Command '{spec.name}' failed: {e}")
            await self._safe_reply(message, user_message_for(e))
            return DispatchOutcome.FAILED

        return DispatchOutcome.COMPLETED

    async def _chat(self, message: InboundMessage, prompt: str) -> DispatchOutcome:
        if not prompt:
            await self._safe_reply(
                message, "Hey! You can ask me anything. Just @mention me with your question!"
            )
            return DispatchOutcome.CHATTED

        cooldown = self.cooldowns.check_and_arm(message.author_id, CHAT_COOLDOWN_KEY, CHAT_COOLDOWN_MS)
        if not cooldown.allowed:
            await self._safe_reply(
                message, f"Please wait {cooldown.remaining_seconds}s before asking again."
            )
            return DispatchOutcome.THROTTLED

        await self._safe_typing(message)

        async def on_retry(failed_model: str, next_model: str) -> None:
            try:
                await message.handle.send(f"⚠️ `{failed_model}` failed, trying `{next_model}`...")
            except Exception as e:
                LOGGER.debug(f"Could not announce chat retry: {e}")
            await self._safe_typing(message)

        where = message.guild_name or "DM"
        context = f"User {message.author_name or message.author_id} is asking in {where}."
        try:
            response = await self.services.call("chat", "chat", prompt, context, on_retry)
        except Exception as e:
            LOGGER.warning(f"Chat reply failed for {message.author_id}: {e}")
            await self._safe_reply(message, user_message_for(e))
            return DispatchOutcome.FAILED

        if len(response) > CHAT_REPLY_LIMIT:
            response = response[:CHAT_REPLY_LIMIT] + "..."
        await self._safe_reply(message, response)
        return DispatchOutcome.CHATTED

    async def _safe_typing(self, message: InboundMessage) -> None:
        try:
            await message.handle.typing()
        except Exception as e:
            LOGGER.debug(f"Typing indicator failed: {e}")

    async def _safe_reply(self, message: InboundMessage, content: str) -> None:
        try:
            await message.handle.reply(content)
        except Exception as e:
            LOGGER.error(f"Failed to reply to {message.author_id}: {e}")
