"""Interceptor composition and the built-in interceptors.

An interceptor is ``async def interceptor(ctx, call_next)``. It may run code
before and after ``await call_next()``, or skip it to short-circuit the chain.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Sequence
from typing import TYPE_CHECKING

from .errors import InterceptorError, user_message_for
from .models import Handler, Interceptor, NextFn

if TYPE_CHECKING:
    from .context import CommandContext

LOGGER = logging.getLogger("prefixbot.interceptors")

LOADING_EMOJI = "⏳"
SUCCESS_EMOJI = "✅"


def compose(interceptors: Sequence[Interceptor], handler: Handler) -> Handler:
    """Build ``i1(i2(...iN(handler)))``; the first interceptor runs outermost."""
    chain = handler
    for interceptor in reversed(interceptors):
        chain = _link(interceptor, chain)
    return chain


def _link(interceptor: Interceptor, downstream: Handler) -> Handler:
    name = getattr(interceptor, "__name__", repr(interceptor))

    async def run(ctx: CommandContext) -> None:
        called = False

        async def call_next() -> None:
            nonlocal called
            if called:
                raise InterceptorError(f"Interceptor '{name}' called next() more than once")
            called = True
            await downstream(ctx)

        await interceptor(ctx, call_next)

    run.__name__ = f"{name}_link"
    return run


async def logging_interceptor(ctx: CommandContext, call_next: NextFn) -> None:
    content = ctx.message.content[:50]
    LOGGER.info(f"[CMD] {ctx.message.author_name or ctx.caller.user_id}: {content}")
    await call_next()


async def timing(ctx: CommandContext, call_next: NextFn) -> None:
    start = time.perf_counter()
    try:
        await call_next()
    finally:
        elapsed_ms = (time.perf_counter() - start) * 1000
        LOGGER.info(f"[TIMING] {ctx.spec.name} took {elapsed_ms:.0f}ms")


async def typing(ctx: CommandContext, call_next: NextFn) -> None:
    """Show the typing indicator while the command runs."""
    try:
        await ctx.message.handle.typing()
    except Exception as e:
        LOGGER.debug(f"Typing indicator failed: {e}")
    await call_next()


async def react_loading(ctx: CommandContext, call_next: NextFn) -> None:
    """React with an hourglass, then swap it for a checkmark on success."""
    handle = ctx.message.handle
    try:
        await handle.add_reaction(LOADING_EMOJI)
    except Exception as e:
        LOGGER.debug(f"Loading reaction failed: {e}")

    try:
        await call_next()
    finally:
        try:
            await handle.clear_reactions()
        except Exception as e:
            LOGGER.debug(f"Clearing reactions failed: {e}")

    try:
        await handle.add_reaction(SUCCESS_EMOJI)
    except Exception as e:
        LOGGER.debug(f"Success reaction failed: {e}")


async def error_handler(ctx: CommandContext, call_next: NextFn) -> None:
    """Contain downstream failures and reply instead of propagating."""
    try:
        await call_next()
    except InterceptorError:
        raise
    except Exception as e:
        LOGGER.exception(f"Command '{ctx.spec.name}' failed inside error_handler: {e}")
        await ctx.reply(user_message_for(e))


async def delete_command(ctx: CommandContext, call_next: NextFn) -> None:
    """Delete the invoking message once the command has finished."""
    await call_next()
    try:
        await ctx.message.handle.delete()
    except Exception as e:
        LOGGER.debug(f"Could not delete command message: {e}")
