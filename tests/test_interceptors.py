"""
Tests for interceptor composition and the built-in interceptors.
"""

import pytest

from conftest import make_message
from prefixbot.commands import (
    Caller,
    CommandContext,
    CommandSpec,
    InterceptorError,
    compose,
    delete_command,
    error_handler,
    react_loading,
    timing,
    typing,
)
from prefixbot.services import Services


def make_ctx(handler=None, interceptors=()) -> CommandContext:
    async def noop(ctx):
        return None

    message = make_message("!test")
    spec = CommandSpec(
        name="test", description="", handler=handler or noop, interceptors=tuple(interceptors)
    )
    return CommandContext(
        message=message,
        caller=Caller(user_id=message.author_id, guild_id=message.guild_id),
        spec=spec,
        services=Services(),
    )


def recorder(events: list[str], label: str):
    async def interceptor(ctx, call_next):
        events.append(f"{label}:before")
        await call_next()
        events.append(f"{label}:after")

    interceptor.__name__ = label
    return interceptor


class TestCompose:
    async def test_first_declared_is_outermost(self):
        events: list[str] = []

        async def handler(ctx):
            events.append("handler")

        chain = compose([recorder(events, "a"), recorder(events, "b")], handler)
        await chain(make_ctx())
        assert events == ["a:before", "b:before", "handler", "b:after", "a:after"]

    async def test_no_interceptors_runs_handler(self):
        ran = []

        async def handler(ctx):
            ran.append(True)

        await compose([], handler)(make_ctx())
        assert ran == [True]

    async def test_short_circuit_skips_handler(self):
        ran = []

        async def gate(ctx, call_next):
            await ctx.reply("nope")

        async def handler(ctx):
            ran.append(True)

        ctx = make_ctx()
        await compose([gate], handler)(ctx)
        assert ran == []
        assert ctx.message.handle.replies == ["nope"]

    async def test_calling_next_twice_raises(self):
        async def greedy(ctx, call_next):
            await call_next()
            await call_next()

        async def handler(ctx):
            return None

        with pytest.raises(InterceptorError):
            await compose([greedy], handler)(make_ctx())

    async def test_chain_is_reusable_across_invocations(self):
        count = []

        async def handler(ctx):
            count.append(1)

        chain = compose([recorder([], "a")], handler)
        await chain(make_ctx())
        await chain(make_ctx())
        assert len(count) == 2

    async def test_spec_composes_its_chain(self):
        events: list[str] = []

        async def handler(ctx):
            events.append("handler")

        ctx = make_ctx(handler, [recorder(events, "outer")])
        await ctx.spec.chain(ctx)
        assert events == ["outer:before", "handler", "outer:after"]


class TestBuiltins:
    async def test_error_handler_contains_failure(self):
        async def boom(ctx):
            raise RuntimeError("failed at /home/bot/app.py with token=hunter2")

        ctx = make_ctx()
        await compose([error_handler], boom)(ctx)
        assert len(ctx.message.handle.replies) == 1
        reply = ctx.message.handle.replies[0]
        assert "hunter2" not in reply
        assert "/home/bot" not in reply

    async def test_error_handler_does_not_hide_chain_misuse(self):
        async def greedy(ctx, call_next):
            await call_next()
            await call_next()

        async def handler(ctx):
            return None

        with pytest.raises(InterceptorError):
            await compose([error_handler, greedy], handler)(make_ctx())

    async def test_react_loading_success(self):
        ctx = make_ctx()

        async def handler(ctx):
            return None

        await compose([react_loading], handler)(ctx)
        assert ctx.message.handle.reactions == ["⏳", "✅"]
        assert ctx.message.handle.cleared == 1

    async def test_react_loading_clears_on_failure(self):
        ctx = make_ctx()

        async def boom(ctx):
            raise RuntimeError("x")

        with pytest.raises(RuntimeError):
            await compose([react_loading], boom)(ctx)
        assert ctx.message.handle.reactions == ["⏳"]
        assert ctx.message.handle.cleared == 1

    async def test_typing_and_timing(self):
        ctx = make_ctx()

        async def handler(ctx):
            return None

        await compose([timing, typing], handler)(ctx)
        assert ctx.message.handle.typing_count == 1

    async def test_delete_command_after_handler(self):
        ctx = make_ctx()
        seen = []

        async def handler(ctx):
            seen.append(ctx.message.handle.deleted)

        await compose([delete_command], handler)(ctx)
        assert seen == [False]
        assert ctx.message.handle.deleted
