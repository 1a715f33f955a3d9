"""Fluent builder for command specs.

Example::

    (
        command("ban", "Ban a member")
        .category("Moderation")
        .alias("b")
        .arg("user", ArgKind.USER)
        .arg("reason", rest=True, required=False)
        .cooldown(5)
        .intercept(logging_interceptor, error_handler)
        .handle(ban)
        .register(registry)
    )

Interceptors run in the order given: the first one is outermost. Commands that
declare no cooldown get DEFAULT_COOLDOWN_SECONDS; `.cooldown(0)` disables it.
"""

from __future__ import annotations

from pydantic import BaseModel

from .errors import CommandDefinitionError
from .models import ArgDef, ArgKind, Capability, CommandSpec, Handler, Interceptor
from .registry import CommandRegistry

DEFAULT_COOLDOWN_SECONDS = 3


class CommandBuilder:
    def __init__(self, name: str, description: str = ""):
        self._name = name.lower()
        self._description = description
        self._usage = ""
        self._category = "General"
        self._aliases: list[str] = []
        self._args: list[ArgDef] = []
        self._capabilities: set[Capability] = set()
        self._cooldown: float | None = None
        self._interceptors: list[Interceptor] = []
        self._schema: type[BaseModel] | None = None
        self._handler: Handler | None = None

    def describe(self, description: str) -> CommandBuilder:
        self._description = description
        return self

    def usage(self, usage: str) -> CommandBuilder:
        self._usage = usage
        return self

    def category(self, category: str) -> CommandBuilder:
        self._category = category
        return self

    def alias(self, *aliases: str) -> CommandBuilder:
        self._aliases.extend(alias.lower() for alias in aliases)
        return self

    def arg(
        self,
        name: str,
        kind: ArgKind = ArgKind.STRING,
        *,
        required: bool = True,
        rest: bool = False,
        description: str = "",
    ) -> CommandBuilder:
        self._args.append(
            ArgDef(name=name, kind=kind, required=required, rest=rest, description=description)
        )
        return self

    def require(self, *capabilities: Capability) -> CommandBuilder:
        self._capabilities.update(capabilities)
        return self

    def cooldown(self, seconds: float) -> CommandBuilder:
        self._cooldown = seconds
        return self

    def intercept(self, *interceptors: Interceptor) -> CommandBuilder:
        self._interceptors.extend(interceptors)
        return self

    def validate_with(self, schema: type[BaseModel]) -> CommandBuilder:
        self._schema = schema
        return self

    def handle(self, handler: Handler) -> CommandBuilder:
        self._handler = handler
        return self

    def build(self) -> CommandSpec:
        if self._handler is None:
            raise CommandDefinitionError(f"{self._name}: no handler attached")
        return CommandSpec(
            name=self._name,
            description=self._description,
            handler=self._handler,
            usage=self._usage,
            aliases=frozenset(self._aliases),
            args=tuple(self._args),
            required_capabilities=frozenset(self._capabilities),
            cooldown_seconds=DEFAULT_COOLDOWN_SECONDS if self._cooldown is None else self._cooldown,
            category=self._category,
            interceptors=tuple(self._interceptors),
            schema=self._schema,
        )

    def register(self, registry: CommandRegistry) -> CommandSpec:
        return registry.register(self.build())


def command(name: str, description: str = "") -> CommandBuilder:
    return CommandBuilder(name, description)
