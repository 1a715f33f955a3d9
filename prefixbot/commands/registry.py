"""Command registry: canonical names, aliases, categories."""

import logging

from .models import CommandSpec

LOGGER = logging.getLogger("prefixbot.registry")


class CommandRegistry:
    """Write-once at startup, read-many while serving.

    Registering a name twice replaces the earlier spec but keeps its original
    position, so help output stays in declaration order.
    """

    def __init__(self) -> None:
        self._commands: dict[str, CommandSpec] = {}
        # key: alias -> canonical command name
        self._aliases: dict[str, str] = {}

    def register(self, spec: CommandSpec) -> CommandSpec:
        name = spec.name.lower()
        previous = self._commands.get(name)
        if previous is not None:
            LOGGER.warning(f"Command '{name}' re-registered; replacing previous definition")
            for alias in previous.aliases:
                if self._aliases.get(alias.lower()) == name:
                    del self._aliases[alias.lower()]

        self._commands[name] = spec

        for alias in spec.aliases:
            key = alias.lower()
            bound = self._aliases.get(key)
            if bound is not None and bound != name:
                LOGGER.warning(f"Alias '{key}' moved from '{bound}' to '{name}'")
            self._aliases[key] = name

        LOGGER.debug(f"Registered command '{name}' (aliases: {sorted(spec.aliases)})")
        return spec

    def resolve(self, token: str) -> CommandSpec | None:
        key = token.lower()
        spec = self._commands.get(key)
        if spec is not None:
            return spec
        canonical = self._aliases.get(key)
        if canonical is None:
            return None
        return self._commands.get(canonical)

    def all_specs(self) -> list[CommandSpec]:
        return list(self._commands.values())

    def by_category(self, category: str) -> list[CommandSpec]:
        return [spec for spec in self._commands.values() if spec.category == category]

    def categories(self) -> list[str]:
        # dict preserves first-seen order
        return list(dict.fromkeys(spec.category for spec in self._commands.values()))

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and self.resolve(token) is not None

    def __len__(self) -> int:
        return len(self._commands)
