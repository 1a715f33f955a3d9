"""Positional argument parsing with typed coercion."""

import re
from collections.abc import Sequence
from typing import Any

from .errors import InvalidArgument, MissingArgument
from .models import ArgDef, ArgKind

TRUTHY = frozenset({"true", "yes", "on", "1"})

_INTEGER = re.compile(r"[+-]?\d+")
_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")

# Mention punctuation per reference kind: <@123>, <@!123>, <#123>, <@&123>
_MENTION_CHARS = {
    ArgKind.USER: re.compile(r"[<@!>]"),
    ArgKind.CHANNEL: re.compile(r"[<#>]"),
    ArgKind.ROLE: re.compile(r"[<@&>]"),
}


def sanitize_tokens(tokens: Sequence[str]) -> list[str]:
    """Strip control characters and drop tokens left empty."""
    cleaned = (_CONTROL_CHARS.sub("", token).strip() for token in tokens)
    return [token for token in cleaned if token]


def coerce(arg: ArgDef, raw: str) -> Any:
    if arg.kind is ArgKind.INTEGER:
        if not _INTEGER.fullmatch(raw):
            raise InvalidArgument(arg.name, "must be a number")
        return int(raw)

    if arg.kind is ArgKind.BOOLEAN:
        # Permissive: anything outside TRUTHY (including "false" and typos) is False
        return raw.lower() in TRUTHY

    pattern = _MENTION_CHARS.get(arg.kind)
    if pattern is not None:
        return pattern.sub("", raw)

    return raw


def parse_args(raw_tokens: Sequence[str], defs: Sequence[ArgDef]) -> dict[str, Any]:
    """Map raw tokens onto argument definitions, left to right.

    Optional arguments with no token are omitted from the result rather than
    set to None.

    Raises:
        MissingArgument: a required argument has no token.
        InvalidArgument: a token could not be coerced to its declared kind.
    """
    parsed: dict[str, Any] = {}
    index = 0

    for arg in defs:
        if arg.rest:
            remaining = raw_tokens[index:]
            if remaining:
                parsed[arg.name] = " ".join(remaining)
            elif arg.required:
                raise MissingArgument(arg.name)
            index = len(raw_tokens)
            break

        if index >= len(raw_tokens):
            if arg.required:
                raise MissingArgument(arg.name)
            index += 1
            continue

        parsed[arg.name] = coerce(arg, raw_tokens[index])
        index += 1

    return parsed
