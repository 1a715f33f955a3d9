"""Command error taxonomy and user-facing error sanitizing."""

import re

MAX_ERROR_LENGTH = 200

_WINDOWS_PATH = re.compile(r"[A-Za-z]:\\[^:\n]+")
_POSIX_PATH = re.compile(r"/[^\s:]+/[^\s:]+")
_LONG_TOKEN = re.compile(r"[A-Za-z0-9_\-]{50,}")
_SECRET_ASSIGNMENT = re.compile(
    r"\b(token|api[_-]?key|key|secret|password|passwd|authorization)\s*[=:]\s*\S+",
    re.IGNORECASE,
)
_BEARER = re.compile(r"\bBearer\s+\S+", re.IGNORECASE)
_STACK_FRAME = re.compile(
    r"\n\s*at\s+.+|\n\s*File \".+\", line \d+.*|\s*Traceback \(most recent call last\):"
)


class CommandError(Exception):
    """Base class for errors raised by the command engine."""


class CommandDefinitionError(CommandError, ValueError):
    """A command was declared with an invalid shape (raised at construction)."""


class ArgumentError(CommandError):
    """User input did not match the command's argument schema."""


class MissingArgument(ArgumentError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Missing required argument: {name}")


class InvalidArgument(ArgumentError):
    def __init__(self, name: str, reason: str):
        self.name = name
        self.reason = reason
        super().__init__(f"{name} {reason}")


class SchemaValidationError(ArgumentError):
    """Parsed arguments failed the command's declared pydantic schema."""


class CollaboratorUnavailable(CommandError):
    """A downstream service (chat backend, stats, market data, voice) failed."""

    def __init__(self, feature: str, detail: str = ""):
        self.feature = feature
        self.detail = detail
        super().__init__(f"{feature} unavailable" + (f": {detail}" if detail else ""))


class ActionFailed(CommandError):
    """The platform refused a guild action; the message is safe to show as-is."""


class InterceptorError(CommandError):
    """An interceptor broke the chain contract."""


class GuildOnlyError(CommandError):
    """A handler needed guild context but the message came from a DM."""


def user_message_for(error: BaseException) -> str:
    """Chat reply for an exception that reached a containment boundary."""
    if isinstance(error, CollaboratorUnavailable):
        return (
            f"⚠️ The {error.feature} feature is currently unavailable. "
            "Please try again later."
        )
    if isinstance(error, (ActionFailed, GuildOnlyError)):
        return f"❌ {error}"
    if isinstance(error, ArgumentError):
        return f"❌ {sanitize_error_message(error)}"
    return f"❌ Error: {sanitize_error_message(error)}"


def sanitize_error_message(error: BaseException | None) -> str:
    """Turn an exception into a bounded message that is safe to show in chat.

    File paths, long opaque tokens, credential assignments and stack frames are
    stripped; the result never exceeds MAX_ERROR_LENGTH characters plus an
    ellipsis.
    """
    if not isinstance(error, Exception):
        return "An unexpected error occurred."

    message = str(error)

    message = _STACK_FRAME.sub("", message)
    message = _SECRET_ASSIGNMENT.sub(lambda m: f"{m.group(1)}=[redacted]", message)
    message = _BEARER.sub("Bearer [redacted]", message)
    message = _WINDOWS_PATH.sub("[path]", message)
    message = _POSIX_PATH.sub("[path]", message)
    message = _LONG_TOKEN.sub("[redacted]", message)
    message = message.strip()

    if len(message) > MAX_ERROR_LENGTH:
        message = message[:MAX_ERROR_LENGTH] + "..."

    return message or "An error occurred while processing your request."
