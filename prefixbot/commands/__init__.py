from .errors import (
    ActionFailed,
    ArgumentError,
    CollaboratorUnavailable,
    CommandDefinitionError,
    CommandError,
    GuildOnlyError,
    InterceptorError,
    InvalidArgument,
    MissingArgument,
    SchemaValidationError,
    sanitize_error_message,
    user_message_for,
)
from .models import ArgDef, ArgKind, Caller, Capability, CommandSpec, Handler, Interceptor, NextFn
from .arguments import parse_args, sanitize_tokens
from .cooldowns import CooldownResult, CooldownStore
from .interceptors import (
    compose,
    delete_command,
    error_handler,
    logging_interceptor,
    react_loading,
    timing,
    typing,
)
from .registry import CommandRegistry
from .builder import DEFAULT_COOLDOWN_SECONDS, CommandBuilder, command
from .context import CommandContext, GuildActions, InboundMessage, MessageHandle
from .permissions import PermissionEvaluator, PermissionPolicy, PermissionResult, PermissionTier
from .help import command_help, generate_help
from .dispatcher import DispatchOutcome, Dispatcher

__all__ = [
    "DEFAULT_COOLDOWN_SECONDS",
    "ActionFailed",
    "ArgDef",
    "ArgKind",
    "ArgumentError",
    "Caller",
    "Capability",
    "CollaboratorUnavailable",
    "CommandBuilder",
    "CommandContext",
    "CommandDefinitionError",
    "CommandError",
    "CommandRegistry",
    "CommandSpec",
    "CooldownResult",
    "CooldownStore",
    "DispatchOutcome",
    "Dispatcher",
    "GuildActions",
    "GuildOnlyError",
    "Handler",
    "InboundMessage",
    "Interceptor",
    "InterceptorError",
    "InvalidArgument",
    "MessageHandle",
    "MissingArgument",
    "NextFn",
    "PermissionEvaluator",
    "PermissionPolicy",
    "PermissionResult",
    "PermissionTier",
    "SchemaValidationError",
    "command",
    "command_help",
    "compose",
    "delete_command",
    "error_handler",
    "generate_help",
    "logging_interceptor",
    "parse_args",
    "react_loading",
    "sanitize_error_message",
    "sanitize_tokens",
    "timing",
    "typing",
    "user_message_for",
]
