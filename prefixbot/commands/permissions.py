"""Tiered command permissions.

Rules are evaluated top to bottom and the first rule whose command set
contains the command decides. A command listed in several sets (a
configuration mistake) therefore always resolves to the earliest tier:

    1. disabled by default      bot owner only, everyone else sees "disabled"
    2. owner only               bot owner only
    3. admin required           bot owner or administrator
    4. moderator required       bot owner or any moderation capability
    5. role-name restricted     bot owner, guild owner, or a leadership role
    6. explicit capabilities    bot owner or ALL listed capabilities
    7. legacy admin fallback    bot owner or administrator
    8. everything else          public
"""

import logging
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

from .models import MODERATION_CAPABILITIES, Caller, Capability

LOGGER = logging.getLogger("prefixbot.permissions")


class PermissionTier(str, Enum):
    NO_GUILD = "no_guild"
    DISABLED = "disabled"
    OWNER_ONLY = "owner_only"
    ADMIN_REQUIRED = "admin_required"
    MODERATOR_REQUIRED = "moderator_required"
    ROLE_RESTRICTED = "role_restricted"
    CAPABILITIES = "capabilities"
    LEGACY_ADMIN = "legacy_admin"
    PUBLIC = "public"


DENY_REASONS: dict[PermissionTier, str] = {
    PermissionTier.NO_GUILD: "❌ Commands can only be used inside a server.",
    PermissionTier.DISABLED: (
        "🚫 **This command is disabled for security reasons.**\n"
        "DM, message manipulation, and export commands are restricted to prevent abuse."
    ),
    PermissionTier.OWNER_ONLY: (
        "🔒 **This command is restricted to the bot owner only.**\n"
        "This includes role management, server-wide changes, automod, templates, "
        "and mass operations."
    ),
    PermissionTier.ADMIN_REQUIRED: (
        "🔒 **This command requires Administrator permission.**\n"
        "Channel management, webhooks, server assets, and events require admin access."
    ),
    PermissionTier.MODERATOR_REQUIRED: (
        "🔒 **This command requires Moderator permissions.**\n"
        "You need Kick Members, Ban Members, Moderate Members, or Manage Messages permission."
    ),
    PermissionTier.ROLE_RESTRICTED: (
        "🔒 **Role assignment is restricted to Commanders and Executive Officers only.**\n"
        "You need a Commander, Co-Commander, or Executive Officer role to assign or remove "
        "roles from members."
    ),
    PermissionTier.CAPABILITIES: (
        "❌ You do not have the required Discord permissions for this command."
    ),
    PermissionTier.LEGACY_ADMIN: "🔒 This command requires Administrator permission.",
}


DISABLED_BY_DEFAULT_COMMANDS = frozenset(
    {"dm", "editdm", "deletedm", "readdms", "send", "edit", "delete", "webhooksend", "exportchat"}
)

BOT_OWNER_ONLY_COMMANDS = frozenset(
    {
        "createrole", "deleterole", "editrole", "setrolepositions",
        "prune", "editserver",
        "createautomod", "editautomod", "deleteautomod",
        "createtemplate", "synctemplate", "deletetemplate",
        "bulkprivacy", "organize", "setchannelpositions",
    }
)

ADMIN_REQUIRED_COMMANDS = frozenset(
    {
        "deletechannel", "deletecategory", "createchannel", "createvoice", "createforum",
        "createannouncement", "createstage", "createcategory",
        "editchannel", "setchannelposition", "movechannel", "setchannelprivate",
        "setcategoryprivate", "setchannelperms", "channelperms", "syncchannelperms",
        "createwebhook", "deletewebhook",
        "createemoji", "deleteemoji", "createsticker", "deletesticker",
        "createevent", "deleteevent", "editevent",
        "deleteinvite", "editwelcome", "setwidget", "button", "selectmenu",
    }
)

MOD_REQUIRED_COMMANDS = frozenset(
    {
        "kick", "ban", "unban", "timeout", "removetimeout", "untimeout", "editmember",
        "bulkdelete", "purge", "clearreactions", "clearemoji",
        "lockthread", "unlockthread", "archivethread",
        "auditlog", "audit", "bans", "getban",
    }
)

ROLE_RESTRICTED_COMMANDS = frozenset({"addrole", "removerole"})

LEADERSHIP_ROLE_NAMES: tuple[str, ...] = (
    "commander",
    "co-commander",
    "executive officer",
    "xo",
    "clan leader",
    "deputy commander",
)

COMMAND_CAPABILITIES: dict[str, frozenset[Capability]] = {
    name: frozenset(caps)
    for name, caps in {
        "createchannel": {Capability.MANAGE_CHANNELS},
        "deletechannel": {Capability.MANAGE_CHANNELS},
        "editchannel": {Capability.MANAGE_CHANNELS},
        "createvoice": {Capability.MANAGE_CHANNELS},
        "createcategory": {Capability.MANAGE_CHANNELS},
        "deletecategory": {Capability.MANAGE_CHANNELS},
        "setchannelperms": {Capability.MANAGE_CHANNELS, Capability.MANAGE_ROLES},
        "createrole": {Capability.MANAGE_ROLES},
        "deleterole": {Capability.MANAGE_ROLES},
        "editrole": {Capability.MANAGE_ROLES},
        "addrole": {Capability.MANAGE_ROLES},
        "removerole": {Capability.MANAGE_ROLES},
        "editserver": {Capability.MANAGE_GUILD},
        "automod": {Capability.MANAGE_GUILD},
        "prune": {Capability.KICK_MEMBERS},
        "previewprune": {Capability.KICK_MEMBERS},
        "createemoji": {Capability.MANAGE_EXPRESSIONS},
        "deleteemoji": {Capability.MANAGE_EXPRESSIONS},
        "createwebhook": {Capability.MANAGE_WEBHOOKS},
        "deletewebhook": {Capability.MANAGE_WEBHOOKS},
        "kick": {Capability.KICK_MEMBERS},
        "ban": {Capability.BAN_MEMBERS},
        "unban": {Capability.BAN_MEMBERS},
        "timeout": {Capability.MODERATE_MEMBERS},
        "removetimeout": {Capability.MODERATE_MEMBERS},
        "editmember": {Capability.MANAGE_NICKNAMES},
        "bulkdelete": {Capability.MANAGE_MESSAGES},
        "purge": {Capability.MANAGE_MESSAGES},
        "pin": {Capability.MANAGE_MESSAGES},
        "unpin": {Capability.MANAGE_MESSAGES},
        "crosspost": {Capability.MANAGE_MESSAGES},
        "createthread": {Capability.CREATE_PUBLIC_THREADS},
        "archivethread": {Capability.MANAGE_THREADS},
        "lockthread": {Capability.MANAGE_THREADS},
        "unlockthread": {Capability.MANAGE_THREADS},
        "auditlog": {Capability.VIEW_AUDIT_LOG},
        "bans": {Capability.BAN_MEMBERS},
        "createinvite": {Capability.CREATE_INSTANT_INVITE},
        "deleteinvite": {Capability.MANAGE_GUILD},
        "button": {Capability.MANAGE_GUILD},
        "selectmenu": {Capability.MANAGE_GUILD},
    }.items()
}

LEGACY_ADMIN_COMMANDS = frozenset(
    {
        "editserver", "editwelcome", "setwidget", "widgetsettings",
        "createtemplate", "synctemplate", "deletetemplate", "button", "selectmenu",
    }
)


@dataclass(frozen=True)
class PermissionResult:
    allowed: bool
    tier: PermissionTier
    reason: str | None = None


@dataclass(frozen=True)
class PermissionPolicy:
    """The rule sets the evaluator walks. Sets may overlap; order decides."""

    disabled: frozenset[str] = DISABLED_BY_DEFAULT_COMMANDS
    owner_only: frozenset[str] = BOT_OWNER_ONLY_COMMANDS
    admin_required: frozenset[str] = ADMIN_REQUIRED_COMMANDS
    moderator_required: frozenset[str] = MOD_REQUIRED_COMMANDS
    role_restricted: frozenset[str] = ROLE_RESTRICTED_COMMANDS
    leadership_roles: tuple[str, ...] = LEADERSHIP_ROLE_NAMES
    command_capabilities: Mapping[str, frozenset[Capability]] = field(
        default_factory=lambda: dict(COMMAND_CAPABILITIES)
    )
    legacy_admin: frozenset[str] = LEGACY_ADMIN_COMMANDS

    def capabilities_for(
        self, command_name: str, declared: Iterable[Capability] = ()
    ) -> frozenset[Capability]:
        """Capabilities listed for a command here, plus any its spec declares."""
        return frozenset(self.command_capabilities.get(command_name, ())) | frozenset(declared)


@dataclass(frozen=True)
class AccessRequest:
    command: str
    # union of the policy map and the command's own declaration
    capabilities: frozenset[Capability] = frozenset()


@dataclass(frozen=True)
class PolicyRule:
    tier: PermissionTier
    matches: Callable[[AccessRequest], bool]
    permits: Callable[[Caller, AccessRequest], bool]


def _allow(tier: PermissionTier) -> PermissionResult:
    return PermissionResult(allowed=True, tier=tier)


def _deny(tier: PermissionTier, reason: str | None = None) -> PermissionResult:
    return PermissionResult(allowed=False, tier=tier, reason=reason or DENY_REASONS[tier])


def _in(names: frozenset[str]) -> Callable[[AccessRequest], bool]:
    return lambda request: request.command in names


def _bot_owner(caller: Caller, _request: AccessRequest) -> bool:
    return caller.is_bot_owner


def _admin(caller: Caller, _request: AccessRequest) -> bool:
    return caller.is_bot_owner or caller.has(Capability.ADMINISTRATOR)


def _moderator(caller: Caller, _request: AccessRequest) -> bool:
    return caller.is_bot_owner or caller.has_any(MODERATION_CAPABILITIES)


def _all_capabilities(caller: Caller, request: AccessRequest) -> bool:
    return caller.is_bot_owner or caller.has_all(request.capabilities)


class PermissionEvaluator:
    def __init__(self, policy: PermissionPolicy | None = None):
        self.policy = policy or PermissionPolicy()
        self.rules = self._build_rules(self.policy)

    @staticmethod
    def _build_rules(policy: PermissionPolicy) -> list[PolicyRule]:
        fragments = tuple(name.lower() for name in policy.leadership_roles if name)

        def leadership(caller: Caller, _request: AccessRequest) -> bool:
            if caller.is_bot_owner or caller.is_guild_owner:
                return True
            return any(
                fragment in role.lower() for role in caller.role_names for fragment in fragments
            )

        return [
            PolicyRule(PermissionTier.DISABLED, _in(policy.disabled), _bot_owner),
            PolicyRule(PermissionTier.OWNER_ONLY, _in(policy.owner_only), _bot_owner),
            PolicyRule(PermissionTier.ADMIN_REQUIRED, _in(policy.admin_required), _admin),
            PolicyRule(PermissionTier.MODERATOR_REQUIRED, _in(policy.moderator_required), _moderator),
            PolicyRule(PermissionTier.ROLE_RESTRICTED, _in(policy.role_restricted), leadership),
            PolicyRule(
                PermissionTier.CAPABILITIES,
                lambda request: bool(request.capabilities),
                _all_capabilities,
            ),
            PolicyRule(PermissionTier.LEGACY_ADMIN, _in(policy.legacy_admin), _admin),
        ]

    def _request(self, command_name: str, declared: Iterable[Capability]) -> AccessRequest:
        name = command_name.lower()
        return AccessRequest(name, self.policy.capabilities_for(name, declared))

    def tier_for(self, command_name: str, declared: Iterable[Capability] = ()) -> PermissionTier:
        """The tier that would decide ``command_name``."""
        request = self._request(command_name, declared)
        for rule in self.rules:
            if rule.matches(request):
                return rule.tier
        return PermissionTier.PUBLIC

    def evaluate(
        self, caller: Caller, command_name: str, declared: Iterable[Capability] = ()
    ) -> PermissionResult:
        """Decide whether ``caller`` may run ``command_name``; the first matching rule wins."""
        if caller.guild_id is None:
            return _deny(PermissionTier.NO_GUILD)

        request = self._request(command_name, declared)
        for rule in self.rules:
            if not rule.matches(request):
                continue
            if rule.permits(caller, request):
                return _allow(rule.tier)

            LOGGER.debug(
                f"Permission denied: user={caller.user_id}, command={request.command}, "
                f"tier={rule.tier.value}"
            )
            if rule.tier is PermissionTier.CAPABILITIES:
                return _deny(rule.tier, _missing_capabilities_reason(caller, request))
            return _deny(rule.tier)

        return _allow(PermissionTier.PUBLIC)


def _missing_capabilities_reason(caller: Caller, request: AccessRequest) -> str:
    missing = sorted(cap.value for cap in request.capabilities if not caller.has(cap))
    names = ", ".join(name.replace("_", " ").title() for name in missing)
    return f"{DENY_REASONS[PermissionTier.CAPABILITIES]}\nMissing: {names}"
