"""Help text generation from the registry."""

from .models import CommandSpec
from .permissions import PermissionEvaluator, PermissionTier
from .registry import CommandRegistry

# Discord rejects messages of 2000 characters or more
HELP_CHUNK_LIMIT = 1900

TIER_LABELS = {
    PermissionTier.DISABLED: "Disabled",
    PermissionTier.OWNER_ONLY: "Bot owner only",
    PermissionTier.ADMIN_REQUIRED: "Administrator",
    PermissionTier.MODERATOR_REQUIRED: "Moderator",
    PermissionTier.ROLE_RESTRICTED: "Leadership role",
    PermissionTier.LEGACY_ADMIN: "Administrator",
}


def requirement_label(spec: CommandSpec, permissions: PermissionEvaluator) -> str | None:
    tier = permissions.tier_for(spec.name, spec.required_capabilities)
    if tier is PermissionTier.PUBLIC:
        return None
    if tier is PermissionTier.CAPABILITIES:
        caps = permissions.policy.capabilities_for(spec.name, spec.required_capabilities)
        return ", ".join(sorted(cap.value.replace("_", " ").title() for cap in caps))
    return TIER_LABELS[tier]


def _chunk(lines: list[str], limit: int = HELP_CHUNK_LIMIT) -> list[str]:
    chunks: list[str] = []
    current = ""
    for line in lines:
        line = line if len(line) <= limit else line[: limit - 3] + "..."
        candidate = f"{current}\n{line}" if current else line
        if len(candidate) > limit:
            chunks.append(current)
            current = line
        else:
            current = candidate
    if current:
        chunks.append(current)
    return chunks


def generate_help(
    registry: CommandRegistry,
    prefix: str = "!",
    permissions: PermissionEvaluator | None = None,
) -> list[str]:
    """Command list grouped by category, split into message-sized chunks.

    Categories and commands appear in registration order. Commands in the
    disabled tier are left out.
    """
    permissions = permissions or PermissionEvaluator()
    lines = [f"**📖 Commands** (prefix `{prefix}`)"]

    for category in registry.categories():
        entries = []
        for spec in registry.by_category(category):
            tier = permissions.tier_for(spec.name, spec.required_capabilities)
            if tier is PermissionTier.DISABLED:
                continue
            marker = " 🔒" if tier is not PermissionTier.PUBLIC else ""
            entries.append(f"`{spec.usage_for(prefix)}` - {spec.description}{marker}")
        if entries:
            lines.append("")
            lines.append(f"**{category}**")
            lines.extend(entries)

    lines.append("")
    lines.append(f"Use `{prefix}help <command>` for details. 🔒 = restricted")
    return _chunk(lines)


def command_help(
    spec: CommandSpec, prefix: str = "!", permissions: PermissionEvaluator | None = None
) -> str:
    permissions = permissions or PermissionEvaluator()
    lines = [f"**{prefix}{spec.name}** - {spec.description}", f"Usage: `{spec.usage_for(prefix)}`"]

    if spec.aliases:
        lines.append("Aliases: " + ", ".join(f"`{prefix}{alias}`" for alias in sorted(spec.aliases)))

    if spec.args:
        lines.append("Arguments:")
        for arg in spec.args:
            detail = f" - {arg.description}" if arg.description else ""
            optional = "" if arg.required else ", optional"
            lines.append(f"• `{arg.name}` ({arg.kind.value}{optional}){detail}")

    if spec.cooldown_seconds:
        lines.append(f"Cooldown: {spec.cooldown_seconds:g}s")

    requirement = requirement_label(spec, permissions)
    if requirement:
        lines.append(f"Requires: {requirement}")

    return "\n".join(lines)
