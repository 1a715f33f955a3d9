"""Role commands: createrole, addrole, removerole."""

from prefixbot.commands import (
    ArgKind,
    CommandContext,
    CommandRegistry,
    command,
    error_handler,
    logging_interceptor,
)

from .schemas import CreateRoleRequest, RoleAssignment

DEFAULT_ROLE_COLOR = 0x99AAB5


async def create_role(ctx: CommandContext) -> None:
    name = ctx.args["name"]
    color = ctx.args["color"]
    role_id = await ctx.guild.create_role(name, DEFAULT_ROLE_COLOR if color is None else color)
    await ctx.reply(f"✅ Created role **{name}** (<@&{role_id}>)")


async def add_role(ctx: CommandContext) -> None:
    await ctx.guild.add_role(ctx.args["user"], ctx.args["role"])
    await ctx.reply(f"✅ Added <@&{ctx.args['role']}> to <@{ctx.args['user']}>.")


async def remove_role(ctx: CommandContext) -> None:
    await ctx.guild.remove_role(ctx.args["user"], ctx.args["role"])
    await ctx.reply(f"✅ Removed <@&{ctx.args['role']}> from <@{ctx.args['user']}>.")


def setup(registry: CommandRegistry) -> None:
    (
        command("createrole", "Create a role")
        .category("Roles")
        .arg("name")
        .arg("color", required=False, description="Hex color, e.g. #99AAB5")
        .cooldown(5)
        .intercept(logging_interceptor, error_handler)
        .validate_with(CreateRoleRequest)
        .handle(create_role)
        .register(registry)
    )

    (
        command("addrole", "Add a role to a member")
        .category("Roles")
        .arg("user", ArgKind.USER)
        .arg("role", ArgKind.ROLE)
        .intercept(logging_interceptor)
        .validate_with(RoleAssignment)
        .handle(add_role)
        .register(registry)
    )

    (
        command("removerole", "Remove a role from a member")
        .category("Roles")
        .arg("user", ArgKind.USER)
        .arg("role", ArgKind.ROLE)
        .intercept(logging_interceptor)
        .validate_with(RoleAssignment)
        .handle(remove_role)
        .register(registry)
    )
