"""Workspace management commands."""

import click
from finkeep.cli.context import require_workspace
from finkeep.cli.error_handling import handle_domain_error
from finkeep.domain.workspace import WorkspaceService


@click.group()
def workspace_group():
    """Manage workspaces and their users."""
    pass


@workspace_group.command("create")
@click.argument("name", metavar="WORKSPACE_NAME")
@click.option("--user-name", required=True, help="Name of the first user")
@click.option("--email", help="E-mail of the first user")
@click.pass_context
def create_workspace(ctx, name: str, user_name: str, email: str | None):
    """Create a workspace together with its first user.

    Examples:
        finkeep workspace create "Home" --user-name "Alex"
    """
    service = WorkspaceService(ctx.obj["db"])
    try:
        workspace_id, user_id = service.create_workspace(name, user_name, email)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created workspace '{name}' (ID: {workspace_id})")
    click.echo(f"Created user '{user_name}' (ID: {user_id})")


@workspace_group.command("add-user")
@click.argument("name", metavar="USER_NAME")
@click.option("--email", help="E-mail address")
@click.pass_context
def add_user(ctx, name: str, email: str | None):
    """Add a user to the selected workspace."""
    workspace_id = require_workspace(ctx)
    service = WorkspaceService(ctx.obj["db"])
    try:
        user_id = service.add_user(workspace_id, name, email)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created user '{name}' (ID: {user_id})")


def register_commands(cli):
    """Register workspace commands with main CLI."""
    cli.add_command(workspace_group, name="workspace")
