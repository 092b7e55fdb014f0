"""CLI helpers for the identity context and account resolution."""

import click

from finkeep.domain.account import BankAccountService
from finkeep.domain.errors import DomainError, user_not_found
from finkeep.utils.account_resolver import resolve_account


def require_workspace(ctx: click.Context) -> int:
    """Return the selected workspace ID, or exit if none was given."""
    workspace_id = ctx.obj.get("workspace_id")
    if workspace_id is None:
        click.echo(
            "Error: No workspace selected. Use --workspace or set FINKEEP_WORKSPACE.",
            err=True,
        )
        ctx.exit(1)
    if ctx.obj["db"].get_workspace(workspace_id) is None:
        click.echo(f"Error: Workspace {workspace_id} not found", err=True)
        ctx.exit(1)
    return workspace_id


def current_user(ctx: click.Context, workspace_id: int) -> int | None:
    """Return the acting user: --user if given, else the workspace's first user."""
    user_id = ctx.obj.get("user_id")
    if user_id is not None:
        if ctx.obj["db"].get_user(workspace_id, user_id) is None:
            click.echo(f"Error: {user_not_found(user_id)} in workspace {workspace_id}", err=True)
            ctx.exit(1)
        return user_id
    user = ctx.obj["db"].get_first_user(workspace_id)
    return user.id if user is not None else None


def resolve_account_or_exit(
    ctx: click.Context, service: BankAccountService, workspace_id: int, account: str | int
) -> int:
    """Resolve account name or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(service, workspace_id, account)
    except DomainError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
