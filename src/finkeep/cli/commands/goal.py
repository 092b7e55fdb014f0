"""Savings goal commands."""

import click
from finkeep.cli.context import current_user, require_workspace, resolve_account_or_exit
from finkeep.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
)
from finkeep.domain.account import BankAccountService
from finkeep.domain.goal import GoalService
from finkeep.utils.money import format_money


@click.group()
def goal_group():
    """Manage savings goals."""
    pass


@goal_group.command("create")
@click.argument("title")
@click.option("--target", required=True, help="Target amount")
@click.option("--deadline", help="Deadline date")
@click.option("--storage-account", help="Account holding the goal's money (name or ID)")
@click.option("--color", help="Display color")
@click.pass_context
def create_goal(
    ctx,
    title: str,
    target: str,
    deadline: str | None,
    storage_account: str | None,
    color: str | None,
):
    """Create a savings goal.

    Examples:
        finkeep goal create "Vacation" --target 8000 --deadline 2027-07-01
        finkeep goal create "Emergency fund" --target 20000 --storage-account CDB
    """
    workspace_id = require_workspace(ctx)
    db = ctx.obj["db"]
    storage_id = None
    if storage_account is not None:
        storage_id = resolve_account_or_exit(ctx, BankAccountService(db), workspace_id, storage_account)

    try:
        goal_id = GoalService(db).create_goal(
            workspace_id,
            title=title,
            target_amount=parse_amount_or_exit(ctx, target),
            deadline=parse_date_or_exit(ctx, deadline) if deadline is not None else None,
            color=color,
            storage_account_id=storage_id,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created goal '{title}' (ID: {goal_id})")


@goal_group.command("list")
@click.pass_context
def list_goals(ctx):
    """List goals with their progress."""
    workspace_id = require_workspace(ctx)
    goals = GoalService(ctx.obj["db"]).list_goals(workspace_id)
    if not goals:
        click.echo("No goals found.")
        return

    for goal in goals:
        percent = goal.current_amount / goal.target_amount * 100
        deadline = f" | until {goal.deadline}" if goal.deadline else ""
        click.echo(
            f"ID: {goal.id:3d} | {goal.title[:30]:30s} | "
            f"{format_money(goal.current_amount)} of {format_money(goal.target_amount)} "
            f"({percent:.0f}%){deadline}"
        )


@goal_group.command("update")
@click.argument("goal_id", type=int)
@click.option("--title", help="New title")
@click.option("--target", help="New target amount")
@click.option("--deadline", help="New deadline")
@click.pass_context
def update_goal(ctx, goal_id: int, title: str | None, target: str | None, deadline: str | None):
    """Update a goal's title, target or deadline."""
    workspace_id = require_workspace(ctx)
    service = GoalService(ctx.obj["db"])
    goal = service.get_goal(workspace_id, goal_id)
    if goal is None:
        click.echo(f"Error: Goal {goal_id} not found", err=True)
        ctx.exit(1)

    try:
        service.update_goal(
            workspace_id,
            goal_id,
            title=title if title is not None else goal.title,
            target_amount=parse_amount_or_exit(ctx, target) if target is not None else goal.target_amount,
            deadline=parse_date_or_exit(ctx, deadline) if deadline is not None else goal.deadline,
            color=goal.color,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated goal {goal_id}")


def _move(ctx, goal_id: int, amount, account: str | None) -> None:
    workspace_id = require_workspace(ctx)
    db = ctx.obj["db"]
    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, BankAccountService(db), workspace_id, account)
    try:
        GoalService(db).deposit(
            workspace_id,
            goal_id,
            amount,
            bank_account_id=account_id,
            user_id=current_user(ctx, workspace_id),
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


@goal_group.command("deposit")
@click.argument("goal_id", type=int)
@click.argument("amount")
@click.option("--account", help="Source account (name or ID)")
@click.pass_context
def deposit(ctx, goal_id: int, amount: str, account: str | None):
    """Put money into a goal.

    With --account the money leaves that account; without it only the
    goal progress changes.
    """
    value = parse_amount_or_exit(ctx, amount)
    _move(ctx, goal_id, value, account)
    click.echo(f"Deposited {format_money(value)} into goal {goal_id}")


@goal_group.command("withdraw")
@click.argument("goal_id", type=int)
@click.argument("amount")
@click.option("--account", help="Account receiving the money (name or ID)")
@click.pass_context
def withdraw(ctx, goal_id: int, amount: str, account: str | None):
    """Take money out of a goal."""
    value = parse_amount_or_exit(ctx, amount)
    _move(ctx, goal_id, -value, account)
    click.echo(f"Withdrew {format_money(value)} from goal {goal_id}")


@goal_group.command("delete")
@click.argument("goal_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_goal(ctx, goal_id: int, yes: bool):
    """Delete a goal, reverting its deposits and withdrawals."""
    workspace_id = require_workspace(ctx)
    if not yes and not click.confirm(f"Delete goal {goal_id} and revert its movements?"):
        click.echo("Deletion cancelled.")
        return
    try:
        GoalService(ctx.obj["db"]).delete_goal(workspace_id, goal_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted goal {goal_id}")


def register_commands(cli):
    """Register goal commands with main CLI."""
    cli.add_command(goal_group, name="goal")
