"""Installment plan commands."""

import click
from finkeep.cli.context import current_user, require_workspace, resolve_account_or_exit
from finkeep.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
)
from finkeep.domain.account import BankAccountService
from finkeep.domain.installment import InstallmentService
from finkeep.utils.money import format_money


@click.group()
def installment_group():
    """Manage installment plans paid from a bank account."""
    pass


@installment_group.command("create")
@click.argument("description")
@click.argument("amount")
@click.option("--installments", type=int, required=True, help="Number of installments (2-48)")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--start-date", default="today", help="Date of the first installment")
@click.option("--category", "category_id", type=int, help="Category ID")
@click.pass_context
def create_plan(
    ctx,
    description: str,
    amount: str,
    installments: int,
    account: str,
    start_date: str,
    category_id: int | None,
):
    """Create an installment plan. Installments start as pending.

    Examples:
        finkeep installment create "Sofa" 3000 --installments 10 --account Checking
    """
    workspace_id = require_workspace(ctx)
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, BankAccountService(db), workspace_id, account)
    try:
        plan_id = InstallmentService(db).create_plan(
            workspace_id,
            description=description,
            total_amount=parse_amount_or_exit(ctx, amount),
            total_installments=installments,
            start_date=parse_date_or_exit(ctx, start_date),
            bank_account_id=account_id,
            category_id=category_id,
            user_id=current_user(ctx, workspace_id),
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created installment plan {plan_id} ({installments} installments)")


@installment_group.command("list")
@click.pass_context
def list_plans(ctx):
    """List installment plans with their progress."""
    workspace_id = require_workspace(ctx)
    plans = InstallmentService(ctx.obj["db"]).list_plans(workspace_id)
    if not plans:
        click.echo("No installment plans found.")
        return

    for progress in plans:
        plan = progress.purchase
        overdue = f", {progress.overdue_installments} overdue" if progress.overdue_installments else ""
        click.echo(
            f"ID: {plan.id:3d} | {plan.description[:30]:30s} | "
            f"{progress.paid_installments}/{plan.total_installments} paid{overdue} | "
            f"remaining {format_money(progress.remaining_amount)}"
        )


@installment_group.command("show")
@click.argument("plan_id", type=int)
@click.pass_context
def show_plan(ctx, plan_id: int):
    """Show a plan and its installments."""
    workspace_id = require_workspace(ctx)
    progress = InstallmentService(ctx.obj["db"]).get_plan(workspace_id, plan_id)
    if progress is None:
        click.echo(f"Error: Installment plan {plan_id} not found", err=True)
        ctx.exit(1)

    plan = progress.purchase
    click.echo(f"Plan {plan.id}: {plan.description}")
    click.echo(f"  Total:       {format_money(plan.total_amount)}")
    click.echo(f"  Installment: {format_money(progress.installment_amount)}")
    for txn in progress.transactions:
        mark = "x" if txn.is_paid else " "
        click.echo(f"  [{mark}] #{txn.installment_number:2d} {txn.date} (transaction {txn.id})")


@installment_group.command("delete")
@click.argument("plan_id", type=int)
@click.pass_context
def delete_plan(ctx, plan_id: int):
    """Delete a plan and its installments, restoring due amounts."""
    workspace_id = require_workspace(ctx)
    try:
        restored = InstallmentService(ctx.obj["db"]).delete_plan(workspace_id, plan_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted installment plan {plan_id} (restored {format_money(restored)})")


def register_commands(cli):
    """Register installment commands with main CLI."""
    cli.add_command(installment_group, name="installment")
