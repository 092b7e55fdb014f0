"""Bank account management commands."""

import click
from decimal import Decimal
from finkeep.cli.context import require_workspace, resolve_account_or_exit
from finkeep.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
)
from finkeep.domain.account import BankAccountService
from finkeep.utils.money import format_money


@click.group()
def account_group():
    """Manage bank and investment accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--initial-balance", default="0", help="Opening balance (default 0)")
@click.option("--investment", is_flag=True, help="Account accrues daily CDI yield")
@click.option("--cdi", help="Percentage of the CDI rate earned (default 100)")
@click.option("--maturity", help="Maturity date of the investment")
@click.pass_context
def create_account(
    ctx,
    name: str,
    initial_balance: str,
    investment: bool,
    cdi: str | None,
    maturity: str | None,
):
    """Create a new bank account.

    Examples:
        finkeep account create "Checking" --initial-balance 1500
        finkeep account create "CDB" --investment --cdi 110 --initial-balance 5000
    """
    workspace_id = require_workspace(ctx)
    service = BankAccountService(ctx.obj["db"])

    balance = parse_amount_or_exit(ctx, initial_balance)
    cdi_percentage = parse_amount_or_exit(ctx, cdi) if cdi is not None else None
    maturity_date = parse_date_or_exit(ctx, maturity) if maturity is not None else None

    try:
        account_id = service.create_account(
            workspace_id=workspace_id,
            name=name,
            initial_balance=balance,
            is_investment=investment,
            cdi_percentage=cdi_percentage,
            maturity_date=maturity_date,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account '{name}' (ID: {account_id})")


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with their balances."""
    workspace_id = require_workspace(ctx)
    service = BankAccountService(ctx.obj["db"])

    accounts = service.list_accounts(workspace_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 72)
    total = Decimal("0")
    for acc in accounts:
        kind = "Investment" if acc.is_investment else "Bank"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:20s} | {kind:10s} | "
            f"Balance: {format_money(acc.current_balance):>14s}"
        )
        total += acc.current_balance
    click.echo("-" * 72)
    click.echo(f"Total balance: {format_money(total)}")


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str):
    """Show details of an account.

    ACCOUNT can be an account name or ID.
    """
    workspace_id = require_workspace(ctx)
    service = BankAccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, workspace_id, account)
    acc = service.get_account(workspace_id, account_id)

    click.echo(f"Account {acc.id}: {acc.name}")
    click.echo(f"  Initial balance: {format_money(acc.initial_balance)}")
    click.echo(f"  Current balance: {format_money(acc.current_balance)}")
    if acc.is_investment:
        click.echo(f"  Invested:        {format_money(acc.total_invested or 0)}")
        click.echo(f"  CDI:             {acc.cdi_percentage or 100}%")
        if acc.maturity_date:
            click.echo(f"  Maturity:        {acc.maturity_date}")
        if acc.last_yield_update:
            click.echo(f"  Last yield:      {acc.last_yield_update:%Y-%m-%d %H:%M}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--initial-balance", help="New initial balance (shifts current balance too)")
@click.option("--investment/--no-investment", default=None, help="Set investment flag")
@click.option("--cdi", help="Percentage of the CDI rate earned")
@click.option("--maturity", help="Maturity date of the investment")
@click.pass_context
def update_account(
    ctx,
    account: str,
    name: str | None,
    initial_balance: str | None,
    investment: bool | None,
    cdi: str | None,
    maturity: str | None,
) -> None:
    """Update an account.

    Only the options given are changed.

    Examples:
        finkeep account update "Checking" --initial-balance 2000
        finkeep account update 3 --cdi 105
    """
    workspace_id = require_workspace(ctx)
    service = BankAccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, workspace_id, account)
    current = service.get_account(workspace_id, account_id)

    try:
        service.update_account(
            workspace_id=workspace_id,
            account_id=account_id,
            name=name if name is not None else current.name,
            initial_balance=(
                parse_amount_or_exit(ctx, initial_balance)
                if initial_balance is not None
                else current.initial_balance
            ),
            is_investment=investment if investment is not None else current.is_investment,
            cdi_percentage=(
                parse_amount_or_exit(ctx, cdi) if cdi is not None else current.cdi_percentage
            ),
            maturity_date=(
                parse_date_or_exit(ctx, maturity)
                if maturity is not None
                else current.maturity_date
            ),
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated account {account_id}")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID. The account can only be deleted
    if no transactions are booked against it.
    """
    workspace_id = require_workspace(ctx)
    service = BankAccountService(ctx.obj["db"])
    account_id = resolve_account_or_exit(ctx, service, workspace_id, account)
    account_obj = service.get_account(workspace_id, account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(workspace_id, account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account '{account_obj.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
