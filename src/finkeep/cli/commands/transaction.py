"""Transaction management commands."""

import click
from finkeep.cli.context import current_user, require_workspace, resolve_account_or_exit
from finkeep.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
    parse_month_or_exit,
)
from finkeep.domain.account import BankAccountService
from finkeep.domain.transaction import TransactionService
from finkeep.utils.money import format_money

TYPE_CHOICE = click.Choice(["INCOME", "EXPENSE"], case_sensitive=False)


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("add")
@click.argument("description")
@click.argument("amount")
@click.option("--account", required=True, help="Account name or ID")
@click.option("--type", "txn_type", type=TYPE_CHOICE, default="EXPENSE", show_default=True)
@click.option("--date", "txn_date", default="today", help="Transaction date (default today)")
@click.option("--category", "category_id", type=int, help="Category ID")
@click.option("--notes", help="Notes")
@click.option("--pending", is_flag=True, help="Record as not paid yet (no balance effect)")
@click.pass_context
def add_transaction(
    ctx,
    description: str,
    amount: str,
    account: str,
    txn_type: str,
    txn_date: str,
    category_id: int | None,
    notes: str | None,
    pending: bool,
) -> None:
    """Add a transaction.

    Examples:
        finkeep transaction add "Groceries" 85.40 --account Checking
        finkeep transaction add "Salary" 5000 --type INCOME --account 1
        finkeep transaction add "Rent" 1200 --account Checking --date "next month" --pending
    """
    workspace_id = require_workspace(ctx)
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, BankAccountService(db), workspace_id, account)

    try:
        transaction_id = TransactionService(db).create_transaction(
            workspace_id=workspace_id,
            description=description,
            amount=parse_amount_or_exit(ctx, amount),
            type=txn_type,
            date=parse_date_or_exit(ctx, txn_date),
            bank_account_id=account_id,
            category_id=category_id,
            notes=notes,
            is_paid=not pending,
            user_id=current_user(ctx, workspace_id),
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created transaction {transaction_id}")


@transaction_group.command("list")
@click.option("--month", help="Month (YYYY-MM, this-month, last-month)")
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="Only INCOME or EXPENSE")
@click.option("--account", help="Account name or ID")
@click.option("--status", type=click.Choice(["paid", "pending"]), help="Payment status")
@click.pass_context
def list_transactions(
    ctx,
    month: str | None,
    txn_type: str | None,
    account: str | None,
    status: str | None,
) -> None:
    """List transactions, newest first."""
    workspace_id = require_workspace(ctx)
    db = ctx.obj["db"]

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, BankAccountService(db), workspace_id, account)
    month_num = year = None
    if month is not None:
        month_num, year = parse_month_or_exit(ctx, month)

    try:
        transactions = TransactionService(db).list_transactions(
            workspace_id,
            type=txn_type,
            month=month_num,
            year=year,
            bank_account_id=account_id,
            status=status,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not transactions:
        click.echo("No transactions found.")
        return

    for txn in transactions:
        mark = "x" if txn.is_paid else " "
        sign = "+" if txn.signed_amount > 0 else "-"
        click.echo(
            f"[{mark}] {txn.id:4d} | {txn.date} | {txn.description[:32]:32s} | "
            f"{sign}{format_money(txn.amount):>12s} | acct {txn.bank_account_id}"
        )


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int) -> None:
    """Show a transaction."""
    workspace_id = require_workspace(ctx)
    txn = TransactionService(ctx.obj["db"]).get_transaction(workspace_id, transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    click.echo(f"Transaction {txn.id}: {txn.description}")
    click.echo(f"  Type:     {txn.type.value}")
    click.echo(f"  Amount:   {format_money(txn.amount)}")
    click.echo(f"  Date:     {txn.date}")
    click.echo(f"  Account:  {txn.bank_account_id}")
    click.echo(f"  Paid:     {'yes' if txn.is_paid else 'no'}")
    if txn.category_id is not None:
        click.echo(f"  Category: {txn.category_id}")
    if txn.notes:
        click.echo(f"  Notes:    {txn.notes}")


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--description", help="New description")
@click.option("--amount", help="New amount")
@click.option("--type", "txn_type", type=TYPE_CHOICE, help="New type")
@click.option("--date", "txn_date", help="New date")
@click.option("--account", help="New account name or ID")
@click.option("--category", "category_id", type=int, help="New category ID (0 clears it)")
@click.option("--notes", help="New notes")
@click.option("--paid/--pending", "is_paid", default=None, help="Change payment status")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    description: str | None,
    amount: str | None,
    txn_type: str | None,
    txn_date: str | None,
    account: str | None,
    category_id: int | None,
    notes: str | None,
    is_paid: bool | None,
) -> None:
    """Update a transaction, moving its balance effect.

    Updates only the fields that are provided.

    Examples:
        finkeep transaction update 7 --amount 90
        finkeep transaction update 7 --account Savings --paid
    """
    workspace_id = require_workspace(ctx)
    db = ctx.obj["db"]
    service = TransactionService(db)

    current = service.get_transaction(workspace_id, transaction_id)
    if current is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    account_id = current.bank_account_id
    if account is not None:
        account_id = resolve_account_or_exit(ctx, BankAccountService(db), workspace_id, account)

    if category_id is None:
        category_id = current.category_id
    elif category_id == 0:
        category_id = None

    try:
        service.update_transaction(
            workspace_id=workspace_id,
            transaction_id=transaction_id,
            description=description if description is not None else current.description,
            amount=parse_amount_or_exit(ctx, amount) if amount is not None else current.amount,
            type=txn_type if txn_type is not None else current.type,
            date=parse_date_or_exit(ctx, txn_date) if txn_date is not None else current.date,
            bank_account_id=account_id,
            category_id=category_id,
            notes=notes if notes is not None else current.notes,
            is_paid=is_paid,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated transaction {transaction_id}")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.pass_context
def delete_transaction(ctx, transaction_id: int) -> None:
    """Delete a transaction, reverting its balance effect."""
    workspace_id = require_workspace(ctx)
    try:
        TransactionService(ctx.obj["db"]).delete_transaction(workspace_id, transaction_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted transaction {transaction_id}")


@transaction_group.command("pay")
@click.argument("transaction_id", type=int)
@click.pass_context
def pay_transaction(ctx, transaction_id: int) -> None:
    """Mark a pending transaction as paid."""
    workspace_id = require_workspace(ctx)
    try:
        TransactionService(ctx.obj["db"]).set_transaction_paid(workspace_id, transaction_id, True)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Transaction {transaction_id} marked as paid")


@transaction_group.command("unpay")
@click.argument("transaction_id", type=int)
@click.pass_context
def unpay_transaction(ctx, transaction_id: int) -> None:
    """Mark a paid transaction as pending again."""
    workspace_id = require_workspace(ctx)
    try:
        TransactionService(ctx.obj["db"]).set_transaction_paid(workspace_id, transaction_id, False)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Transaction {transaction_id} marked as pending")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
