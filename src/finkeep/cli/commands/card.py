"""Credit card commands."""

import click
from finkeep.cli.context import require_workspace, resolve_account_or_exit
from finkeep.cli.error_handling import (
    handle_domain_error,
    parse_amount_or_exit,
    parse_date_or_exit,
)
from finkeep.domain.account import BankAccountService
from finkeep.domain.credit_card import CreditCardService
from finkeep.utils.money import format_money


@click.group()
def card_group():
    """Manage credit cards, purchases and invoices."""
    pass


@card_group.command("create")
@click.argument("name", metavar="CARD_NAME")
@click.option("--limit", "limit", required=True, help="Credit limit")
@click.option("--closing-day", type=int, required=True, help="Day the card closes (1-28)")
@click.option("--due-day", type=int, required=True, help="Day the invoice is due (1-28)")
@click.option("--last-digits", help="Last four digits")
@click.pass_context
def create_card(
    ctx, name: str, limit: str, closing_day: int, due_day: int, last_digits: str | None
):
    """Create a credit card.

    Examples:
        finkeep card create "Visa" --limit 5000 --closing-day 25 --due-day 10
    """
    workspace_id = require_workspace(ctx)
    service = CreditCardService(ctx.obj["db"])
    try:
        card_id = service.create_card(
            workspace_id,
            name=name,
            limit=parse_amount_or_exit(ctx, limit),
            closing_day=closing_day,
            due_day=due_day,
            last_digits=last_digits,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created card '{name}' (ID: {card_id})")


@card_group.command("list")
@click.pass_context
def list_cards(ctx):
    """List cards with used and available limit."""
    workspace_id = require_workspace(ctx)
    summaries = CreditCardService(ctx.obj["db"]).list_card_summaries(workspace_id)
    if not summaries:
        click.echo("No credit cards found.")
        return

    for summary in summaries:
        card = summary.card
        digits = f" **** {card.last_digits}" if card.last_digits else ""
        click.echo(
            f"ID: {card.id:3d} | {card.name}{digits} | closes {card.closing_day:2d}, "
            f"due {card.due_day:2d} | used {format_money(summary.used_amount)} "
            f"of {format_money(card.limit)} | available {format_money(summary.available_limit)}"
        )


@card_group.command("update")
@click.argument("card_id", type=int)
@click.option("--name", help="New name")
@click.option("--limit", "limit", help="New credit limit")
@click.option("--closing-day", type=int, help="New closing day")
@click.option("--due-day", type=int, help="New due day")
@click.pass_context
def update_card(
    ctx,
    card_id: int,
    name: str | None,
    limit: str | None,
    closing_day: int | None,
    due_day: int | None,
):
    """Update a credit card. Existing invoices keep their dates."""
    workspace_id = require_workspace(ctx)
    service = CreditCardService(ctx.obj["db"])
    card = service.get_card(workspace_id, card_id)
    if card is None:
        click.echo(f"Error: Credit card {card_id} not found", err=True)
        ctx.exit(1)

    try:
        service.update_card(
            workspace_id,
            card_id,
            name=name if name is not None else card.name,
            limit=parse_amount_or_exit(ctx, limit) if limit is not None else card.limit,
            closing_day=closing_day if closing_day is not None else card.closing_day,
            due_day=due_day if due_day is not None else card.due_day,
            last_digits=card.last_digits,
            color=card.color,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated card {card_id}")


@card_group.command("delete")
@click.argument("card_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_card(ctx, card_id: int, yes: bool):
    """Delete a card with all its invoices and purchases."""
    workspace_id = require_workspace(ctx)
    if not yes and not click.confirm(f"Delete card {card_id} and all its invoices?"):
        click.echo("Deletion cancelled.")
        return
    try:
        CreditCardService(ctx.obj["db"]).delete_card(workspace_id, card_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted card {card_id}")


@card_group.command("purchase")
@click.argument("card_id", type=int)
@click.argument("description")
@click.argument("amount")
@click.option("--installments", type=int, default=1, show_default=True)
@click.option("--date", "purchase_date", default="today", help="Purchase date (default today)")
@click.option("--category", "category_id", type=int, help="Category ID")
@click.pass_context
def create_purchase(
    ctx,
    card_id: int,
    description: str,
    amount: str,
    installments: int,
    purchase_date: str,
    category_id: int | None,
):
    """Record a card purchase, optionally in installments.

    Examples:
        finkeep card purchase 1 "Headphones" 600 --installments 3
    """
    workspace_id = require_workspace(ctx)
    try:
        ids = CreditCardService(ctx.obj["db"]).create_purchase(
            workspace_id,
            card_id,
            description=description,
            total_amount=parse_amount_or_exit(ctx, amount),
            purchase_date=parse_date_or_exit(ctx, purchase_date),
            installments=installments,
            category_id=category_id,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    suffix = f" in {installments} installments" if installments > 1 else ""
    click.echo(f"Created purchase {ids[0]}{suffix}")


@card_group.command("invoices")
@click.argument("card_id", type=int)
@click.pass_context
def list_invoices(ctx, card_id: int):
    """List invoices of a card."""
    workspace_id = require_workspace(ctx)
    try:
        invoices = CreditCardService(ctx.obj["db"]).list_invoices(workspace_id, card_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not invoices:
        click.echo("No invoices found.")
        return
    for inv in invoices:
        click.echo(
            f"ID: {inv.id:3d} | {inv.year}-{inv.month:02d} | closes {inv.closing_date} | "
            f"due {inv.due_date} | {format_money(inv.total_amount):>12s} | {inv.status.value}"
        )


@card_group.command("purchases")
@click.argument("card_id", type=int)
@click.option("--invoice", "invoice_id", type=int, help="Only purchases of this invoice")
@click.pass_context
def list_purchases(ctx, card_id: int, invoice_id: int | None):
    """List purchases of a card."""
    workspace_id = require_workspace(ctx)
    try:
        purchases = CreditCardService(ctx.obj["db"]).list_purchases(
            workspace_id, card_id, invoice_id=invoice_id
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not purchases:
        click.echo("No purchases found.")
        return
    for p in purchases:
        click.echo(
            f"ID: {p.id:3d} | {p.purchase_date} | {p.description[:36]:36s} | "
            f"{format_money(p.total_amount):>12s} | invoice {p.invoice_id}"
        )


@card_group.command("pay-invoice")
@click.argument("card_id", type=int)
@click.argument("invoice_id", type=int)
@click.option("--account", required=True, help="Account paying the invoice (name or ID)")
@click.pass_context
def pay_invoice(ctx, card_id: int, invoice_id: int, account: str):
    """Pay an invoice from a bank account."""
    workspace_id = require_workspace(ctx)
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, BankAccountService(db), workspace_id, account)
    try:
        paid = CreditCardService(db).pay_invoice(workspace_id, card_id, invoice_id, account_id)
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Paid invoice {invoice_id}: {format_money(paid)} debited from account {account_id}")


def register_commands(cli):
    """Register credit card commands with main CLI."""
    cli.add_command(card_group, name="card")
