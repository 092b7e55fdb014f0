"""CLI error handling and input parsing helpers."""

from datetime import date
from decimal import Decimal

import click

from finkeep.domain.errors import DomainError
from finkeep.utils.amount_parser import parse_amount
from finkeep.utils.date_parser import parse_date, parse_month


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    ctx.exit(1)


def parse_amount_or_exit(ctx: click.Context, value: str) -> Decimal:
    """Parse an amount argument, or exit with a CLI error."""
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)


def parse_date_or_exit(ctx: click.Context, value: str) -> date:
    """Parse a date option, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)


def parse_month_or_exit(ctx: click.Context, value: str) -> tuple[int, int]:
    """Parse a month option into (month, year), or exit with a CLI error."""
    try:
        return parse_month(value)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
