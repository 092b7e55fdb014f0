"""Summary commands."""

import click
from finkeep.cli.context import require_workspace
from finkeep.cli.error_handling import handle_domain_error, parse_month_or_exit
from finkeep.domain.summary import SummaryService
from finkeep.utils.money import format_money


@click.command("summary")
@click.option(
    "--month",
    default="this-month",
    help="Month to summarize (YYYY-MM, MM/YYYY, this-month, last-month)",
)
@click.pass_context
def summary(ctx, month: str):
    """Show the monthly dashboard.

    Examples:
        finkeep summary
        finkeep summary --month 2026-03
    """
    workspace_id = require_workspace(ctx)
    month_num, year = parse_month_or_exit(ctx, month)

    try:
        result = SummaryService(ctx.obj["db"]).monthly_summary(workspace_id, month_num, year)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nSummary for {result.year}-{result.month:02d}")
    click.echo("=" * 40)
    click.echo(f"Total balance:     {format_money(result.total_balance):>16s}")
    click.echo(f"Previous balance:  {format_money(result.previous_balance):>16s}")
    click.echo(f"Income:            {format_money(result.income):>16s}")
    click.echo(f"Expenses:          {format_money(result.expense):>16s}")
    click.echo(f"Card bill:         {format_money(result.credit_card_bill):>16s}")
    click.echo(f"Pending:           {result.pending_count:>16d}")


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
