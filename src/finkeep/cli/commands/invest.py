"""Investment commands: daily yield batch and redemptions."""

import click
from finkeep.cli.context import current_user, require_workspace, resolve_account_or_exit
from finkeep.cli.error_handling import handle_domain_error, parse_amount_or_exit
from finkeep.domain.account import BankAccountService
from finkeep.domain.investment import RedemptionService, YieldService
from finkeep.domain.rates import BCBRateProvider, StaticRateProvider
from finkeep.utils.money import format_money


@click.group()
def invest_group():
    """Investment accounts: yield accretion and redemption."""
    pass


@invest_group.command("yields")
@click.option(
    "--all-workspaces",
    is_flag=True,
    help="Process investment accounts of every workspace",
)
@click.option(
    "--rate",
    help="Use this daily rate (percent per day) instead of fetching the CDI",
)
@click.pass_context
def run_yields(ctx, all_workspaces: bool, rate: str | None):
    """Credit one day of CDI yield to investment accounts.

    Accounts already processed today are skipped, so the command is safe
    to schedule more than once a day.

    Examples:
        finkeep --workspace 1 invest yields
        finkeep invest yields --all-workspaces
        finkeep --workspace 1 invest yields --rate 0.05
    """
    workspace_id = None if all_workspaces else require_workspace(ctx)
    provider = (
        StaticRateProvider(parse_amount_or_exit(ctx, rate))
        if rate is not None
        else BCBRateProvider()
    )

    try:
        result = YieldService(ctx.obj["db"], provider).run_yield_accretion(workspace_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Rate: {result.rate.value}% per day ({result.rate.date})")
    click.echo(
        f"Processed {result.processed} account(s), credited "
        f"{len(result.credited_account_ids)}, skipped {result.skipped}"
    )


def _echo_redemption(result) -> None:
    click.echo(f"  Amount:         {format_money(result.amount)}")
    click.echo(f"  Days held:      {result.days_held}")
    click.echo(f"  Profit share:   {format_money(result.proportional_profit)}")
    click.echo(f"  Tax rate:       {result.tax_rate * 100:.1f}%")
    click.echo(f"  Tax:            {format_money(result.tax_amount)}")
    click.echo(f"  Net amount:     {format_money(result.net_amount)}")


@invest_group.command("quote")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount")
@click.pass_context
def quote(ctx, account: str, amount: str):
    """Show the tax and net amount of a redemption without doing it."""
    workspace_id = require_workspace(ctx)
    db = ctx.obj["db"]
    account_id = resolve_account_or_exit(ctx, BankAccountService(db), workspace_id, account)
    try:
        result = RedemptionService(db).quote_redemption(
            workspace_id, account_id, parse_amount_or_exit(ctx, amount)
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Redemption quote for account {account_id}:")
    _echo_redemption(result)


@invest_group.command("redeem")
@click.argument("account", metavar="ACCOUNT")
@click.argument("amount")
@click.option("--to", "destination", help="Account receiving the net amount (name or ID)")
@click.pass_context
def redeem(ctx, account: str, amount: str, destination: str | None):
    """Redeem money from an investment account.

    Without --to the net amount leaves the workspace.

    Examples:
        finkeep invest redeem CDB 1000 --to Checking
    """
    workspace_id = require_workspace(ctx)
    db = ctx.obj["db"]
    accounts = BankAccountService(db)
    account_id = resolve_account_or_exit(ctx, accounts, workspace_id, account)
    destination_id = None
    if destination is not None:
        destination_id = resolve_account_or_exit(ctx, accounts, workspace_id, destination)

    try:
        result = RedemptionService(db).redeem(
            workspace_id,
            account_id,
            parse_amount_or_exit(ctx, amount),
            destination_account_id=destination_id,
            user_id=current_user(ctx, workspace_id),
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Redeemed from account {account_id}:")
    _echo_redemption(result)


def register_commands(cli):
    """Register investment commands with main CLI."""
    cli.add_command(invest_group, name="invest")
