"""Main CLI entry point."""

import click
from finkeep.database.factories import create_sqlite_database
from finkeep.log import configure_logging

# Import and register all commands at module level
from finkeep.cli.commands import (
    workspace,
    account,
    category,
    transaction,
    card,
    installment,
    invest,
    goal,
    summary,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINKEEP_DB_PATH environment variable)",
    envvar="FINKEEP_DB_PATH",
)
@click.option(
    "--workspace",
    "workspace_id",
    type=int,
    help="Workspace ID to act in (overrides FINKEEP_WORKSPACE)",
    envvar="FINKEEP_WORKSPACE",
)
@click.option(
    "--user",
    "user_id",
    type=int,
    help="User ID recorded on new transactions (overrides FINKEEP_USER)",
    envvar="FINKEEP_USER",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Logging level (overrides FINKEEP_LOG_LEVEL)",
    envvar="FINKEEP_LOG_LEVEL",
)
@click.pass_context
def cli(
    ctx,
    db_path: str | None,
    workspace_id: int | None,
    user_id: int | None,
    log_level: str | None,
):
    """Finkeep - shared finance ledger.

    Keep bank and investment account balances consistent across
    transactions, credit card invoices, installment plans and savings goals.
    """
    ctx.ensure_object(dict)
    if log_level is not None:
        configure_logging(level=log_level)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["workspace_id"] = workspace_id
        ctx.obj["user_id"] = user_id
        ctx.call_on_close(db.disconnect)


# Register all commands
workspace.register_commands(cli)
account.register_commands(cli)
category.register_commands(cli)
transaction.register_commands(cli)
card.register_commands(cli)
installment.register_commands(cli)
invest.register_commands(cli)
goal.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
