"""Tests for transaction and summary commands."""

from datetime import date
from decimal import Decimal

from finkeep.cli.main import cli


def _invoke(cli_runner, temp_db, workspace_id, *args):
    return cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "--workspace", str(workspace_id), *args]
    )


def _balance(temp_db, account_service, workspace_id, account_id):
    # Drop cached rows so reads see what the command committed
    temp_db.disconnect()
    return account_service.get_account(workspace_id, account_id).current_balance


def test_add_transaction_minimal(cli_runner, temp_db, workspace_id, checking, account_service):
    """Test adding a paid expense debits the account."""
    result = _invoke(
        cli_runner, temp_db, workspace_id,
        "transaction", "add", "Groceries", "85,40", "--account", "Checking", "--date", "2026-03-05",
    )

    assert result.exit_code == 0
    assert "Created transaction" in result.output
    assert _balance(temp_db, account_service, workspace_id, checking.id) == Decimal("914.60")


def test_add_pending_income(cli_runner, temp_db, workspace_id, checking, account_service, transaction_service):
    result = _invoke(
        cli_runner, temp_db, workspace_id,
        "transaction", "add", "Salary", "5000", "--type", "income",
        "--account", str(checking.id), "--pending",
    )
    assert result.exit_code == 0
    assert _balance(temp_db, account_service, workspace_id, checking.id) == Decimal("1000")

    (txn,) = transaction_service.list_transactions(workspace_id)
    assert txn.is_paid is False
    # Recorded for the workspace's first user
    assert txn.created_by_id is not None


def test_add_transaction_user_option(cli_runner, temp_db, workspace_id, checking, workspace_service, transaction_service):
    second = workspace_service.add_user(workspace_id, "Bea")
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "--workspace", str(workspace_id),
            "--user", str(second),
            "transaction", "add", "Cinema", "40", "--account", "Checking",
        ],
    )
    assert result.exit_code == 0

    temp_db.disconnect()
    (txn,) = transaction_service.list_transactions(workspace_id)
    assert txn.created_by_id == second


def test_add_transaction_user_from_other_workspace(
    cli_runner, temp_db, workspace_id, other_workspace_id, checking, workspace_service, transaction_service
):
    outsider = workspace_service.get_default_user(other_workspace_id)
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "--workspace", str(workspace_id),
            "--user", str(outsider.id),
            "transaction", "add", "Cinema", "40", "--account", "Checking",
        ],
    )
    assert result.exit_code == 1
    assert f"User {outsider.id} not found in workspace {workspace_id}" in result.output

    temp_db.disconnect()
    assert transaction_service.list_transactions(workspace_id) == []


def test_add_transaction_invalid_date(cli_runner, temp_db, workspace_id, checking):
    result = _invoke(
        cli_runner, temp_db, workspace_id,
        "transaction", "add", "Groceries", "10", "--account", "Checking", "--date", "someday",
    )
    assert result.exit_code == 1
    assert "Invalid date format" in result.output


def test_add_transaction_validation_error(cli_runner, temp_db, workspace_id, checking):
    result = _invoke(
        cli_runner, temp_db, workspace_id,
        "transaction", "add", "Refund", "0", "--account", "Checking",
    )
    assert result.exit_code == 1
    assert "Amount must be positive" in result.output


def test_pay_and_unpay(cli_runner, temp_db, workspace_id, checking, account_service, transaction_service):
    txn_id = transaction_service.create_transaction(
        workspace_id,
        description="Internet",
        amount=Decimal("120"),
        type="EXPENSE",
        date=date(2026, 3, 15),
        bank_account_id=checking.id,
        is_paid=False,
    )

    result = _invoke(cli_runner, temp_db, workspace_id, "transaction", "pay", str(txn_id))
    assert result.exit_code == 0
    assert f"Transaction {txn_id} marked as paid" in result.output
    assert _balance(temp_db, account_service, workspace_id, checking.id) == Decimal("880")

    result = _invoke(cli_runner, temp_db, workspace_id, "transaction", "pay", str(txn_id))
    assert result.exit_code == 1
    assert "already paid" in result.output

    result = _invoke(cli_runner, temp_db, workspace_id, "transaction", "unpay", str(txn_id))
    assert result.exit_code == 0
    assert _balance(temp_db, account_service, workspace_id, checking.id) == Decimal("1000")


def test_update_and_delete(cli_runner, temp_db, workspace_id, checking, savings, account_service, transaction_service):
    txn_id = transaction_service.create_transaction(
        workspace_id,
        description="Dinner",
        amount=Decimal("100"),
        type="EXPENSE",
        date=date(2026, 3, 20),
        bank_account_id=checking.id,
    )

    result = _invoke(
        cli_runner, temp_db, workspace_id,
        "transaction", "update", str(txn_id), "--amount", "150", "--account", "Savings",
    )
    assert result.exit_code == 0
    assert f"Updated transaction {txn_id}" in result.output
    assert _balance(temp_db, account_service, workspace_id, checking.id) == Decimal("1000")
    assert _balance(temp_db, account_service, workspace_id, savings.id) == Decimal("-150")

    result = _invoke(cli_runner, temp_db, workspace_id, "transaction", "delete", str(txn_id))
    assert result.exit_code == 0
    assert _balance(temp_db, account_service, workspace_id, savings.id) == Decimal("0")


def test_list_and_show(cli_runner, temp_db, workspace_id, checking, transaction_service):
    txn_id = transaction_service.create_transaction(
        workspace_id,
        description="Bookstore",
        amount=Decimal("42.90"),
        type="EXPENSE",
        date=date(2026, 3, 20),
        bank_account_id=checking.id,
        notes="birthday gift",
    )
    transaction_service.create_transaction(
        workspace_id,
        description="Rent",
        amount=Decimal("1200"),
        type="EXPENSE",
        date=date(2026, 4, 1),
        bank_account_id=checking.id,
        is_paid=False,
    )

    result = _invoke(cli_runner, temp_db, workspace_id, "transaction", "list", "--month", "2026-03")
    assert result.exit_code == 0
    assert "Bookstore" in result.output
    assert "Rent" not in result.output

    result = _invoke(cli_runner, temp_db, workspace_id, "transaction", "list", "--status", "pending")
    assert result.exit_code == 0
    assert "Rent" in result.output
    assert "Bookstore" not in result.output

    result = _invoke(cli_runner, temp_db, workspace_id, "transaction", "show", str(txn_id))
    assert result.exit_code == 0
    assert "Bookstore" in result.output
    assert "42.90" in result.output
    assert "birthday gift" in result.output

    result = _invoke(cli_runner, temp_db, workspace_id, "transaction", "show", "999")
    assert result.exit_code == 1
    assert "Transaction 999 not found" in result.output


def test_summary(cli_runner, temp_db, workspace_id, checking, transaction_service):
    transaction_service.create_transaction(
        workspace_id,
        description="Salary",
        amount=Decimal("3000"),
        type="INCOME",
        date=date(2026, 3, 5),
        bank_account_id=checking.id,
    )
    result = _invoke(cli_runner, temp_db, workspace_id, "summary", "--month", "2026-03")

    assert result.exit_code == 0
    assert "Summary for 2026-03" in result.output
    assert "4,000.00" in result.output
    assert "3,000.00" in result.output


def test_summary_invalid_month(cli_runner, temp_db, workspace_id):
    result = _invoke(cli_runner, temp_db, workspace_id, "summary", "--month", "march")
    assert result.exit_code == 1
    assert "Could not parse month" in result.output
