"""Tests for the Database interface and its atomic unit of work."""

import pytest
from datetime import date, datetime
from decimal import Decimal

from finkeep.database.factories import create_sqlite_database, default_database_path
from finkeep.domain import entities
from finkeep.domain.balance import BalanceMutator
from finkeep.domain.errors import InternalError, NotFoundError


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_bank_account_returns_domain_model(self, temp_db, workspace_id):
        account_id = temp_db.create_bank_account(
            workspace_id=workspace_id, name="Checking", initial_balance=Decimal("10")
        )
        account = temp_db.get_bank_account(workspace_id, account_id)

        assert isinstance(account, entities.BankAccount)
        assert isinstance(account.current_balance, Decimal)
        assert isinstance(account.created_at, datetime)

    def test_get_transaction_returns_domain_model(self, temp_db, workspace_id, checking):
        txn_id = temp_db.create_transaction(
            workspace_id=workspace_id,
            description="Market",
            amount=Decimal("12.34"),
            type=entities.TransactionType.EXPENSE,
            date=date(2026, 3, 1),
            bank_account_id=checking.id,
            is_paid=True,
        )
        txn = temp_db.get_transaction(workspace_id, txn_id)

        assert isinstance(txn, entities.Transaction)
        assert txn.type == entities.TransactionType.EXPENSE
        assert txn.amount == Decimal("12.34")
        assert txn.date == date(2026, 3, 1)

    def test_rows_are_scoped_to_workspace(self, temp_db, workspace_id, other_workspace_id, checking):
        assert temp_db.get_bank_account(other_workspace_id, checking.id) is None
        assert temp_db.list_bank_accounts(other_workspace_id) == []

    def test_increment_is_relative(self, temp_db, workspace_id, checking):
        temp_db.increment_account_balance(workspace_id, checking.id, Decimal("-250.50"))
        temp_db.increment_account_balance(workspace_id, checking.id, Decimal("50.50"))
        assert temp_db.get_bank_account(workspace_id, checking.id).current_balance == Decimal("800")

    def test_increment_other_workspace_matches_nothing(
        self, temp_db, workspace_id, other_workspace_id, checking
    ):
        assert temp_db.increment_account_balance(other_workspace_id, checking.id, Decimal("1")) is False
        assert temp_db.get_bank_account(workspace_id, checking.id).current_balance == Decimal("1000")

    def test_invoice_bucket_is_unique(self, temp_db, card):
        temp_db.create_invoice(card.id, 3, 2026, date(2026, 3, 10), date(2026, 3, 20))
        with pytest.raises(InternalError):
            temp_db.create_invoice(card.id, 3, 2026, date(2026, 3, 10), date(2026, 3, 20))


class TestAtomic:
    """Tests for db.atomic() commit and rollback."""

    def test_commit_on_success(self, temp_db, workspace_id, checking):
        with temp_db.atomic():
            temp_db.increment_account_balance(workspace_id, checking.id, Decimal("-100"))
            temp_db.create_transaction(
                workspace_id=workspace_id,
                description="Market",
                amount=Decimal("100"),
                type=entities.TransactionType.EXPENSE,
                date=date(2026, 3, 1),
                bank_account_id=checking.id,
                is_paid=True,
            )

        temp_db.disconnect()
        assert temp_db.get_bank_account(workspace_id, checking.id).current_balance == Decimal("900")
        assert len(temp_db.list_transactions(workspace_id)) == 1

    def test_rollback_on_error(self, temp_db, workspace_id, checking):
        """Test a failure after the first write leaves nothing behind."""
        mutator = BalanceMutator(temp_db)
        with pytest.raises(NotFoundError):
            with temp_db.atomic():
                temp_db.create_transaction(
                    workspace_id=workspace_id,
                    description="Transfer out",
                    amount=Decimal("100"),
                    type=entities.TransactionType.EXPENSE,
                    date=date(2026, 3, 1),
                    bank_account_id=checking.id,
                    is_paid=True,
                )
                mutator.apply_delta(workspace_id, checking.id, Decimal("-100"))
                mutator.apply_delta(workspace_id, 999, Decimal("100"))

        temp_db.disconnect()
        assert temp_db.get_bank_account(workspace_id, checking.id).current_balance == Decimal("1000")
        assert temp_db.list_transactions(workspace_id) == []

    def test_nested_blocks_commit_once(self, temp_db, workspace_id, checking):
        with pytest.raises(RuntimeError):
            with temp_db.atomic():
                with temp_db.atomic():
                    temp_db.increment_account_balance(workspace_id, checking.id, Decimal("5"))
                raise RuntimeError("outer failure")

        temp_db.disconnect()
        assert temp_db.get_bank_account(workspace_id, checking.id).current_balance == Decimal("1000")


class TestBalanceMutator:
    """Tests for BalanceMutator."""

    def test_zero_delta_is_skipped(self, temp_db, workspace_id):
        # No such account, but nothing is written either
        BalanceMutator(temp_db).apply_delta(workspace_id, 999, Decimal("0"))

    def test_principal_delta(self, temp_db, workspace_id, checking):
        BalanceMutator(temp_db).apply_delta(
            workspace_id, checking.id, Decimal("10"), principal_delta=Decimal("10")
        )
        account = temp_db.get_bank_account(workspace_id, checking.id)
        assert account.current_balance == Decimal("1010")
        assert account.total_invested == Decimal("1010")

    def test_missing_account(self, temp_db, workspace_id):
        with pytest.raises(NotFoundError, match="Bank account 999 not found"):
            BalanceMutator(temp_db).apply_delta(workspace_id, 999, Decimal("1"))


class TestFactories:
    """Tests for database construction."""

    def test_default_path_from_environment(self, monkeypatch, tmp_path):
        monkeypatch.setenv("FINKEEP_DB_PATH", str(tmp_path / "ledger.db"))
        assert default_database_path() == tmp_path / "ledger.db"

    def test_default_path_in_home(self, monkeypatch, tmp_path):
        monkeypatch.delenv("FINKEEP_DB_PATH", raising=False)
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_database_path() == tmp_path / ".finkeep" / "finkeep.db"

    def test_sqlite_database_creates_parent_directory(self, tmp_path):
        path = tmp_path / "nested" / "ledger.db"
        db = create_sqlite_database(str(path))
        try:
            workspace_id = db.create_workspace("Home")
            assert db.get_workspace(workspace_id).name == "Home"
        finally:
            db.disconnect()
        assert path.exists()
