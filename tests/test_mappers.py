"""Tests for database mappers."""

from datetime import datetime, date, UTC
from decimal import Decimal

from finkeep.database.models import (
    BankAccount as ORMBankAccount,
    Transaction as ORMTransaction,
    CreditCardInvoice as ORMCreditCardInvoice,
)
from finkeep.database.mappers import (
    bank_account_to_domain,
    transaction_to_domain,
    invoice_to_domain,
)
from finkeep.domain.entities import BankAccount, InvoiceStatus, Transaction, TransactionType


class TestBankAccountMapper:
    """Tests for BankAccount mapper."""

    def test_bank_account_to_domain(self):
        orm_account = ORMBankAccount(
            id=1,
            workspace_id=2,
            name="CDB",
            initial_balance=Decimal("1000"),
            current_balance=Decimal("1005.5"),
            total_invested=Decimal("1000"),
            is_investment=True,
            cdi_percentage=Decimal("110"),
            created_at=datetime.now(UTC),
        )

        account = bank_account_to_domain(orm_account)

        assert isinstance(account, BankAccount)
        assert account.workspace_id == 2
        assert account.current_balance == Decimal("1005.5")
        assert account.cdi_percentage == Decimal("110")
        assert account.is_investment is True
        assert account.last_yield_update is None

    def test_missing_optional_money_stays_none(self):
        orm_account = ORMBankAccount(
            id=1,
            workspace_id=1,
            name="Checking",
            initial_balance=Decimal("0"),
            current_balance=None,
            is_investment=False,
            created_at=datetime.now(UTC),
        )

        account = bank_account_to_domain(orm_account)

        assert account.current_balance == Decimal("0")
        assert account.total_invested is None
        assert account.cdi_percentage is None


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        orm_transaction = ORMTransaction(
            id=7,
            workspace_id=1,
            description="Sofa (2/10)",
            amount=Decimal("300"),
            type="EXPENSE",
            date=date(2026, 4, 15),
            is_paid=False,
            bank_account_id=3,
            installment_purchase_id=4,
            installment_number=2,
            affects_principal=False,
            created_at=datetime.now(UTC),
        )

        txn = transaction_to_domain(orm_transaction)

        assert isinstance(txn, Transaction)
        assert txn.type is TransactionType.EXPENSE
        assert txn.is_paid is False
        assert txn.installment_number == 2
        assert txn.goal_id is None


class TestInvoiceMapper:
    """Tests for CreditCardInvoice mapper."""

    def test_invoice_to_domain(self):
        orm_invoice = ORMCreditCardInvoice(
            id=1,
            credit_card_id=5,
            month=12,
            year=2026,
            closing_date=date(2026, 12, 10),
            due_date=date(2026, 12, 20),
            total_amount=Decimal("250.5"),
            status="PAID",
        )

        invoice = invoice_to_domain(orm_invoice)

        assert invoice.status is InvoiceStatus.PAID
        assert invoice.total_amount == Decimal("250.5")
        assert invoice.paid_from_account_id is None
