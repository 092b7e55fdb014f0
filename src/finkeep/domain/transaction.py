"""Transaction domain service (the ledger of single income/expense records)."""

from calendar import monthrange
from typing import Optional
from datetime import date
from decimal import Decimal

from finkeep.database.base import Database
from finkeep.domain.balance import BalanceMutator
from finkeep.domain.entities import (
    BankAccount,
    Transaction as TransactionEntity,
    TransactionType,
)
from finkeep.domain.errors import (
    AlreadyInTargetStateError,
    NotFoundError,
    ValidationError,
    account_not_found,
    category_not_found,
    transaction_not_found,
)
from finkeep.domain.validation import (
    parse_transaction_type,
    require_amount,
    require_int_range,
    require_text,
)
from finkeep.log import get_logger
from finkeep.utils.clock import utc_now

logger = get_logger(__name__)


def principal_impact(txn: TransactionEntity) -> Optional[Decimal]:
    """Principal change a transaction currently causes, if any."""
    if txn.is_paid and txn.affects_principal:
        return txn.amount
    return None


def _negate(value: Optional[Decimal]) -> Optional[Decimal]:
    return None if value is None else -value


class TransactionService:
    """Service for managing transactions and their balance effects."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db
        self.balances = BalanceMutator(db)

    def _require_account(self, workspace_id: int, account_id: int) -> BankAccount:
        account = self.db.get_bank_account(workspace_id, account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def _require_category(self, workspace_id: int, category_id: Optional[int]) -> None:
        if category_id is not None and self.db.get_category(workspace_id, category_id) is None:
            raise NotFoundError(category_not_found(category_id))

    def _require_transaction(self, workspace_id: int, transaction_id: int) -> TransactionEntity:
        txn = self.db.get_transaction(workspace_id, transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def create_transaction(
        self,
        workspace_id: int,
        description: str,
        amount: Decimal,
        type: TransactionType | str,
        date: date,
        bank_account_id: int,
        category_id: Optional[int] = None,
        notes: Optional[str] = None,
        is_paid: bool = True,
        user_id: Optional[int] = None,
    ) -> int:
        """Create a transaction and apply its balance effect.

        A paid INCOME into an investment account also grows the account's
        invested principal.

        Args:
            workspace_id: Workspace scope
            description: Description (at least 2 characters)
            amount: Positive amount
            type: INCOME or EXPENSE
            date: Transaction date
            bank_account_id: Account the money moves in or out of
            category_id: Optional category ID
            notes: Optional notes
            is_paid: Whether the money already moved (default True)
            user_id: Creating user

        Returns:
            Transaction ID

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If the account or category doesn't exist
        """
        description = require_text(description, "Description")
        amount = require_amount(amount)
        txn_type = parse_transaction_type(type)

        account = self._require_account(workspace_id, bank_account_id)
        self._require_category(workspace_id, category_id)

        affects_principal = account.is_investment and txn_type == TransactionType.INCOME
        signed = amount if txn_type == TransactionType.INCOME else -amount

        with self.db.atomic():
            transaction_id = self.db.create_transaction(
                workspace_id=workspace_id,
                description=description,
                amount=amount,
                type=txn_type,
                date=date,
                bank_account_id=account.id,
                is_paid=is_paid,
                paid_at=utc_now() if is_paid else None,
                category_id=category_id,
                notes=notes,
                created_by_id=user_id,
                affects_principal=affects_principal,
            )
            if is_paid:
                self.balances.apply_delta(
                    workspace_id,
                    account.id,
                    signed,
                    principal_delta=amount if affects_principal else None,
                )

        logger.info(
            "transaction.created",
            transaction_id=transaction_id,
            account_id=account.id,
            amount=str(amount),
            type=txn_type.value,
            is_paid=is_paid,
        )
        return transaction_id

    def get_transaction(
        self, workspace_id: int, transaction_id: int
    ) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            workspace_id: Workspace scope
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(workspace_id, transaction_id)

    def update_transaction(
        self,
        workspace_id: int,
        transaction_id: int,
        description: str,
        amount: Decimal,
        type: TransactionType | str,
        date: date,
        bank_account_id: int,
        category_id: Optional[int] = None,
        notes: Optional[str] = None,
        is_paid: Optional[bool] = None,
    ) -> None:
        """Replace a transaction's fields, moving its balance effect.

        The old paid-state impact is reverted on the old account, then the new
        impact is applied on the (possibly different) new account, and the
        record is rewritten, all in one atomic unit.

        Args:
            workspace_id: Workspace scope
            transaction_id: Transaction to update
            description: New description
            amount: New positive amount
            type: New type
            date: New date
            bank_account_id: New account
            category_id: New category (None clears it)
            notes: New notes
            is_paid: New paid state; None keeps the current one

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If the transaction, account or category doesn't exist
        """
        existing = self._require_transaction(workspace_id, transaction_id)
        description = require_text(description, "Description")
        amount = require_amount(amount)
        txn_type = parse_transaction_type(type)
        new_account = self._require_account(workspace_id, bank_account_id)
        self._require_category(workspace_id, category_id)

        was_paid = existing.is_paid
        now_paid = was_paid if is_paid is None else is_paid

        if now_paid and not was_paid:
            paid_at = utc_now()
        elif now_paid:
            paid_at = existing.paid_at
        else:
            paid_at = None

        affects_principal = new_account.is_investment and txn_type == TransactionType.INCOME
        signed = amount if txn_type == TransactionType.INCOME else -amount

        with self.db.atomic():
            # 1. Revert old impact on the old account
            if was_paid:
                self.balances.apply_delta(
                    workspace_id,
                    existing.bank_account_id,
                    -existing.signed_amount,
                    principal_delta=_negate(principal_impact(existing)),
                )

            # 2. Apply new impact on the new account
            if now_paid:
                self.balances.apply_delta(
                    workspace_id,
                    new_account.id,
                    signed,
                    principal_delta=amount if affects_principal else None,
                )

            # 3. Rewrite the record
            self.db.update_transaction(
                workspace_id=workspace_id,
                transaction_id=transaction_id,
                description=description,
                amount=amount,
                type=txn_type,
                date=date,
                bank_account_id=new_account.id,
                is_paid=now_paid,
                paid_at=paid_at,
                category_id=category_id,
                notes=notes,
                affects_principal=affects_principal,
            )

        logger.info(
            "transaction.updated",
            transaction_id=transaction_id,
            old_account_id=existing.bank_account_id,
            account_id=new_account.id,
            amount=str(amount),
            is_paid=now_paid,
        )

    def delete_transaction(self, workspace_id: int, transaction_id: int) -> None:
        """Delete a transaction, reverting its balance effect.

        Args:
            workspace_id: Workspace scope
            transaction_id: Transaction ID to delete

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        existing = self._require_transaction(workspace_id, transaction_id)

        with self.db.atomic():
            if existing.is_paid:
                self.balances.apply_delta(
                    workspace_id,
                    existing.bank_account_id,
                    -existing.signed_amount,
                    principal_delta=_negate(principal_impact(existing)),
                )
            self.db.delete_transaction(workspace_id, transaction_id)

        logger.info(
            "transaction.deleted",
            transaction_id=transaction_id,
            account_id=existing.bank_account_id,
            reverted=str(-existing.balance_impact),
        )

    def set_transaction_paid(self, workspace_id: int, transaction_id: int, paid: bool) -> None:
        """Mark a transaction as paid or pending, moving exactly one delta.

        Args:
            workspace_id: Workspace scope
            transaction_id: Transaction ID
            paid: True to pay, False to undo the payment

        Raises:
            NotFoundError: If transaction doesn't exist
            AlreadyInTargetStateError: If it already is in the requested state
        """
        existing = self._require_transaction(workspace_id, transaction_id)
        if paid and existing.is_paid:
            raise AlreadyInTargetStateError(f"Transaction {transaction_id} is already paid")
        if not paid and not existing.is_paid:
            raise AlreadyInTargetStateError(f"Transaction {transaction_id} is not paid")

        delta = existing.signed_amount if paid else -existing.signed_amount
        principal = existing.amount if existing.affects_principal else None
        if principal is not None and not paid:
            principal = -principal

        with self.db.atomic():
            self.db.set_transaction_paid(
                workspace_id,
                transaction_id,
                is_paid=paid,
                paid_at=utc_now() if paid else None,
            )
            self.balances.apply_delta(
                workspace_id, existing.bank_account_id, delta, principal_delta=principal
            )

        logger.info(
            "transaction.paid" if paid else "transaction.unpaid",
            transaction_id=transaction_id,
            account_id=existing.bank_account_id,
            delta=str(delta),
        )

    def list_transactions(
        self,
        workspace_id: int,
        type: Optional[TransactionType | str] = None,
        month: Optional[int] = None,
        year: Optional[int] = None,
        bank_account_id: Optional[int] = None,
        status: Optional[str] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters.

        Args:
            workspace_id: Workspace scope
            type: Optional INCOME/EXPENSE filter
            month: Optional month (1-12); requires year
            year: Optional year; requires month
            bank_account_id: Optional account filter
            status: 'paid', 'pending' or None for both

        Returns:
            List of transaction entities, newest first

        Raises:
            ValidationError: If the month/year pair or status is invalid
        """
        txn_type = parse_transaction_type(type) if type is not None else None

        start_date = end_date = None
        if month is not None or year is not None:
            if month is None or year is None:
                raise ValidationError("Month and year must be given together")
            require_int_range(month, "Month", 1, 12)
            start_date = date(year, month, 1)
            end_date = date(year, month, monthrange(year, month)[1])

        is_paid = None
        if status is not None:
            if status not in ("paid", "pending"):
                raise ValidationError(f"Status must be 'paid' or 'pending', got {status!r}")
            is_paid = status == "paid"

        return self.db.list_transactions(
            workspace_id=workspace_id,
            type=txn_type,
            start_date=start_date,
            end_date=end_date,
            bank_account_id=bank_account_id,
            is_paid=is_paid,
        )
