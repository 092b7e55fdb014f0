"""Bank account domain service."""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from finkeep.database.base import Database
from finkeep.domain.entities import BankAccount as BankAccountEntity
from finkeep.domain.errors import (
    DependencyError,
    NotFoundError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
    account_stores_goals,
)
from finkeep.domain.validation import parse_decimal, require_text
from finkeep.log import get_logger

logger = get_logger(__name__)


def _check_cdi(cdi_percentage) -> Optional[Decimal]:
    if cdi_percentage is None:
        return None
    value = parse_decimal(cdi_percentage, "CDI percentage")
    if value <= 0:
        raise ValidationError("CDI percentage must be positive")
    return value


class BankAccountService:
    """Service for managing bank and investment accounts."""

    def __init__(self, db: Database):
        """Initialize bank account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        workspace_id: int,
        name: str,
        initial_balance: Decimal = Decimal("0"),
        is_investment: bool = False,
        cdi_percentage: Optional[Decimal] = None,
        maturity_date: Optional[date] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Create a new bank account.

        The current balance and the invested principal both start at the
        initial balance.

        Args:
            workspace_id: Workspace scope
            name: Account name (at least 2 characters)
            initial_balance: Opening balance, may be negative
            is_investment: Whether the account accrues daily yield
            cdi_percentage: Percentage of the daily rate the account earns
            maturity_date: Optional maturity date of the investment
            color: Optional display color
            icon: Optional display icon
            created_at: Creation time, defaults to now

        Returns:
            Account ID

        Raises:
            ValidationError: If name or numbers are invalid
        """
        name = require_text(name, "Name")
        initial_balance = parse_decimal(initial_balance, "Initial balance")
        cdi_percentage = _check_cdi(cdi_percentage)

        account_id = self.db.create_bank_account(
            workspace_id=workspace_id,
            name=name,
            initial_balance=initial_balance,
            is_investment=is_investment,
            cdi_percentage=cdi_percentage,
            maturity_date=maturity_date,
            color=color,
            icon=icon,
            created_at=created_at,
        )
        logger.info(
            "account.created",
            account_id=account_id,
            initial_balance=str(initial_balance),
            is_investment=is_investment,
        )
        return account_id

    def get_account(self, workspace_id: int, account_id: int) -> Optional[BankAccountEntity]:
        """Get bank account by ID.

        Args:
            workspace_id: Workspace scope
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_bank_account(workspace_id, account_id)

    def list_accounts(self, workspace_id: int) -> list[BankAccountEntity]:
        """List all accounts of a workspace.

        Returns:
            List of account entities
        """
        return self.db.list_bank_accounts(workspace_id)

    def update_account(
        self,
        workspace_id: int,
        account_id: int,
        name: str,
        initial_balance: Decimal,
        is_investment: bool = False,
        cdi_percentage: Optional[Decimal] = None,
        maturity_date: Optional[date] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> None:
        """Update an account.

        Changing the initial balance shifts the current balance by the same
        difference, so the ledger history stays intact.

        Args:
            workspace_id: Workspace scope
            account_id: Account ID to update
            name: New name
            initial_balance: New initial balance
            is_investment: New investment flag
            cdi_percentage: New CDI percentage
            maturity_date: New maturity date
            color: New color (None keeps the current one)
            icon: New icon (None keeps the current one)

        Raises:
            NotFoundError: If account doesn't exist
            ValidationError: If name or numbers are invalid
        """
        name = require_text(name, "Name")
        initial_balance = parse_decimal(initial_balance, "Initial balance")
        cdi_percentage = _check_cdi(cdi_percentage)

        with self.db.atomic():
            account = self.db.get_bank_account(workspace_id, account_id)
            if account is None:
                raise NotFoundError(account_not_found(account_id))

            correction = initial_balance - account.initial_balance
            self.db.update_bank_account(
                workspace_id=workspace_id,
                account_id=account_id,
                name=name,
                initial_balance=initial_balance,
                current_balance=account.current_balance + correction,
                is_investment=is_investment,
                cdi_percentage=cdi_percentage,
                maturity_date=maturity_date,
                color=color,
                icon=icon,
            )

        logger.info("account.updated", account_id=account_id, correction=str(correction))

    def delete_account(self, workspace_id: int, account_id: int) -> None:
        """Delete an account.

        Args:
            workspace_id: Workspace scope
            account_id: Account ID to delete

        Raises:
            NotFoundError: If account doesn't exist
            DependencyError: If transactions are still booked against it or a
                goal stores its money there
        """
        account = self.db.get_bank_account(workspace_id, account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))

        transaction_count = self.db.get_account_transaction_count(workspace_id, account_id)
        if transaction_count > 0:
            raise DependencyError(account_delete_blocked(account_id, transaction_count))

        goal_count = self.db.get_account_goal_count(workspace_id, account_id)
        if goal_count > 0:
            raise DependencyError(account_stores_goals(account_id, goal_count))

        self.db.delete_bank_account(workspace_id, account_id)
        logger.info("account.deleted", account_id=account_id)
