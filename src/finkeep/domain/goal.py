"""Savings goal domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from finkeep.database.base import Database
from finkeep.domain.balance import BalanceMutator
from finkeep.domain.entities import Goal as GoalEntity, TransactionType
from finkeep.domain.errors import (
    InsufficientFundsError,
    NotFoundError,
    ValidationError,
    account_not_found,
    goal_not_found,
)
from finkeep.domain.validation import parse_decimal, require_amount, require_text
from finkeep.log import get_logger
from finkeep.utils.clock import utc_now

logger = get_logger(__name__)


class GoalService:
    """Service for savings goals and the money moved into them."""

    def __init__(self, db: Database):
        """Initialize goal service.

        Args:
            db: Database instance
        """
        self.db = db
        self.balances = BalanceMutator(db)

    def _require_goal(self, workspace_id: int, goal_id: int) -> GoalEntity:
        goal = self.db.get_goal(workspace_id, goal_id)
        if goal is None:
            raise NotFoundError(goal_not_found(goal_id))
        return goal

    def create_goal(
        self,
        workspace_id: int,
        title: str,
        target_amount: Decimal,
        deadline: Optional[date] = None,
        color: Optional[str] = None,
        storage_account_id: Optional[int] = None,
    ) -> int:
        """Create a goal.

        Args:
            workspace_id: Workspace scope
            title: Goal title (at least 2 characters)
            target_amount: Positive target amount
            deadline: Optional deadline
            color: Optional display color
            storage_account_id: Optional account that holds the goal's money

        Returns:
            Goal ID

        Raises:
            ValidationError: If title or target is invalid
            NotFoundError: If the storage account doesn't exist
        """
        title = require_text(title, "Title")
        target_amount = require_amount(target_amount, "Target amount")
        if (
            storage_account_id is not None
            and self.db.get_bank_account(workspace_id, storage_account_id) is None
        ):
            raise NotFoundError(account_not_found(storage_account_id))

        return self.db.create_goal(
            workspace_id=workspace_id,
            title=title,
            target_amount=target_amount,
            deadline=deadline,
            color=color,
            storage_account_id=storage_account_id,
        )

    def get_goal(self, workspace_id: int, goal_id: int) -> Optional[GoalEntity]:
        return self.db.get_goal(workspace_id, goal_id)

    def list_goals(self, workspace_id: int) -> list[GoalEntity]:
        """List goals, nearest deadline first."""
        return self.db.list_goals(workspace_id)

    def update_goal(
        self,
        workspace_id: int,
        goal_id: int,
        title: str,
        target_amount: Decimal,
        deadline: Optional[date] = None,
        color: Optional[str] = None,
    ) -> None:
        """Update a goal's title, target and deadline.

        Raises:
            NotFoundError: If goal doesn't exist
            ValidationError: If title or target is invalid
        """
        title = require_text(title, "Title")
        target_amount = require_amount(target_amount, "Target amount")
        self._require_goal(workspace_id, goal_id)
        self.db.update_goal(
            workspace_id=workspace_id,
            goal_id=goal_id,
            title=title,
            target_amount=target_amount,
            deadline=deadline,
            color=color,
        )

    def deposit(
        self,
        workspace_id: int,
        goal_id: int,
        amount: Decimal,
        bank_account_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> None:
        """Move money into (positive amount) or out of (negative) a goal.

        With a source account, the goal progress changes by ``amount``, the
        source balance by ``-amount`` and the goal's storage account (if any)
        by ``amount``, and a paid transaction tagged with the goal records the
        movement. Without a source account only the goal progress changes.

        Args:
            workspace_id: Workspace scope
            goal_id: Goal ID
            amount: Non-zero signed amount
            bank_account_id: Optional source account
            user_id: Acting user

        Raises:
            ValidationError: If amount is zero
            NotFoundError: If goal or source account doesn't exist
            InsufficientFundsError: If a withdrawal exceeds the goal progress
        """
        amount = parse_decimal(amount)
        if amount == 0:
            raise ValidationError("Amount must not be zero")

        goal = self._require_goal(workspace_id, goal_id)
        if amount < 0 and -amount > goal.current_amount:
            raise InsufficientFundsError(
                f"Cannot withdraw {-amount}: goal {goal_id} holds {goal.current_amount}"
            )

        if bank_account_id is None:
            self.db.increment_goal_amount(workspace_id, goal.id, amount)
            logger.info("goal.adjusted", goal_id=goal.id, amount=str(amount))
            return

        if self.db.get_bank_account(workspace_id, bank_account_id) is None:
            raise NotFoundError(account_not_found(bank_account_id))

        if amount > 0:
            description = f"Depósito em Objetivo: {goal.title}"
            txn_type = TransactionType.EXPENSE
        else:
            description = f"Resgate de Objetivo: {goal.title}"
            txn_type = TransactionType.INCOME
        now = utc_now()

        with self.db.atomic():
            self.db.increment_goal_amount(workspace_id, goal.id, amount)
            self.balances.apply_delta(workspace_id, bank_account_id, -amount)
            if goal.storage_account_id is not None:
                self.balances.apply_delta(workspace_id, goal.storage_account_id, amount)
            self.db.create_transaction(
                workspace_id=workspace_id,
                description=description,
                amount=abs(amount),
                type=txn_type,
                date=now.date(),
                bank_account_id=bank_account_id,
                is_paid=True,
                paid_at=now,
                created_by_id=user_id,
                goal_id=goal.id,
            )

        logger.info(
            "goal.deposited" if amount > 0 else "goal.withdrawn",
            goal_id=goal.id,
            account_id=bank_account_id,
            amount=str(amount),
        )

    def delete_goal(self, workspace_id: int, goal_id: int) -> None:
        """Delete a goal, undoing the money movements recorded for it.

        Each transaction linked to the goal is reverted on its account and
        deleted; the storage account gives back the goal's current progress.

        Raises:
            NotFoundError: If goal doesn't exist
        """
        goal = self._require_goal(workspace_id, goal_id)
        linked = self.db.list_transactions(workspace_id, goal_id=goal.id)

        with self.db.atomic():
            for txn in linked:
                self.balances.apply_delta(workspace_id, txn.bank_account_id, -txn.balance_impact)
            if goal.storage_account_id is not None and goal.current_amount > 0:
                self.balances.apply_delta(
                    workspace_id, goal.storage_account_id, -goal.current_amount
                )
            self.db.delete_transactions(workspace_id, [t.id for t in linked])
            self.db.delete_goal(workspace_id, goal.id)

        logger.info(
            "goal.deleted",
            goal_id=goal.id,
            reverted_transactions=len(linked),
        )
