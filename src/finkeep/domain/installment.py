"""Installment plan domain service (direct, non-card installment purchases)."""

from datetime import date
from decimal import Decimal
from typing import Optional

from dateutil.relativedelta import relativedelta

from finkeep.database.base import Database
from finkeep.domain.balance import BalanceMutator
from finkeep.domain.entities import (
    InstallmentProgress,
    InstallmentPurchase,
    TransactionType,
)
from finkeep.domain.errors import (
    NotFoundError,
    account_not_found,
    category_not_found,
    installment_plan_not_found,
)
from finkeep.domain.validation import require_amount, require_int_range, require_text
from finkeep.log import get_logger
from finkeep.utils.clock import utc_today
from finkeep.utils.money import split_evenly

logger = get_logger(__name__)

MIN_PLAN_INSTALLMENTS = 2
MAX_PLAN_INSTALLMENTS = 48


class InstallmentService:
    """Service for installment plans paid from a bank account."""

    def __init__(self, db: Database):
        """Initialize installment service.

        Args:
            db: Database instance
        """
        self.db = db
        self.balances = BalanceMutator(db)

    def create_plan(
        self,
        workspace_id: int,
        description: str,
        total_amount: Decimal,
        total_installments: int,
        start_date: date,
        bank_account_id: int,
        category_id: Optional[int] = None,
        user_id: Optional[int] = None,
    ) -> int:
        """Create an installment plan with one pending expense per installment.

        Installment ``i`` is dated ``start_date + i months``. None of them is
        paid, so the account balance is untouched until each one is marked
        paid.

        Args:
            workspace_id: Workspace scope
            description: Plan description
            total_amount: Positive total amount
            total_installments: Number of installments (2-48)
            start_date: Date of the first installment
            bank_account_id: Account the installments are paid from
            category_id: Optional category ID
            user_id: Creating user

        Returns:
            Installment plan ID

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If account or category doesn't exist
        """
        description = require_text(description, "Description")
        total_amount = require_amount(total_amount)
        require_int_range(
            total_installments, "Installments", MIN_PLAN_INSTALLMENTS, MAX_PLAN_INSTALLMENTS
        )
        if self.db.get_bank_account(workspace_id, bank_account_id) is None:
            raise NotFoundError(account_not_found(bank_account_id))
        if category_id is not None and self.db.get_category(workspace_id, category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        share = split_evenly(total_amount, total_installments)

        with self.db.atomic():
            plan_id = self.db.create_installment_purchase(
                workspace_id=workspace_id,
                description=description,
                total_amount=total_amount,
                total_installments=total_installments,
                start_date=start_date,
                bank_account_id=bank_account_id,
                category_id=category_id,
            )
            for i in range(total_installments):
                self.db.create_transaction(
                    workspace_id=workspace_id,
                    description=f"{description} ({i + 1}/{total_installments})",
                    amount=share,
                    type=TransactionType.EXPENSE,
                    date=start_date + relativedelta(months=i),
                    bank_account_id=bank_account_id,
                    is_paid=False,
                    category_id=category_id,
                    created_by_id=user_id,
                    installment_purchase_id=plan_id,
                    installment_number=i + 1,
                )

        logger.info(
            "installment_plan.created",
            plan_id=plan_id,
            account_id=bank_account_id,
            total_amount=str(total_amount),
            installments=total_installments,
        )
        return plan_id

    def delete_plan(
        self, workspace_id: int, plan_id: int, today: Optional[date] = None
    ) -> Decimal:
        """Delete a plan and all its installments.

        Every installment dated up to today is treated as already deducted,
        and its amount is restored to the plan's account.

        Args:
            workspace_id: Workspace scope
            plan_id: Installment plan ID
            today: Reference date, defaults to the current UTC date

        Returns:
            The amount restored to the account

        Raises:
            NotFoundError: If plan doesn't exist
        """
        plan = self.db.get_installment_purchase(workspace_id, plan_id)
        if plan is None:
            raise NotFoundError(installment_plan_not_found(plan_id))
        today = today or utc_today()

        children = self.db.list_transactions(workspace_id, installment_purchase_id=plan.id)
        restored = sum((t.amount for t in children if t.date <= today), Decimal("0"))

        with self.db.atomic():
            self.db.delete_transactions(workspace_id, [t.id for t in children])
            self.db.delete_installment_purchase(workspace_id, plan.id)
            if restored > 0:
                self.balances.apply_delta(workspace_id, plan.bank_account_id, restored)

        logger.info(
            "installment_plan.deleted",
            plan_id=plan.id,
            account_id=plan.bank_account_id,
            restored=str(restored),
        )
        return restored

    def get_plan(
        self, workspace_id: int, plan_id: int, today: Optional[date] = None
    ) -> Optional[InstallmentProgress]:
        """Get a plan with its installments ordered by number, or None."""
        plan = self.db.get_installment_purchase(workspace_id, plan_id)
        if plan is None:
            return None
        return self._progress(workspace_id, plan, today or utc_today())

    def list_plans(
        self, workspace_id: int, today: Optional[date] = None
    ) -> list[InstallmentProgress]:
        """List plans, newest first, with their payment progress."""
        today = today or utc_today()
        return [
            self._progress(workspace_id, plan, today)
            for plan in self.db.list_installment_purchases(workspace_id)
        ]

    def _progress(
        self, workspace_id: int, plan: InstallmentPurchase, today: date
    ) -> InstallmentProgress:
        children = sorted(
            self.db.list_transactions(workspace_id, installment_purchase_id=plan.id),
            key=lambda t: t.installment_number or 0,
        )
        paid = sum(1 for t in children if t.is_paid)
        overdue = sum(1 for t in children if not t.is_paid and t.date < today)
        remaining = plan.total_installments - paid
        share = split_evenly(plan.total_amount, plan.total_installments)

        return InstallmentProgress(
            purchase=plan,
            transactions=tuple(children),
            paid_installments=paid,
            overdue_installments=overdue,
            remaining_installments=remaining,
            installment_amount=share,
            paid_amount=share * paid,
            remaining_amount=share * remaining,
        )
