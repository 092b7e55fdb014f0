"""Monthly summary domain service."""

from calendar import monthrange
from datetime import date
from decimal import Decimal

from finkeep.database.base import Database
from finkeep.domain.entities import MonthlySummary, TransactionType
from finkeep.domain.validation import require_int_range


class SummaryService:
    """Service for building dashboard summaries."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def monthly_summary(self, workspace_id: int, month: int, year: int) -> MonthlySummary:
        """Build the summary of one calendar month.

        Args:
            workspace_id: Workspace scope
            month: Month (1-12)
            year: Year

        Returns:
            MonthlySummary with:
            - total_balance: sum of current balances of every account
            - income / expense: totals of the month's transactions
            - pending_count: unpaid transactions dated up to the end of the month
            - previous_balance: signed sum of paid transactions before the month
            - credit_card_bill: purchases billed in the month's card invoices

        Raises:
            ValidationError: If month is out of range
        """
        require_int_range(month, "Month", 1, 12)
        start = date(year, month, 1)
        end = date(year, month, monthrange(year, month)[1])

        accounts = self.db.list_bank_accounts(workspace_id)
        total_balance = sum((a.current_balance for a in accounts), Decimal("0"))

        income = self.db.sum_transactions(
            workspace_id, TransactionType.INCOME, start_date=start, end_date=end
        )
        expense = self.db.sum_transactions(
            workspace_id, TransactionType.EXPENSE, start_date=start, end_date=end
        )

        pending = self.db.list_transactions(workspace_id, end_date=end, is_paid=False)

        # Paid history strictly before the month
        before = date.fromordinal(start.toordinal() - 1)
        paid_income = self.db.sum_transactions(
            workspace_id, TransactionType.INCOME, end_date=before, is_paid=True
        )
        paid_expense = self.db.sum_transactions(
            workspace_id, TransactionType.EXPENSE, end_date=before, is_paid=True
        )

        return MonthlySummary(
            month=month,
            year=year,
            total_balance=total_balance,
            income=income,
            expense=expense,
            pending_count=len(pending),
            previous_balance=paid_income - paid_expense,
            credit_card_bill=self.db.sum_card_purchases_for_cycle(workspace_id, month, year),
        )
