"""Investment account services: daily yield accretion and redemption."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from finkeep.database.base import Database
from finkeep.domain.balance import BalanceMutator
from finkeep.domain.entities import (
    BankAccount,
    RedemptionResult,
    TransactionType,
    YieldRunResult,
)
from finkeep.domain.errors import (
    InsufficientFundsError,
    NotFoundError,
    UpstreamUnavailableError,
    ValidationError,
    account_not_found,
)
from finkeep.domain.rates import RateProvider
from finkeep.domain.validation import require_amount
from finkeep.log import get_logger
from finkeep.utils.clock import utc_now
from finkeep.utils.money import CENT, quantize_money

logger = get_logger(__name__)

DEFAULT_CDI_PERCENTAGE = Decimal("100")

# Withholding tax on redemption profit by days held (strictly greater than)
TAX_BRACKETS = (
    (720, Decimal("0.15")),
    (360, Decimal("0.175")),
    (180, Decimal("0.20")),
)
BASE_TAX_RATE = Decimal("0.225")

# Taxes below one cent are not booked as a transaction
TAX_BOOKING_THRESHOLD = Decimal("0.009")


def tax_rate_for(days_held: int) -> Decimal:
    """Return the redemption tax rate for an investment held ``days_held`` days."""
    for min_days, rate in TAX_BRACKETS:
        if days_held > min_days:
            return rate
    return BASE_TAX_RATE


def _format_percentage(value: Decimal) -> str:
    return f"{value.normalize():f}"


class YieldService:
    """Daily yield accretion over investment accounts."""

    def __init__(self, db: Database, rates: RateProvider):
        """Initialize yield service.

        Args:
            db: Database instance
            rates: Provider of the daily reference rate
        """
        self.db = db
        self.rates = rates
        self.balances = BalanceMutator(db)

    def run_yield_accretion(
        self, workspace_id: Optional[int] = None, now: Optional[datetime] = None
    ) -> YieldRunResult:
        """Credit one day of yield to every investment account with money in it.

        Accounts already processed on the current calendar day are skipped,
        so running the batch twice a day credits nothing the second time.
        A yield below one cent is not booked, but the account is still
        stamped as processed.

        Args:
            workspace_id: Only process this workspace; None processes all
            now: Current time (naive UTC), defaults to now

        Returns:
            YieldRunResult with counts and the rate used

        Raises:
            UpstreamUnavailableError: If the daily rate cannot be obtained;
                no account is touched in that case
        """
        now = now or utc_now()
        today = now.date()

        try:
            rate = self.rates.get_daily_rate()
        except UpstreamUnavailableError as e:
            logger.error("yield.batch_aborted", workspace_id=workspace_id, error=str(e))
            raise

        processed = 0
        skipped = 0
        credited: list[int] = []

        for account in self.db.list_yield_candidates(workspace_id):
            if account.last_yield_update is not None and account.last_yield_update.date() == today:
                skipped += 1
                continue

            cdi = account.cdi_percentage or DEFAULT_CDI_PERCENTAGE
            gross_yield = account.current_balance * rate.value / 100 * cdi / 100

            if gross_yield >= CENT:
                user = self.db.get_first_user(account.workspace_id)
                if user is None:
                    # No one to attribute the transaction to
                    skipped += 1
                    continue
                self._credit(account, quantize_money(gross_yield), cdi, user.id, now)
                credited.append(account.id)
            else:
                self.db.set_last_yield_update(account.workspace_id, account.id, now)
            processed += 1

        logger.info(
            "yield.batch_finished",
            workspace_id=workspace_id,
            processed=processed,
            skipped=skipped,
            credited=len(credited),
            rate=str(rate.value),
        )
        return YieldRunResult(
            processed=processed,
            skipped=skipped,
            rate=rate,
            credited_account_ids=tuple(credited),
        )

    def _credit(
        self, account: BankAccount, gross_yield: Decimal, cdi: Decimal, user_id: int, now: datetime
    ) -> None:
        with self.db.atomic():
            self.db.create_transaction(
                workspace_id=account.workspace_id,
                description=f"Rendimento Diário ({_format_percentage(cdi)}% CDI)",
                amount=gross_yield,
                type=TransactionType.INCOME,
                date=now.date(),
                bank_account_id=account.id,
                is_paid=True,
                paid_at=now,
                created_by_id=user_id,
            )
            self.balances.apply_delta(account.workspace_id, account.id, gross_yield)
            self.db.set_last_yield_update(account.workspace_id, account.id, now)

        logger.info(
            "yield.credited",
            account_id=account.id,
            amount=str(gross_yield),
            cdi_percentage=str(cdi),
        )


class RedemptionService:
    """Withdrawals from investment accounts with profit withholding tax."""

    def __init__(self, db: Database):
        """Initialize redemption service.

        Args:
            db: Database instance
        """
        self.db = db
        self.balances = BalanceMutator(db)

    def _require_investment(self, workspace_id: int, account_id: int) -> BankAccount:
        account = self.db.get_bank_account(workspace_id, account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        if not account.is_investment:
            raise ValidationError(f"Bank account {account_id} is not an investment account")
        return account

    @staticmethod
    def _compute(account: BankAccount, amount: Decimal, now: datetime) -> RedemptionResult:
        if amount > account.current_balance:
            raise InsufficientFundsError(
                f"Cannot redeem {amount}: balance of account {account.id} "
                f"is {account.current_balance}"
            )

        principal = (
            account.total_invested
            if account.total_invested is not None
            else account.initial_balance
        )
        total_profit = max(Decimal("0"), account.current_balance - principal)
        ratio = amount / account.current_balance
        proportional_profit = total_profit * ratio

        days_held = (now - account.created_at).days
        tax_rate = tax_rate_for(days_held)
        raw_tax = proportional_profit * tax_rate
        tax_amount = quantize_money(raw_tax)

        return RedemptionResult(
            amount=amount,
            net_amount=amount - tax_amount,
            tax_amount=tax_amount,
            tax_rate=tax_rate,
            proportional_profit=quantize_money(proportional_profit),
            principal_reduction=quantize_money(principal * ratio),
            days_held=days_held,
            books_tax=raw_tax > TAX_BOOKING_THRESHOLD,
        )

    def quote_redemption(
        self,
        workspace_id: int,
        account_id: int,
        amount: Decimal,
        now: Optional[datetime] = None,
    ) -> RedemptionResult:
        """Compute what a redemption would yield, without writing anything.

        Raises:
            ValidationError: If amount isn't positive or the account isn't an investment
            NotFoundError: If the account doesn't exist
            InsufficientFundsError: If amount exceeds the current balance
        """
        amount = require_amount(amount)
        account = self._require_investment(workspace_id, account_id)
        return self._compute(account, amount, now or utc_now())

    def redeem(
        self,
        workspace_id: int,
        account_id: int,
        amount: Decimal,
        destination_account_id: Optional[int] = None,
        user_id: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> RedemptionResult:
        """Redeem money from an investment account.

        The profit share of the redeemed amount is taxed by how long the
        account has existed. The tax and the net amount are booked as
        expenses on the source account; the net amount is either credited to
        a destination account or leaves the workspace. The source balance
        drops by the full amount and the invested principal by the
        redeemed share of it.

        Args:
            workspace_id: Workspace scope
            account_id: Investment account to redeem from
            amount: Positive amount, at most the current balance
            destination_account_id: Optional account receiving the net amount
            user_id: Acting user
            now: Current time (naive UTC), defaults to now

        Returns:
            RedemptionResult with the computed amounts

        Raises:
            ValidationError: If amount isn't positive, the account isn't an
                investment or the destination is the account itself
            NotFoundError: If source or destination doesn't exist
            InsufficientFundsError: If amount exceeds the current balance
        """
        amount = require_amount(amount)
        now = now or utc_now()
        account = self._require_investment(workspace_id, account_id)

        destination = None
        if destination_account_id is not None:
            if destination_account_id == account.id:
                raise ValidationError("Destination account must differ from the redeemed account")
            destination = self.db.get_bank_account(workspace_id, destination_account_id)
            if destination is None:
                raise NotFoundError(account_not_found(destination_account_id))

        result = self._compute(account, amount, now)
        today = now.date()

        def book(description: str, value: Decimal, type: TransactionType, target: int) -> None:
            self.db.create_transaction(
                workspace_id=workspace_id,
                description=description,
                amount=value,
                type=type,
                date=today,
                bank_account_id=target,
                is_paid=True,
                paid_at=now,
                created_by_id=user_id,
            )

        with self.db.atomic():
            if result.books_tax:
                book(
                    f"IR sobre Resgate ({result.tax_rate * 100:.1f}%)",
                    result.tax_amount,
                    TransactionType.EXPENSE,
                    account.id,
                )

            if destination is not None:
                book(
                    f"Resgate Investimento -> {destination.name}",
                    result.net_amount,
                    TransactionType.EXPENSE,
                    account.id,
                )
                book(
                    f"Resgate de {account.name}",
                    result.net_amount,
                    TransactionType.INCOME,
                    destination.id,
                )
                self.balances.apply_delta(workspace_id, destination.id, result.net_amount)
            else:
                book("Resgate Investimento", result.net_amount, TransactionType.EXPENSE, account.id)

            self.balances.apply_delta(
                workspace_id,
                account.id,
                -amount,
                principal_delta=-result.principal_reduction,
            )

        logger.info(
            "investment.redeemed",
            account_id=account.id,
            destination_account_id=destination.id if destination else None,
            amount=str(amount),
            tax_amount=str(result.tax_amount),
            net_amount=str(result.net_amount),
        )
        return result
