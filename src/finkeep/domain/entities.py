"""Domain model entities for finkeep.

These are pure data classes representing business concepts, independent of
database schema. Services receive and return these; the ORM rows never leave
the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    """Direction of a money movement (also used for categories)."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class InvoiceStatus(str, Enum):
    """Lifecycle state of a credit card invoice."""

    OPEN = "OPEN"
    CLOSED = "CLOSED"
    PAID = "PAID"


@dataclass(frozen=True)
class Workspace:
    """Tenant boundary; every other entity belongs to exactly one."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class User:
    """Workspace member, used to attribute created transactions."""

    id: int
    workspace_id: int
    name: str
    email: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class BankAccount:
    """Bank account domain entity.

    ``current_balance`` is the running balance maintained by the ledger.
    ``total_invested`` tracks principal and only matters for investment
    accounts.
    """

    id: int
    workspace_id: int
    name: str
    initial_balance: Decimal
    current_balance: Decimal
    total_invested: Optional[Decimal]
    is_investment: bool
    cdi_percentage: Optional[Decimal]
    maturity_date: Optional[date]
    last_yield_update: Optional[datetime]
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Transaction category. Has no balance effect."""

    id: int
    workspace_id: int
    name: str
    type: TransactionType
    color: Optional[str]
    icon: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Single income/expense record against a bank account."""

    id: int
    workspace_id: int
    description: str
    amount: Decimal
    type: TransactionType
    date: date
    is_paid: bool
    paid_at: Optional[datetime]
    bank_account_id: int
    category_id: Optional[int]
    notes: Optional[str]
    created_by_id: Optional[int]
    installment_purchase_id: Optional[int]
    installment_number: Optional[int]
    goal_id: Optional[int]
    affects_principal: bool
    created_at: datetime

    @property
    def signed_amount(self) -> Decimal:
        """Amount with the sign it has on the account balance."""
        return self.amount if self.type == TransactionType.INCOME else -self.amount

    @property
    def balance_impact(self) -> Decimal:
        """Effect this record currently has on its account balance."""
        return self.signed_amount if self.is_paid else Decimal("0")


@dataclass(frozen=True)
class CreditCard:
    """Credit card with its billing cycle days."""

    id: int
    workspace_id: int
    name: str
    last_digits: Optional[str]
    limit: Decimal
    closing_day: int
    due_day: int
    color: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class CreditCardInvoice:
    """Billing-cycle bucket, unique per (card, month, year)."""

    id: int
    credit_card_id: int
    month: int
    year: int
    closing_date: date
    due_date: date
    total_amount: Decimal
    status: InvoiceStatus
    paid_at: Optional[datetime]
    paid_from_account_id: Optional[int]


@dataclass(frozen=True)
class CreditCardPurchase:
    """One installment occurrence of a card purchase."""

    id: int
    credit_card_id: int
    invoice_id: int
    description: str
    total_amount: Decimal
    installments: int
    current_installment: int
    purchase_date: date
    category_id: Optional[int]
    parent_purchase_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class CardSummary:
    """Credit card together with its limit usage."""

    card: CreditCard
    used_amount: Decimal
    available_limit: Decimal


@dataclass(frozen=True)
class InstallmentPurchase:
    """Parent record of a direct (non-card) installment plan."""

    id: int
    workspace_id: int
    description: str
    total_amount: Decimal
    total_installments: int
    start_date: date
    bank_account_id: int
    category_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class InstallmentProgress:
    """Installment plan with payment progress derived from its children."""

    purchase: InstallmentPurchase
    transactions: tuple[Transaction, ...]
    paid_installments: int
    overdue_installments: int
    remaining_installments: int
    installment_amount: Decimal
    paid_amount: Decimal
    remaining_amount: Decimal


@dataclass(frozen=True)
class Goal:
    """Savings goal, optionally backed by a storage account."""

    id: int
    workspace_id: int
    title: str
    target_amount: Decimal
    current_amount: Decimal
    deadline: Optional[date]
    color: Optional[str]
    storage_account_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class DailyRate:
    """Daily reference rate in percent per day (0.05 means 0.05%/day)."""

    date: date
    value: Decimal


@dataclass(frozen=True)
class YieldRunResult:
    """Outcome of one yield accretion batch."""

    processed: int
    skipped: int
    rate: DailyRate
    credited_account_ids: tuple[int, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class RedemptionResult:
    """Numbers computed for a redemption (also returned by quotes)."""

    amount: Decimal
    net_amount: Decimal
    tax_amount: Decimal
    tax_rate: Decimal
    proportional_profit: Decimal
    principal_reduction: Decimal
    days_held: int
    # Whether the unrounded tax clears the booking threshold
    books_tax: bool = False


@dataclass(frozen=True)
class MonthlySummary:
    """Dashboard figures for one calendar month of a workspace."""

    month: int
    year: int
    total_balance: Decimal
    income: Decimal
    expense: Decimal
    pending_count: int
    previous_balance: Decimal
    credit_card_bill: Decimal
