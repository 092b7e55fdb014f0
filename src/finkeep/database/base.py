"""Abstract database interface.

Every method that touches tenant data takes the ``workspace_id`` and must only
see rows of that workspace. Invoice and purchase methods take a card id that
the caller already resolved inside its workspace.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from finkeep.domain.entities import (
    Workspace,
    User,
    BankAccount,
    Category,
    Transaction,
    TransactionType,
    CreditCard,
    CreditCardInvoice,
    CreditCardPurchase,
    InstallmentPurchase,
    Goal,
)


class Database(ABC):
    """Abstract database interface for finkeep."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    @abstractmethod
    def atomic(self) -> AbstractContextManager[None]:
        """Group writes into one unit of work.

        All writes issued inside the block are committed together when it
        exits normally and rolled back if it raises. Nested blocks join the
        outermost one.
        """
        pass

    # Workspace operations
    @abstractmethod
    def create_workspace(self, name: str) -> int:
        """Create a workspace. Returns workspace ID."""
        pass

    @abstractmethod
    def get_workspace(self, workspace_id: int) -> Optional[Workspace]:
        """Get workspace by ID."""
        pass

    @abstractmethod
    def create_user(self, workspace_id: int, name: str, email: Optional[str] = None) -> int:
        """Create a user inside a workspace. Returns user ID."""
        pass

    @abstractmethod
    def get_user(self, workspace_id: int, user_id: int) -> Optional[User]:
        """Get a user of a workspace by ID."""
        pass

    @abstractmethod
    def get_first_user(self, workspace_id: int) -> Optional[User]:
        """Get the earliest user of a workspace, if any."""
        pass

    # Bank account operations
    @abstractmethod
    def create_bank_account(
        self,
        workspace_id: int,
        name: str,
        initial_balance: Decimal,
        is_investment: bool = False,
        cdi_percentage: Optional[Decimal] = None,
        maturity_date: Optional[date] = None,
        color: Optional[str] = None,
        icon: Optional[str] = None,
        created_at: Optional[datetime] = None,
    ) -> int:
        """Create a bank account with current balance and principal equal to
        the initial balance. Returns account ID."""
        pass

    @abstractmethod
    def get_bank_account(self, workspace_id: int, account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID."""
        pass

    @abstractmethod
    def list_bank_accounts(self, workspace_id: int) -> list[BankAccount]:
        """List bank accounts of a workspace, newest first."""
        pass

    @abstractmethod
    def update_bank_account(
        self,
        workspace_id: int,
        account_id: int,
        name: str,
        initial_balance: Decimal,
        current_balance: Decimal,
        is_investment: bool,
        cdi_percentage: Optional[Decimal],
        maturity_date: Optional[date],
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> None:
        """Overwrite editable account fields."""
        pass

    @abstractmethod
    def delete_bank_account(self, workspace_id: int, account_id: int) -> None:
        """Delete a bank account."""
        pass

    @abstractmethod
    def get_account_transaction_count(self, workspace_id: int, account_id: int) -> int:
        """Count transactions booked against an account."""
        pass

    @abstractmethod
    def get_account_goal_count(self, workspace_id: int, account_id: int) -> int:
        """Count goals that use an account as their storage account."""
        pass

    @abstractmethod
    def increment_account_balance(
        self,
        workspace_id: int,
        account_id: int,
        amount: Decimal,
        principal_delta: Optional[Decimal] = None,
    ) -> bool:
        """Add a signed delta to the current balance (and principal).

        Issued as a relative update in the store. Returns False if no account
        matched.
        """
        pass

    @abstractmethod
    def list_yield_candidates(self, workspace_id: Optional[int] = None) -> list[BankAccount]:
        """List investment accounts with a positive balance.

        Args:
            workspace_id: Restrict to one workspace; None means all workspaces
        """
        pass

    @abstractmethod
    def set_last_yield_update(self, workspace_id: int, account_id: int, when: datetime) -> None:
        """Stamp the last yield accretion time of an account."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        workspace_id: int,
        name: str,
        type: TransactionType,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, workspace_id: int, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def list_categories(self, workspace_id: int) -> list[Category]:
        """List categories ordered by type, then name."""
        pass

    @abstractmethod
    def update_category(
        self,
        workspace_id: int,
        category_id: int,
        name: str,
        type: TransactionType,
        color: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> None:
        """Update category fields."""
        pass

    @abstractmethod
    def delete_category(self, workspace_id: int, category_id: int) -> None:
        """Delete a category, clearing it from transactions that use it."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        workspace_id: int,
        description: str,
        amount: Decimal,
        type: TransactionType,
        date: date,
        bank_account_id: int,
        is_paid: bool = True,
        paid_at: Optional[datetime] = None,
        category_id: Optional[int] = None,
        notes: Optional[str] = None,
        created_by_id: Optional[int] = None,
        installment_purchase_id: Optional[int] = None,
        installment_number: Optional[int] = None,
        goal_id: Optional[int] = None,
        affects_principal: bool = False,
    ) -> int:
        """Create a transaction row. Returns transaction ID.

        This only writes the record; balance effects are the caller's job.
        """
        pass

    @abstractmethod
    def get_transaction(self, workspace_id: int, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction(
        self,
        workspace_id: int,
        transaction_id: int,
        description: str,
        amount: Decimal,
        type: TransactionType,
        date: date,
        bank_account_id: int,
        is_paid: bool,
        paid_at: Optional[datetime],
        category_id: Optional[int],
        notes: Optional[str],
        affects_principal: bool,
    ) -> None:
        """Overwrite transaction fields."""
        pass

    @abstractmethod
    def set_transaction_paid(
        self,
        workspace_id: int,
        transaction_id: int,
        is_paid: bool,
        paid_at: Optional[datetime],
    ) -> None:
        """Set the paid flag and timestamp of a transaction."""
        pass

    @abstractmethod
    def delete_transaction(self, workspace_id: int, transaction_id: int) -> None:
        """Delete a transaction row."""
        pass

    @abstractmethod
    def delete_transactions(self, workspace_id: int, transaction_ids: list[int]) -> int:
        """Delete several transaction rows. Returns number deleted."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        workspace_id: int,
        type: Optional[TransactionType] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        bank_account_id: Optional[int] = None,
        is_paid: Optional[bool] = None,
        installment_purchase_id: Optional[int] = None,
        goal_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest date first.

        Args:
            workspace_id: Workspace scope
            type: Only INCOME or only EXPENSE
            start_date: Inclusive lower date bound
            end_date: Inclusive upper date bound
            bank_account_id: Only this account
            is_paid: Only paid (True) or only pending (False)
            installment_purchase_id: Only children of this installment plan
            goal_id: Only transactions recorded for this goal
        """
        pass

    @abstractmethod
    def sum_transactions(
        self,
        workspace_id: int,
        type: TransactionType,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        is_paid: Optional[bool] = None,
    ) -> Decimal:
        """Sum transaction amounts of one type within an inclusive date range."""
        pass

    # Credit card operations
    @abstractmethod
    def create_credit_card(
        self,
        workspace_id: int,
        name: str,
        limit: Decimal,
        closing_day: int,
        due_day: int,
        last_digits: Optional[str] = None,
        color: Optional[str] = None,
    ) -> int:
        """Create a credit card. Returns card ID."""
        pass

    @abstractmethod
    def get_credit_card(self, workspace_id: int, card_id: int) -> Optional[CreditCard]:
        """Get credit card by ID."""
        pass

    @abstractmethod
    def list_credit_cards(self, workspace_id: int) -> list[CreditCard]:
        """List credit cards of a workspace."""
        pass

    @abstractmethod
    def update_credit_card(
        self,
        workspace_id: int,
        card_id: int,
        name: str,
        limit: Decimal,
        closing_day: int,
        due_day: int,
        last_digits: Optional[str] = None,
        color: Optional[str] = None,
    ) -> None:
        """Update credit card fields."""
        pass

    @abstractmethod
    def delete_credit_card(self, workspace_id: int, card_id: int) -> None:
        """Delete a credit card with its invoices and purchases."""
        pass

    @abstractmethod
    def find_invoice(self, card_id: int, month: int, year: int) -> Optional[CreditCardInvoice]:
        """Find the invoice bucket of a billing cycle."""
        pass

    @abstractmethod
    def create_invoice(
        self, card_id: int, month: int, year: int, closing_date: date, due_date: date
    ) -> int:
        """Create an empty OPEN invoice bucket. Returns invoice ID."""
        pass

    @abstractmethod
    def get_invoice(self, card_id: int, invoice_id: int) -> Optional[CreditCardInvoice]:
        """Get an invoice of a card."""
        pass

    @abstractmethod
    def list_invoices(self, card_id: int) -> list[CreditCardInvoice]:
        """List invoices of a card in cycle order."""
        pass

    @abstractmethod
    def increment_invoice_total(self, invoice_id: int, amount: Decimal) -> None:
        """Add an amount to the invoice total as a relative update."""
        pass

    @abstractmethod
    def mark_invoice_paid(
        self, card_id: int, invoice_id: int, paid_at: datetime, paid_from_account_id: int
    ) -> bool:
        """Transition an unpaid invoice to PAID.

        Returns False if the invoice was already PAID when the update ran.
        """
        pass

    @abstractmethod
    def sum_unpaid_invoice_totals(self, card_id: int) -> Decimal:
        """Sum totals of the card's invoices that are not PAID."""
        pass

    @abstractmethod
    def create_card_purchase(
        self,
        card_id: int,
        invoice_id: int,
        description: str,
        total_amount: Decimal,
        installments: int,
        current_installment: int,
        purchase_date: date,
        category_id: Optional[int] = None,
        parent_purchase_id: Optional[int] = None,
    ) -> int:
        """Create one installment row of a card purchase. Returns purchase ID."""
        pass

    @abstractmethod
    def list_card_purchases(
        self, card_id: int, invoice_id: Optional[int] = None
    ) -> list[CreditCardPurchase]:
        """List purchases of a card, optionally of one invoice."""
        pass

    @abstractmethod
    def sum_card_purchases_for_cycle(self, workspace_id: int, month: int, year: int) -> Decimal:
        """Sum purchase shares of every card invoice of a billing month."""
        pass

    # Installment plan operations
    @abstractmethod
    def create_installment_purchase(
        self,
        workspace_id: int,
        description: str,
        total_amount: Decimal,
        total_installments: int,
        start_date: date,
        bank_account_id: int,
        category_id: Optional[int] = None,
    ) -> int:
        """Create an installment plan parent record. Returns its ID."""
        pass

    @abstractmethod
    def get_installment_purchase(
        self, workspace_id: int, purchase_id: int
    ) -> Optional[InstallmentPurchase]:
        """Get installment plan by ID."""
        pass

    @abstractmethod
    def list_installment_purchases(self, workspace_id: int) -> list[InstallmentPurchase]:
        """List installment plans, newest first."""
        pass

    @abstractmethod
    def delete_installment_purchase(self, workspace_id: int, purchase_id: int) -> None:
        """Delete an installment plan parent record."""
        pass

    # Goal operations
    @abstractmethod
    def create_goal(
        self,
        workspace_id: int,
        title: str,
        target_amount: Decimal,
        current_amount: Decimal = Decimal("0"),
        deadline: Optional[date] = None,
        color: Optional[str] = None,
        storage_account_id: Optional[int] = None,
    ) -> int:
        """Create a goal. Returns goal ID."""
        pass

    @abstractmethod
    def get_goal(self, workspace_id: int, goal_id: int) -> Optional[Goal]:
        """Get goal by ID."""
        pass

    @abstractmethod
    def list_goals(self, workspace_id: int) -> list[Goal]:
        """List goals ordered by deadline."""
        pass

    @abstractmethod
    def update_goal(
        self,
        workspace_id: int,
        goal_id: int,
        title: str,
        target_amount: Decimal,
        deadline: Optional[date],
        color: Optional[str] = None,
    ) -> None:
        """Update goal fields."""
        pass

    @abstractmethod
    def increment_goal_amount(self, workspace_id: int, goal_id: int, amount: Decimal) -> None:
        """Add a signed amount to the goal progress as a relative update."""
        pass

    @abstractmethod
    def delete_goal(self, workspace_id: int, goal_id: int) -> None:
        """Delete a goal."""
        pass
