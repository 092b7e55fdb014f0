"""Credit card domain service: invoice bucketing, purchases and payment."""

from datetime import date
from decimal import Decimal
from typing import NamedTuple, Optional

from dateutil.relativedelta import relativedelta

from finkeep.database.base import Database
from finkeep.domain.balance import BalanceMutator
from finkeep.domain.entities import (
    CardSummary,
    CreditCard as CreditCardEntity,
    CreditCardInvoice,
    CreditCardPurchase,
    InvoiceStatus,
)
from finkeep.domain.errors import (
    AlreadyInTargetStateError,
    NotFoundError,
    ValidationError,
    account_not_found,
    card_not_found,
    category_not_found,
    invoice_not_found,
)
from finkeep.domain.validation import require_amount, require_int_range, require_text
from finkeep.log import get_logger
from finkeep.utils.clock import utc_now
from finkeep.utils.money import split_evenly

logger = get_logger(__name__)

MAX_CARD_INSTALLMENTS = 48


class BillingCycle(NamedTuple):
    """Invoice bucket key of a purchase date, with its dates."""

    month: int
    year: int
    closing_date: date
    due_date: date


def resolve_cycle(purchase_date: date, closing_day: int, due_day: int) -> BillingCycle:
    """Return the billing cycle a purchase made on ``purchase_date`` falls into.

    Purchases made after the closing day belong to the next month's cycle.
    The due date moves one month past the closing month when the due day is
    smaller than the closing day.

    Args:
        purchase_date: Date of the purchase (or of one of its installments)
        closing_day: Day of month the card closes (1-28)
        due_day: Day of month the invoice is due (1-28)

    Returns:
        BillingCycle with month, year, closing and due dates
    """
    month = purchase_date.month
    year = purchase_date.year
    if purchase_date.day > closing_day:
        month += 1
        if month > 12:
            month = 1
            year += 1

    closing_date = date(year, month, closing_day)
    due_date = date(year, month, due_day)
    if due_day < closing_day:
        due_date += relativedelta(months=1)
    return BillingCycle(month, year, closing_date, due_date)


def _validate_card_fields(name, limit, closing_day, due_day, last_digits):
    name = require_text(name, "Name")
    limit = require_amount(limit, "Limit")
    require_int_range(closing_day, "Closing day", 1, 28)
    require_int_range(due_day, "Due day", 1, 28)
    if last_digits is not None:
        last_digits = last_digits.strip()
        if len(last_digits) != 4 or not last_digits.isdigit():
            raise ValidationError("Last digits must be exactly 4 digits")
    return name, limit, last_digits


class CreditCardService:
    """Service for managing credit cards, their invoices and purchases."""

    def __init__(self, db: Database):
        """Initialize credit card service.

        Args:
            db: Database instance
        """
        self.db = db
        self.balances = BalanceMutator(db)

    def _require_card(self, workspace_id: int, card_id: int) -> CreditCardEntity:
        card = self.db.get_credit_card(workspace_id, card_id)
        if card is None:
            raise NotFoundError(card_not_found(card_id))
        return card

    # Card records

    def create_card(
        self,
        workspace_id: int,
        name: str,
        limit: Decimal,
        closing_day: int,
        due_day: int,
        last_digits: Optional[str] = None,
        color: Optional[str] = None,
    ) -> int:
        """Create a credit card.

        Args:
            workspace_id: Workspace scope
            name: Card name
            limit: Positive credit limit
            closing_day: Day of month the card closes (1-28)
            due_day: Day of month the invoice is due (1-28)
            last_digits: Optional last four digits
            color: Optional display color

        Returns:
            Card ID

        Raises:
            ValidationError: If any field is invalid
        """
        name, limit, last_digits = _validate_card_fields(
            name, limit, closing_day, due_day, last_digits
        )
        return self.db.create_credit_card(
            workspace_id=workspace_id,
            name=name,
            limit=limit,
            closing_day=closing_day,
            due_day=due_day,
            last_digits=last_digits,
            color=color,
        )

    def get_card(self, workspace_id: int, card_id: int) -> Optional[CreditCardEntity]:
        """Get credit card by ID, or None if not found."""
        return self.db.get_credit_card(workspace_id, card_id)

    def list_cards(self, workspace_id: int) -> list[CreditCardEntity]:
        return self.db.list_credit_cards(workspace_id)

    def update_card(
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
        """Update a credit card.

        Existing invoices keep the dates they were created with.

        Raises:
            NotFoundError: If card doesn't exist
            ValidationError: If any field is invalid
        """
        name, limit, last_digits = _validate_card_fields(
            name, limit, closing_day, due_day, last_digits
        )
        self._require_card(workspace_id, card_id)
        self.db.update_credit_card(
            workspace_id=workspace_id,
            card_id=card_id,
            name=name,
            limit=limit,
            closing_day=closing_day,
            due_day=due_day,
            last_digits=last_digits,
            color=color,
        )

    def delete_card(self, workspace_id: int, card_id: int) -> None:
        """Delete a credit card along with its invoices and purchases.

        Raises:
            NotFoundError: If card doesn't exist
        """
        self._require_card(workspace_id, card_id)
        self.db.delete_credit_card(workspace_id, card_id)
        logger.info("card.deleted", card_id=card_id)

    def card_summary(self, workspace_id: int, card_id: int) -> CardSummary:
        """Return a card with its used and available limit.

        The used amount is the sum of every invoice that is not paid yet.

        Raises:
            NotFoundError: If card doesn't exist
        """
        card = self._require_card(workspace_id, card_id)
        used = self.db.sum_unpaid_invoice_totals(card.id)
        return CardSummary(card=card, used_amount=used, available_limit=card.limit - used)

    def list_card_summaries(self, workspace_id: int) -> list[CardSummary]:
        return [self.card_summary(workspace_id, card.id) for card in self.list_cards(workspace_id)]

    # Invoices

    def get_or_create_invoice(
        self, card: CreditCardEntity, purchase_date: date
    ) -> CreditCardInvoice:
        """Find the invoice bucket for a purchase date, creating it if missing.

        The store enforces one invoice per (card, month, year); a concurrent
        creator of the same bucket fails on that constraint.

        Args:
            card: Card resolved inside the caller's workspace
            purchase_date: Date the installment is charged

        Returns:
            The invoice entity
        """
        cycle = resolve_cycle(purchase_date, card.closing_day, card.due_day)
        invoice = self.db.find_invoice(card.id, cycle.month, cycle.year)
        if invoice is not None:
            return invoice

        invoice_id = self.db.create_invoice(
            card.id, cycle.month, cycle.year, cycle.closing_date, cycle.due_date
        )
        logger.debug(
            "invoice.created",
            card_id=card.id,
            invoice_id=invoice_id,
            month=cycle.month,
            year=cycle.year,
        )
        return self.db.get_invoice(card.id, invoice_id)

    def list_invoices(self, workspace_id: int, card_id: int) -> list[CreditCardInvoice]:
        """List invoices of a card in cycle order.

        Raises:
            NotFoundError: If card doesn't exist
        """
        card = self._require_card(workspace_id, card_id)
        return self.db.list_invoices(card.id)

    def get_invoice(
        self, workspace_id: int, card_id: int, invoice_id: int
    ) -> Optional[CreditCardInvoice]:
        card = self._require_card(workspace_id, card_id)
        return self.db.get_invoice(card.id, invoice_id)

    # Purchases

    def create_purchase(
        self,
        workspace_id: int,
        card_id: int,
        description: str,
        total_amount: Decimal,
        purchase_date: date,
        installments: int = 1,
        category_id: Optional[int] = None,
    ) -> list[int]:
        """Record a card purchase, split into installments.

        Installment ``i`` is charged on ``purchase_date + i months`` and lands
        in the invoice of that date's billing cycle, whose total grows by the
        installment share.

        Args:
            workspace_id: Workspace scope
            card_id: Card used for the purchase
            description: Purchase description
            total_amount: Positive total amount
            purchase_date: Date of the purchase
            installments: Number of installments (1-48)
            category_id: Optional category ID

        Returns:
            IDs of the created installment rows, first installment first

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If card or category doesn't exist
        """
        description = require_text(description, "Description")
        total_amount = require_amount(total_amount)
        require_int_range(installments, "Installments", 1, MAX_CARD_INSTALLMENTS)

        card = self._require_card(workspace_id, card_id)
        if category_id is not None and self.db.get_category(workspace_id, category_id) is None:
            raise NotFoundError(category_not_found(category_id))

        share = split_evenly(total_amount, installments)
        purchase_ids: list[int] = []
        parent_id: Optional[int] = None

        with self.db.atomic():
            for i in range(installments):
                charge_date = purchase_date + relativedelta(months=i)
                invoice = self.get_or_create_invoice(card, charge_date)
                if invoice.status == InvoiceStatus.PAID:
                    # The bucket was already settled; this share is never debited
                    logger.warning(
                        "card.purchase_on_paid_invoice",
                        card_id=card.id,
                        invoice_id=invoice.id,
                        amount=str(share),
                    )

                label = description
                if installments > 1:
                    label = f"{description} ({i + 1}/{installments})"

                purchase_id = self.db.create_card_purchase(
                    card_id=card.id,
                    invoice_id=invoice.id,
                    description=label,
                    total_amount=share,
                    installments=installments,
                    current_installment=i + 1,
                    purchase_date=purchase_date,
                    category_id=category_id,
                    parent_purchase_id=parent_id,
                )
                if parent_id is None:
                    parent_id = purchase_id

                self.db.increment_invoice_total(invoice.id, share)
                purchase_ids.append(purchase_id)

        logger.info(
            "card.purchase_created",
            card_id=card.id,
            purchase_id=purchase_ids[0],
            total_amount=str(total_amount),
            installments=installments,
        )
        return purchase_ids

    def list_purchases(
        self, workspace_id: int, card_id: int, invoice_id: Optional[int] = None
    ) -> list[CreditCardPurchase]:
        """List purchases of a card, newest first.

        Raises:
            NotFoundError: If card doesn't exist
        """
        card = self._require_card(workspace_id, card_id)
        return self.db.list_card_purchases(card.id, invoice_id=invoice_id)

    # Payment

    def pay_invoice(
        self, workspace_id: int, card_id: int, invoice_id: int, bank_account_id: int
    ) -> Decimal:
        """Pay an invoice from a bank account.

        The invoice becomes PAID and its total is debited from the account in
        one atomic unit.

        Args:
            workspace_id: Workspace scope
            card_id: Card owning the invoice
            invoice_id: Invoice to pay
            bank_account_id: Account the payment comes from

        Returns:
            The amount debited

        Raises:
            NotFoundError: If card, invoice or account doesn't exist
            AlreadyInTargetStateError: If the invoice is already paid
        """
        card = self._require_card(workspace_id, card_id)
        invoice = self.db.get_invoice(card.id, invoice_id)
        if invoice is None:
            raise NotFoundError(invoice_not_found(invoice_id))
        if invoice.status == InvoiceStatus.PAID:
            raise AlreadyInTargetStateError(f"Invoice {invoice_id} is already paid")
        if self.db.get_bank_account(workspace_id, bank_account_id) is None:
            raise NotFoundError(account_not_found(bank_account_id))

        with self.db.atomic():
            if not self.db.mark_invoice_paid(card.id, invoice.id, utc_now(), bank_account_id):
                raise AlreadyInTargetStateError(f"Invoice {invoice_id} is already paid")
            # Debit the total stored at payment time
            paid = self.db.get_invoice(card.id, invoice.id).total_amount
            self.balances.apply_delta(workspace_id, bank_account_id, -paid)

        logger.info(
            "invoice.paid",
            card_id=card.id,
            invoice_id=invoice.id,
            account_id=bank_account_id,
            amount=str(paid),
        )
        return paid
