"""Mapper functions to convert SQLAlchemy models into domain entities.

This layer isolates the conversion logic, so the domain never sees ORM rows
or the string encoding of enums.
"""

from decimal import Decimal
from typing import Optional

from finkeep.domain import entities as domain
from finkeep.database.models import (
    Workspace as ORMWorkspace,
    User as ORMUser,
    BankAccount as ORMBankAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    CreditCard as ORMCreditCard,
    CreditCardInvoice as ORMCreditCardInvoice,
    CreditCardPurchase as ORMCreditCardPurchase,
    InstallmentPurchase as ORMInstallmentPurchase,
    Goal as ORMGoal,
)


def _money(value) -> Decimal:
    return Decimal("0") if value is None else Decimal(value)


def _optional_money(value) -> Optional[Decimal]:
    return None if value is None else Decimal(value)


def workspace_to_domain(orm_workspace: ORMWorkspace) -> domain.Workspace:
    """Convert SQLAlchemy Workspace model to domain Workspace entity."""
    return domain.Workspace(
        id=orm_workspace.id,
        name=orm_workspace.name,
        created_at=orm_workspace.created_at,
    )


def user_to_domain(orm_user: ORMUser) -> domain.User:
    """Convert SQLAlchemy User model to domain User entity."""
    return domain.User(
        id=orm_user.id,
        workspace_id=orm_user.workspace_id,
        name=orm_user.name,
        email=orm_user.email,
        created_at=orm_user.created_at,
    )


def bank_account_to_domain(orm_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity."""
    return domain.BankAccount(
        id=orm_account.id,
        workspace_id=orm_account.workspace_id,
        name=orm_account.name,
        initial_balance=_money(orm_account.initial_balance),
        current_balance=_money(orm_account.current_balance),
        total_invested=_optional_money(orm_account.total_invested),
        is_investment=bool(orm_account.is_investment),
        cdi_percentage=_optional_money(orm_account.cdi_percentage),
        maturity_date=orm_account.maturity_date,
        last_yield_update=orm_account.last_yield_update,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        workspace_id=orm_category.workspace_id,
        name=orm_category.name,
        type=domain.TransactionType(orm_category.type),
        color=orm_category.color,
        icon=orm_category.icon,
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        workspace_id=orm_transaction.workspace_id,
        description=orm_transaction.description,
        amount=_money(orm_transaction.amount),
        type=domain.TransactionType(orm_transaction.type),
        date=orm_transaction.date,
        is_paid=bool(orm_transaction.is_paid),
        paid_at=orm_transaction.paid_at,
        bank_account_id=orm_transaction.bank_account_id,
        category_id=orm_transaction.category_id,
        notes=orm_transaction.notes,
        created_by_id=orm_transaction.created_by_id,
        installment_purchase_id=orm_transaction.installment_purchase_id,
        installment_number=orm_transaction.installment_number,
        goal_id=orm_transaction.goal_id,
        affects_principal=bool(orm_transaction.affects_principal),
        created_at=orm_transaction.created_at,
    )


def credit_card_to_domain(orm_card: ORMCreditCard) -> domain.CreditCard:
    """Convert SQLAlchemy CreditCard model to domain CreditCard entity."""
    return domain.CreditCard(
        id=orm_card.id,
        workspace_id=orm_card.workspace_id,
        name=orm_card.name,
        last_digits=orm_card.last_digits,
        limit=_money(orm_card.limit),
        closing_day=orm_card.closing_day,
        due_day=orm_card.due_day,
        color=orm_card.color,
        created_at=orm_card.created_at,
    )


def invoice_to_domain(orm_invoice: ORMCreditCardInvoice) -> domain.CreditCardInvoice:
    """Convert SQLAlchemy CreditCardInvoice model to domain entity."""
    return domain.CreditCardInvoice(
        id=orm_invoice.id,
        credit_card_id=orm_invoice.credit_card_id,
        month=orm_invoice.month,
        year=orm_invoice.year,
        closing_date=orm_invoice.closing_date,
        due_date=orm_invoice.due_date,
        total_amount=_money(orm_invoice.total_amount),
        status=domain.InvoiceStatus(orm_invoice.status),
        paid_at=orm_invoice.paid_at,
        paid_from_account_id=orm_invoice.paid_from_account_id,
    )


def purchase_to_domain(orm_purchase: ORMCreditCardPurchase) -> domain.CreditCardPurchase:
    """Convert SQLAlchemy CreditCardPurchase model to domain entity."""
    return domain.CreditCardPurchase(
        id=orm_purchase.id,
        credit_card_id=orm_purchase.credit_card_id,
        invoice_id=orm_purchase.invoice_id,
        description=orm_purchase.description,
        total_amount=_money(orm_purchase.total_amount),
        installments=orm_purchase.installments,
        current_installment=orm_purchase.current_installment,
        purchase_date=orm_purchase.purchase_date,
        category_id=orm_purchase.category_id,
        parent_purchase_id=orm_purchase.parent_purchase_id,
        created_at=orm_purchase.created_at,
    )


def installment_purchase_to_domain(
    orm_purchase: ORMInstallmentPurchase,
) -> domain.InstallmentPurchase:
    """Convert SQLAlchemy InstallmentPurchase model to domain entity."""
    return domain.InstallmentPurchase(
        id=orm_purchase.id,
        workspace_id=orm_purchase.workspace_id,
        description=orm_purchase.description,
        total_amount=_money(orm_purchase.total_amount),
        total_installments=orm_purchase.total_installments,
        start_date=orm_purchase.start_date,
        bank_account_id=orm_purchase.bank_account_id,
        category_id=orm_purchase.category_id,
        created_at=orm_purchase.created_at,
    )


def goal_to_domain(orm_goal: ORMGoal) -> domain.Goal:
    """Convert SQLAlchemy Goal model to domain Goal entity."""
    return domain.Goal(
        id=orm_goal.id,
        workspace_id=orm_goal.workspace_id,
        title=orm_goal.title,
        target_amount=_money(orm_goal.target_amount),
        current_amount=_money(orm_goal.current_amount),
        deadline=orm_goal.deadline,
        color=orm_goal.color,
        storage_account_id=orm_goal.storage_account_id,
        created_at=orm_goal.created_at,
    )
