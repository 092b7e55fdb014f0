"""SQLAlchemy models for finkeep database."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from finkeep.utils.clock import utc_now

Base = declarative_base()

# Money columns; engine-computed amounts are quantized to the same scale.
Money = Numeric(18, 4)


class Workspace(Base):
    """Tenant model."""

    __tablename__ = "workspaces"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    users = relationship("User", back_populates="workspace", order_by="User.id")


class User(Base):
    """Workspace member model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    workspace_id = Column(Integer, ForeignKey("workspaces.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    workspace = relationship("Workspace", back_populates="users")


class BankAccount(Base):
    """Bank account model, including investment accounts."""

    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True)
    workspace_id = Column(Integer, ForeignKey("workspaces.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    initial_balance = Column(Money, nullable=False, default=0)
    current_balance = Column(Money, nullable=False, default=0)
    total_invested = Column(Money, nullable=True)
    is_investment = Column(Boolean, default=False, nullable=False)
    cdi_percentage = Column(Numeric(9, 4), nullable=True)
    maturity_date = Column(Date, nullable=True)
    last_yield_update = Column(DateTime, nullable=True)
    color = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    transactions = relationship(
        "Transaction", back_populates="bank_account", foreign_keys="Transaction.bank_account_id"
    )


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    workspace_id = Column(Integer, ForeignKey("workspaces.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    color = Column(String, nullable=True)
    icon = Column(String, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)


class Transaction(Base):
    """Income/expense transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    workspace_id = Column(Integer, ForeignKey("workspaces.id"), nullable=False, index=True)
    description = Column(String, nullable=False)
    amount = Column(Money, nullable=False)
    type = Column(String, nullable=False)
    date = Column(Date, nullable=False)
    is_paid = Column(Boolean, default=True, nullable=False)
    paid_at = Column(DateTime, nullable=True)
    notes = Column(String, nullable=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    created_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    installment_purchase_id = Column(
        Integer, ForeignKey("installment_purchases.id"), nullable=True, index=True
    )
    installment_number = Column(Integer, nullable=True)
    goal_id = Column(Integer, ForeignKey("goals.id"), nullable=True, index=True)
    affects_principal = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    bank_account = relationship(
        "BankAccount", back_populates="transactions", foreign_keys=[bank_account_id]
    )
    installment_purchase = relationship("InstallmentPurchase", back_populates="transactions")


class CreditCard(Base):
    """Credit card model."""

    __tablename__ = "credit_cards"

    id = Column(Integer, primary_key=True)
    workspace_id = Column(Integer, ForeignKey("workspaces.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    last_digits = Column(String(4), nullable=True)
    limit = Column(Money, nullable=False)
    closing_day = Column(Integer, nullable=False)
    due_day = Column(Integer, nullable=False)
    color = Column(String, nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    invoices = relationship(
        "CreditCardInvoice", back_populates="credit_card", cascade="all, delete-orphan"
    )
    purchases = relationship(
        "CreditCardPurchase", back_populates="credit_card", cascade="all, delete-orphan"
    )


class CreditCardInvoice(Base):
    """Billing-cycle bucket of a credit card."""

    __tablename__ = "credit_card_invoices"

    id = Column(Integer, primary_key=True)
    credit_card_id = Column(Integer, ForeignKey("credit_cards.id"), nullable=False)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)
    closing_date = Column(Date, nullable=False)
    due_date = Column(Date, nullable=False)
    total_amount = Column(Money, nullable=False, default=0)
    status = Column(String, nullable=False, default="OPEN")
    paid_at = Column(DateTime, nullable=True)
    paid_from_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=True)

    # One bucket per card and billing cycle
    __table_args__ = (
        UniqueConstraint("credit_card_id", "month", "year", name="uq_invoice_card_month_year"),
    )

    credit_card = relationship("CreditCard", back_populates="invoices")
    purchases = relationship("CreditCardPurchase", back_populates="invoice")


class CreditCardPurchase(Base):
    """One installment occurrence of a credit card purchase."""

    __tablename__ = "credit_card_purchases"

    id = Column(Integer, primary_key=True)
    credit_card_id = Column(Integer, ForeignKey("credit_cards.id"), nullable=False)
    invoice_id = Column(Integer, ForeignKey("credit_card_invoices.id"), nullable=False)
    description = Column(String, nullable=False)
    total_amount = Column(Money, nullable=False)
    installments = Column(Integer, nullable=False, default=1)
    current_installment = Column(Integer, nullable=False, default=1)
    purchase_date = Column(Date, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    parent_purchase_id = Column(Integer, ForeignKey("credit_card_purchases.id"), nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    credit_card = relationship("CreditCard", back_populates="purchases")
    invoice = relationship("CreditCardInvoice", back_populates="purchases")


class InstallmentPurchase(Base):
    """Parent record of a direct installment plan."""

    __tablename__ = "installment_purchases"

    id = Column(Integer, primary_key=True)
    workspace_id = Column(Integer, ForeignKey("workspaces.id"), nullable=False, index=True)
    description = Column(String, nullable=False)
    total_amount = Column(Money, nullable=False)
    total_installments = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    transactions = relationship(
        "Transaction",
        back_populates="installment_purchase",
        order_by="Transaction.installment_number",
    )


class Goal(Base):
    """Savings goal model."""

    __tablename__ = "goals"

    id = Column(Integer, primary_key=True)
    workspace_id = Column(Integer, ForeignKey("workspaces.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    target_amount = Column(Money, nullable=False)
    current_amount = Column(Money, nullable=False, default=0)
    deadline = Column(Date, nullable=True)
    color = Column(String, nullable=True)
    storage_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=True)
    created_at = Column(DateTime, default=utc_now, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
