"""Tests for BankAccountService."""

import pytest
from datetime import date
from decimal import Decimal

from finkeep.domain.errors import DependencyError, NotFoundError, ValidationError


def test_create_account_starts_at_initial_balance(account_service, workspace_id):
    account_id = account_service.create_account(
        workspace_id, name="Checking", initial_balance=Decimal("250.75")
    )
    account = account_service.get_account(workspace_id, account_id)

    assert account.name == "Checking"
    assert account.initial_balance == Decimal("250.75")
    assert account.current_balance == Decimal("250.75")
    assert account.total_invested == Decimal("250.75")
    assert account.is_investment is False
    assert account.last_yield_update is None


def test_create_investment_account(account_service, workspace_id):
    account_id = account_service.create_account(
        workspace_id,
        name="CDB",
        initial_balance=Decimal("5000"),
        is_investment=True,
        cdi_percentage=Decimal("110"),
        maturity_date=date(2028, 1, 1),
    )
    account = account_service.get_account(workspace_id, account_id)
    assert account.is_investment is True
    assert account.cdi_percentage == Decimal("110")
    assert account.maturity_date == date(2028, 1, 1)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"name": "X"},
        {"name": "   "},
        {"name": "Valid", "initial_balance": "lots"},
        {"name": "Valid", "cdi_percentage": Decimal("0")},
    ],
)
def test_create_account_validation(account_service, workspace_id, kwargs):
    with pytest.raises(ValidationError):
        account_service.create_account(workspace_id, **kwargs)
    assert account_service.list_accounts(workspace_id) == []


def test_update_initial_balance_shifts_current(
    account_service, transaction_service, workspace_id, checking
):
    """Test raising the initial balance by 500 raises the current balance by 500."""
    transaction_service.create_transaction(
        workspace_id,
        description="Market",
        amount=Decimal("200"),
        type="EXPENSE",
        date=date(2026, 3, 1),
        bank_account_id=checking.id,
    )
    account_service.update_account(
        workspace_id, checking.id, name="Main", initial_balance=Decimal("1500")
    )

    account = account_service.get_account(workspace_id, checking.id)
    assert account.name == "Main"
    assert account.initial_balance == Decimal("1500")
    assert account.current_balance == Decimal("1300")


def test_update_missing_account(account_service, workspace_id):
    with pytest.raises(NotFoundError):
        account_service.update_account(workspace_id, 404, name="Ghost", initial_balance=Decimal("0"))


def test_delete_account(account_service, workspace_id, savings):
    account_service.delete_account(workspace_id, savings.id)
    assert account_service.get_account(workspace_id, savings.id) is None


def test_delete_account_with_transactions_blocked(
    account_service, transaction_service, workspace_id, checking
):
    transaction_service.create_transaction(
        workspace_id,
        description="Market",
        amount=Decimal("20"),
        type="EXPENSE",
        date=date(2026, 3, 1),
        bank_account_id=checking.id,
    )
    with pytest.raises(DependencyError, match="1 transaction"):
        account_service.delete_account(workspace_id, checking.id)
    assert account_service.get_account(workspace_id, checking.id) is not None


def test_delete_goal_storage_account_blocked(
    account_service, goal_service, workspace_id, checking, savings
):
    """Test a goal keeps its storage account alive and stays deletable."""
    goal_id = goal_service.create_goal(
        workspace_id, title="Vacation", target_amount=Decimal("3000"), storage_account_id=savings.id
    )
    goal_service.deposit(workspace_id, goal_id, Decimal("100"), bank_account_id=checking.id)

    with pytest.raises(DependencyError, match="storage account of 1 goal"):
        account_service.delete_account(workspace_id, savings.id)
    assert account_service.get_account(workspace_id, savings.id).current_balance == Decimal("100")

    goal_service.delete_goal(workspace_id, goal_id)
    account_service.delete_account(workspace_id, savings.id)
    assert account_service.get_account(workspace_id, savings.id) is None
    assert account_service.get_account(workspace_id, checking.id).current_balance == Decimal("1000")


def test_accounts_are_scoped_to_workspace(account_service, workspace_id, other_workspace_id, checking):
    assert account_service.get_account(other_workspace_id, checking.id) is None
    assert account_service.list_accounts(other_workspace_id) == []
    with pytest.raises(NotFoundError):
        account_service.delete_account(other_workspace_id, checking.id)
