"""Shared pytest fixtures for finkeep tests."""

import tempfile
import os
from decimal import Decimal
import pytest

from finkeep.database.factories import create_sqlite_database
from finkeep.domain.account import BankAccountService
from finkeep.domain.category import CategoryService
from finkeep.domain.credit_card import CreditCardService
from finkeep.domain.goal import GoalService
from finkeep.domain.installment import InstallmentService
from finkeep.domain.investment import RedemptionService
from finkeep.domain.summary import SummaryService
from finkeep.domain.transaction import TransactionService
from finkeep.domain.workspace import WorkspaceService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def workspace_service(temp_db):
    return WorkspaceService(temp_db)


@pytest.fixture
def workspace(workspace_service):
    """Create a workspace with one member. Returns (workspace_id, user_id)."""
    return workspace_service.create_workspace("Family", user_name="Alice")


@pytest.fixture
def workspace_id(workspace):
    return workspace[0]


@pytest.fixture
def user_id(workspace):
    return workspace[1]


@pytest.fixture
def account_service(temp_db):
    """Create a BankAccountService with a temporary database."""
    return BankAccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def card_service(temp_db):
    return CreditCardService(temp_db)


@pytest.fixture
def installment_service(temp_db):
    return InstallmentService(temp_db)


@pytest.fixture
def redemption_service(temp_db):
    return RedemptionService(temp_db)


@pytest.fixture
def goal_service(temp_db):
    return GoalService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    return SummaryService(temp_db)


@pytest.fixture
def checking(account_service, workspace_id):
    """Create a checking account holding 1000.00."""
    account_id = account_service.create_account(
        workspace_id, name="Checking", initial_balance=Decimal("1000.00")
    )
    return account_service.get_account(workspace_id, account_id)


@pytest.fixture
def savings(account_service, workspace_id):
    """Create an empty savings account."""
    account_id = account_service.create_account(workspace_id, name="Savings")
    return account_service.get_account(workspace_id, account_id)


@pytest.fixture
def card(card_service, workspace_id):
    """Create a card closing on the 10th and due on the 20th."""
    card_id = card_service.create_card(
        workspace_id, name="Visa", limit=Decimal("5000"), closing_day=10, due_day=20
    )
    return card_service.get_card(workspace_id, card_id)


@pytest.fixture
def other_workspace_id(workspace_service):
    """A second, unrelated workspace."""
    workspace_id, _ = workspace_service.create_workspace("Neighbours", user_name="Bob")
    return workspace_id


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
