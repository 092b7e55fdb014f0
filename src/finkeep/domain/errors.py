"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested entity does not exist or lives in another workspace."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class AlreadyInTargetStateError(ConflictError):
    """Requested state transition is a no-op of the current state."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class InsufficientFundsError(DomainError):
    """Withdrawal or redemption exceeds the available balance."""


class UpstreamUnavailableError(DomainError):
    """External data source could not provide a usable answer."""


class InternalError(DomainError):
    """Unexpected storage failure; the operation was rolled back."""


def account_not_found(account_id: int) -> str:
    """Return message for missing bank account."""
    return f"Bank account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category."""
    return f"Category {category_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def card_not_found(card_id: int) -> str:
    """Return message for missing credit card."""
    return f"Credit card {card_id} not found"


def invoice_not_found(invoice_id: int) -> str:
    """Return message for missing invoice."""
    return f"Invoice {invoice_id} not found"


def installment_plan_not_found(plan_id: int) -> str:
    """Return message for missing installment plan."""
    return f"Installment plan {plan_id} not found"


def goal_not_found(goal_id: int) -> str:
    """Return message for missing goal."""
    return f"Goal {goal_id} not found"


def workspace_not_found(workspace_id: int) -> str:
    return f"Workspace {workspace_id} not found"


def user_not_found(user_id: int) -> str:
    return f"User {user_id} not found"


def account_delete_blocked(account_id: int, transaction_count: int) -> str:
    """Return message when account still has transactions."""
    return (
        f"Cannot delete account {account_id}: it has "
        f"{transaction_count} transaction{'s' if transaction_count != 1 else ''}. "
        "Please reassign or delete them first."
    )


def account_stores_goals(account_id: int, goal_count: int) -> str:
    """Return message when account still holds money for goals."""
    return (
        f"Cannot delete account {account_id}: it is the storage account of "
        f"{goal_count} goal{'s' if goal_count != 1 else ''}. "
        "Please delete those goals first."
    )
