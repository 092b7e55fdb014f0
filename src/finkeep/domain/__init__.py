"""Domain layer for finkeep application."""

from importlib import import_module

# Services import the database layer, which imports domain.entities; load
# them lazily so importing finkeep.database first does not hit a cycle.
_SERVICES = {
    "WorkspaceService": "finkeep.domain.workspace",
    "BankAccountService": "finkeep.domain.account",
    "CategoryService": "finkeep.domain.category",
    "TransactionService": "finkeep.domain.transaction",
    "CreditCardService": "finkeep.domain.credit_card",
    "InstallmentService": "finkeep.domain.installment",
    "YieldService": "finkeep.domain.investment",
    "RedemptionService": "finkeep.domain.investment",
    "GoalService": "finkeep.domain.goal",
    "SummaryService": "finkeep.domain.summary",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
