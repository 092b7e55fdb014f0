"""Utility for resolving bank account names to IDs."""

from finkeep.domain.account import BankAccountService
from finkeep.domain.errors import NotFoundError, ValidationError


def resolve_account(service: BankAccountService, workspace_id: int, account: str | int) -> int:
    """Resolve account name or ID to account ID.

    Args:
        service: BankAccountService instance
        workspace_id: Workspace the account must belong to
        account: Account name (str) or ID (int or string representation of int)

    Returns:
        Account ID

    Raises:
        NotFoundError: If account is not found
        ValidationError: If several accounts share the name
    """
    if isinstance(account, int):
        if service.get_account(workspace_id, account) is None:
            raise NotFoundError(f"Bank account {account} not found")
        return account

    # Try to parse as integer (handles string IDs like "1")
    if account.strip().isdigit():
        return resolve_account(service, workspace_id, int(account.strip()))

    name = account.strip().lower()
    matches = [acc for acc in service.list_accounts(workspace_id) if acc.name.lower() == name]
    if not matches:
        raise NotFoundError(f"Bank account '{account}' not found")
    if len(matches) > 1:
        ids = ", ".join(str(acc.id) for acc in matches)
        raise ValidationError(f"Account name '{account}' is ambiguous (IDs: {ids}); use the ID")
    return matches[0].id
