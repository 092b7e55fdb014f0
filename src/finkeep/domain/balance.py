"""Balance mutator: the only way ledger code changes an account balance."""

from decimal import Decimal
from typing import Optional

from finkeep.database.base import Database
from finkeep.domain.errors import NotFoundError, account_not_found


class BalanceMutator:
    """Apply signed deltas to account balances.

    Deltas are issued as relative updates in the store, never as a value
    computed from an earlier read. Callers run it inside ``db.atomic()``
    together with the record writes it belongs to.
    """

    def __init__(self, db: Database):
        self.db = db

    def apply_delta(
        self,
        workspace_id: int,
        account_id: int,
        amount: Decimal,
        principal_delta: Optional[Decimal] = None,
    ) -> None:
        """Add ``amount`` to the current balance and ``principal_delta`` to
        the invested principal.

        Zero deltas are skipped.

        Raises:
            NotFoundError: If the account does not exist in the workspace
        """
        if principal_delta is not None and principal_delta == 0:
            principal_delta = None
        if amount == 0 and principal_delta is None:
            return

        updated = self.db.increment_account_balance(
            workspace_id=workspace_id,
            account_id=account_id,
            amount=amount,
            principal_delta=principal_delta,
        )
        if not updated:
            raise NotFoundError(account_not_found(account_id))
