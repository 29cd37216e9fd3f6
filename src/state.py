from dataclasses import dataclass
from typing import Dict, List, Optional

from account import Account, AccountError
from amount import Amount
from models import Transaction


@dataclass(frozen=True)
class StateError:
    """A rejected transaction, tagged with the account error that caused it."""

    kind: AccountError
    client_id: int
    tx_id: int

    def __str__(self) -> str:
        return f"client {self.client_id}, tx {self.tx_id}: {self.kind.value}"


@dataclass(frozen=True)
class AccountSnapshot:
    client_id: int
    available: Amount
    held: Amount
    total: Amount
    locked: bool


class State:
    """
    All client accounts for one run, keyed by client id.
    Accounts are created on first reference and never removed.
    """

    def __init__(self):
        self._accounts: Dict[int, Account] = {}

    def _get_or_create_account(self, client_id: int) -> Account:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = Account(client_id)
        return self._accounts[client_id]

    def apply(self, transaction: Transaction) -> Optional[StateError]:
        """Route a transaction to its client's account. Returns None on success."""
        account = self._get_or_create_account(transaction.client_id)
        error = account.apply(transaction)
        if error is None:
            return None
        return StateError(kind=error, client_id=transaction.client_id, tx_id=transaction.tx_id)

    def snapshot(self) -> List[AccountSnapshot]:
        """Return account balances ordered by client id (for final output)."""
        return [
            AccountSnapshot(
                client_id=client_id,
                available=account.available,
                held=account.held,
                total=account.total,
                locked=account.locked,
            )
            for client_id, account in sorted(self._accounts.items())
        ]

    def __len__(self) -> int:
        return len(self._accounts)

    def __contains__(self, client_id: int) -> bool:
        return client_id in self._accounts
