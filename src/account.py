import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Set, Tuple, assert_never

from amount import Amount
from models import Transaction, Deposit, Withdrawal, Dispute, Resolve, Chargeback

logger = logging.getLogger(__name__)


class AccountError(Enum):
    CLIENT_MISMATCH = "client_mismatch"
    ACCOUNT_LOCKED = "account_locked"
    DUPLICATE_TRANSACTION_ID = "duplicate_transaction_id"
    TRANSACTION_NOT_FOUND = "transaction_not_found"
    INVALID_STATE = "invalid_state"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    AMOUNT_OVERFLOW = "amount_overflow"


class DepositStatus(Enum):
    NORMAL = "normal"
    DISPUTED = "disputed"
    CHARGED_BACK = "charged_back"


@dataclass
class DepositRecord:
    amount: Amount
    status: DepositStatus = DepositStatus.NORMAL


class Account:
    """
    Balance state for a single client.

    apply() is the only mutating entry point. It returns None on success or
    the AccountError that caused the transaction to be rejected, in which
    case nothing on the account has changed.

    Invariant: held equals the sum of amounts of deposits whose status is
    DISPUTED.

    Assumption: only deposits can be disputed. Withdrawals never enter the
    deposit ledger; their ids are remembered solely to reject duplicates.

    Policy: a dispute that would take available below zero (the deposit was
    already partly withdrawn) is rejected with INSUFFICIENT_FUNDS rather than
    letting available go negative.

    Limitation: the deposit ledger is never pruned, so memory grows with the
    number of deposits a client makes.
    """

    def __init__(self, client_id: int):
        self._client_id = client_id
        self._available = Amount.ZERO
        self._held = Amount.ZERO
        self._locked = False
        self._deposits: Dict[int, DepositRecord] = {}
        self._withdrawal_ids: Set[int] = set()

    @property
    def client_id(self) -> int:
        return self._client_id

    @property
    def available(self) -> Amount:
        return self._available

    @property
    def held(self) -> Amount:
        return self._held

    @property
    def total(self) -> Amount:
        # deposits that would push the total past MAX_UNITS are rejected
        return Amount(self._available.units + self._held.units)

    @property
    def locked(self) -> bool:
        return self._locked

    def deposit_status(self, tx_id: int) -> Optional[DepositStatus]:
        record = self._deposits.get(tx_id)
        return record.status if record else None

    def disputed_total(self) -> Amount:
        """Recompute the sum of currently disputed deposits."""
        return Amount(sum(
            record.amount.units
            for record in self._deposits.values()
            if record.status == DepositStatus.DISPUTED
        ))

    def apply(self, transaction: Transaction) -> Optional[AccountError]:
        """Apply one transaction. Returns None on success, otherwise the rejection reason."""
        if transaction.client_id != self._client_id:
            logger.error(
                f"Tx {transaction.tx_id}: client mismatch (account {self._client_id}, "
                f"got {transaction.client_id}). This should never happen."
            )
            return AccountError.CLIENT_MISMATCH

        if self._locked:
            error = AccountError.ACCOUNT_LOCKED
        else:
            error = self._apply_unlocked(transaction)

        if error is not None:
            logger.debug(f"Client {self._client_id}: rejected {transaction}: {error.value}")
        return error

    def _apply_unlocked(self, transaction: Transaction) -> Optional[AccountError]:
        match transaction:
            case Deposit():
                return self._handle_deposit(transaction)
            case Withdrawal():
                return self._handle_withdrawal(transaction)
            case Dispute():
                return self._handle_dispute(transaction)
            case Resolve():
                return self._handle_resolve(transaction)
            case Chargeback():
                return self._handle_chargeback(transaction)
            case _:
                assert_never(transaction)

    def _is_known_id(self, tx_id: int) -> bool:
        return tx_id in self._deposits or tx_id in self._withdrawal_ids

    def _handle_deposit(self, transaction: Deposit) -> Optional[AccountError]:
        if self._is_known_id(transaction.tx_id):
            return AccountError.DUPLICATE_TRANSACTION_ID

        available = self._available.checked_add(transaction.amount)
        # total must stay representable too
        if available is None or available.checked_add(self._held) is None:
            return AccountError.AMOUNT_OVERFLOW

        self._available = available
        self._deposits[transaction.tx_id] = DepositRecord(transaction.amount)
        return None

    def _handle_withdrawal(self, transaction: Withdrawal) -> Optional[AccountError]:
        if self._is_known_id(transaction.tx_id):
            return AccountError.DUPLICATE_TRANSACTION_ID

        available = self._available.checked_sub(transaction.amount)
        if available is None:
            return AccountError.INSUFFICIENT_FUNDS

        self._available = available
        self._withdrawal_ids.add(transaction.tx_id)
        return None

    def _lookup_deposit(
        self, tx_id: int, expected: DepositStatus
    ) -> Tuple[Optional[DepositRecord], Optional[AccountError]]:
        record = self._deposits.get(tx_id)
        if record is None:
            return None, AccountError.TRANSACTION_NOT_FOUND
        if record.status != expected:
            return None, AccountError.INVALID_STATE
        return record, None

    def _handle_dispute(self, transaction: Dispute) -> Optional[AccountError]:
        record, error = self._lookup_deposit(transaction.tx_id, DepositStatus.NORMAL)
        if error is not None:
            return error

        available = self._available.checked_sub(record.amount)
        if available is None:
            return AccountError.INSUFFICIENT_FUNDS
        held = self._held.checked_add(record.amount)
        if held is None:
            return AccountError.AMOUNT_OVERFLOW

        self._available = available
        self._held = held
        record.status = DepositStatus.DISPUTED
        return None

    def _handle_resolve(self, transaction: Resolve) -> Optional[AccountError]:
        record, error = self._lookup_deposit(transaction.tx_id, DepositStatus.DISPUTED)
        if error is not None:
            return error

        held = self._held.checked_sub(record.amount)
        available = self._available.checked_add(record.amount)
        if held is None:
            return AccountError.INVALID_STATE
        if available is None:
            return AccountError.AMOUNT_OVERFLOW

        self._held = held
        self._available = available
        record.status = DepositStatus.NORMAL
        return None

    def _handle_chargeback(self, transaction: Chargeback) -> Optional[AccountError]:
        record, error = self._lookup_deposit(transaction.tx_id, DepositStatus.DISPUTED)
        if error is not None:
            return error

        held = self._held.checked_sub(record.amount)
        if held is None:
            return AccountError.INVALID_STATE

        self._held = held
        self._locked = True
        record.status = DepositStatus.CHARGED_BACK
        return None

    def __repr__(self) -> str:
        return (
            f"Account(client={self._client_id}, available={self._available}, "
            f"held={self._held}, locked={self._locked})"
        )
