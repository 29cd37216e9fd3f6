from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from amount import Amount, InvalidAmount

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"


class InvalidTransaction(ValueError):
    """Raised when raw fields do not describe a valid transaction."""


@dataclass(frozen=True)
class Deposit:
    tx_id: int
    client_id: int
    amount: Amount


@dataclass(frozen=True)
class Withdrawal:
    tx_id: int
    client_id: int
    amount: Amount


@dataclass(frozen=True)
class Dispute:
    """Opens a dispute on the deposit identified by tx_id."""

    tx_id: int
    client_id: int


@dataclass(frozen=True)
class Resolve:
    tx_id: int
    client_id: int


@dataclass(frozen=True)
class Chargeback:
    tx_id: int
    client_id: int


Transaction = Union[Deposit, Withdrawal, Dispute, Resolve, Chargeback]


def _parse_id(name: str, text: str, upper: int) -> int:
    try:
        value = int(text.strip())
    except ValueError:
        raise InvalidTransaction(f"{name} is not an integer: {text!r}") from None
    if not 0 <= value <= upper:
        raise InvalidTransaction(f"{name} out of range: {value}")
    return value


def transaction_from_fields(
    transaction_type: str,
    client: str,
    tx: str,
    amount: Optional[str] = None,
) -> Transaction:
    """
    Build a Transaction from raw text fields.

    Deposits and withdrawals require an amount; disputes, resolves and
    chargebacks must not carry one. An empty amount field counts as absent.

    Raises:
        InvalidTransaction: unknown type, bad ids, missing/unexpected or negative amount.
    """
    try:
        kind = TransactionType(transaction_type.strip().lower())
    except ValueError:
        raise InvalidTransaction(f"unknown transaction type: {transaction_type!r}") from None

    client_id = _parse_id("client", client, MAX_CLIENT_ID)
    tx_id = _parse_id("tx", tx, MAX_TRANSACTION_ID)

    parsed_amount = None
    if amount is not None and amount.strip():
        try:
            parsed_amount = Amount.parse(amount)
        except InvalidAmount as e:
            raise InvalidTransaction(f"tx {tx_id}: {e}") from e

    if kind in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL):
        if parsed_amount is None:
            raise InvalidTransaction(f"tx {tx_id}: {kind.value} requires an amount")
    elif parsed_amount is not None:
        raise InvalidTransaction(f"tx {tx_id}: {kind.value} does not take an amount")

    match kind:
        case TransactionType.DEPOSIT:
            return Deposit(tx_id, client_id, parsed_amount)
        case TransactionType.WITHDRAWAL:
            return Withdrawal(tx_id, client_id, parsed_amount)
        case TransactionType.DISPUTE:
            return Dispute(tx_id, client_id)
        case TransactionType.RESOLVE:
            return Resolve(tx_id, client_id)
        case TransactionType.CHARGEBACK:
            return Chargeback(tx_id, client_id)
