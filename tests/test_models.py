import sys
import os
from dataclasses import FrozenInstanceError

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from amount import Amount
from models import (
    Deposit, Withdrawal, Dispute, Resolve, Chargeback,
    InvalidTransaction, transaction_from_fields,
)


class TestTransaction:
    def test_create_deposit(self):
        transaction = transaction_from_fields("deposit", "1", "2", "100.0")
        assert transaction == Deposit(tx_id=2, client_id=1, amount=Amount.parse("100"))

    def test_create_withdrawal(self):
        transaction = transaction_from_fields("withdrawal", "4", "5", "6")
        assert transaction == Withdrawal(tx_id=5, client_id=4, amount=Amount(60_000))

    def test_zero_withdrawal_allowed(self):
        transaction = transaction_from_fields("withdrawal", "0", "0", "0")
        assert transaction == Withdrawal(tx_id=0, client_id=0, amount=Amount.ZERO)

    def test_create_dispute_no_amount(self):
        transaction = transaction_from_fields("dispute", "1", "1", "")
        assert transaction == Dispute(tx_id=1, client_id=1)
        assert not hasattr(transaction, "amount")

    def test_create_resolve_and_chargeback(self):
        assert transaction_from_fields("resolve", "1", "3") == Resolve(tx_id=3, client_id=1)
        assert transaction_from_fields("chargeback", "1", "3", None) == Chargeback(tx_id=3, client_id=1)

    def test_fields_trimmed_and_type_case_insensitive(self):
        transaction = transaction_from_fields(" Deposit ", " 7 ", " 8 ", " 1.5 ")
        assert transaction == Deposit(tx_id=8, client_id=7, amount=Amount(15_000))

    def test_transactions_are_immutable(self):
        transaction = Dispute(tx_id=1, client_id=1)
        with pytest.raises(FrozenInstanceError):
            transaction.tx_id = 2


class TestInvalidTransaction:
    def test_deposit_missing_amount(self):
        with pytest.raises(InvalidTransaction):
            transaction_from_fields("deposit", "1", "1", "")

    def test_withdrawal_missing_amount(self):
        with pytest.raises(InvalidTransaction):
            transaction_from_fields("withdrawal", "1", "1")

    def test_negative_amount(self):
        with pytest.raises(InvalidTransaction):
            transaction_from_fields("deposit", "1", "1", "-100.0")

    def test_dispute_with_amount(self):
        with pytest.raises(InvalidTransaction):
            transaction_from_fields("dispute", "1", "1", "5.0")

    def test_unknown_type(self):
        with pytest.raises(InvalidTransaction):
            transaction_from_fields("transfer", "1", "1", "5.0")

    def test_non_integer_ids(self):
        with pytest.raises(InvalidTransaction):
            transaction_from_fields("deposit", "one", "1", "5.0")
        with pytest.raises(InvalidTransaction):
            transaction_from_fields("deposit", "1", "1.5", "5.0")

    def test_ids_out_of_range(self):
        with pytest.raises(InvalidTransaction):
            transaction_from_fields("deposit", "65536", "1", "5.0")
        with pytest.raises(InvalidTransaction):
            transaction_from_fields("deposit", "1", "-1", "5.0")
        with pytest.raises(InvalidTransaction):
            transaction_from_fields("deposit", "1", str(2**32), "5.0")

    def test_invalid_transaction_is_value_error(self):
        assert issubclass(InvalidTransaction, ValueError)
