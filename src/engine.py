import csv
import logging
from collections import Counter
from typing import Dict, Iterable, Iterator, Optional, TextIO, Tuple

from account import AccountError
from config import EngineSettings
from models import Transaction, InvalidTransaction, transaction_from_fields
from state import State

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("type", "client", "tx", "amount")


class ProcessingStats:
    """Counters for one engine run."""

    def __init__(self):
        self.applied = 0
        self.invalid = 0
        self.rejected: Counter = Counter()

    def record_success(self):
        self.applied += 1

    def record_rejection(self, kind: AccountError):
        self.rejected[kind] += 1

    def record_invalid(self):
        self.invalid += 1

    @property
    def rejected_total(self) -> int:
        return sum(self.rejected.values())

    def summary(self) -> str:
        breakdown = ", ".join(f"{kind.value}={count}" for kind, count in sorted(
            self.rejected.items(), key=lambda item: item[0].value
        ))
        text = f"Applied: {self.applied}, Rejected: {self.rejected_total}, Invalid: {self.invalid}"
        return f"{text} ({breakdown})" if breakdown else text


def read_rows(stream: TextIO) -> Iterator[Tuple[int, Dict[str, Optional[str]]]]:
    """
    Yield (line number, row) pairs from a headed CSV stream.
    Header names and values are whitespace-trimmed.

    Raises:
        csv.Error: the header is missing one of the required columns.
    """
    reader = csv.reader(stream)
    header = next(reader, None)
    if header is None:
        return
    columns = [name.strip().lower() for name in header]
    missing = [name for name in REQUIRED_COLUMNS if name not in columns]
    if missing:
        raise csv.Error(f"input header is missing columns: {', '.join(missing)}")

    for fields in reader:
        if not any(field.strip() for field in fields):
            continue
        row: Dict[str, Optional[str]] = {name: None for name in columns}
        for name, value in zip(columns, fields):
            row[name] = value.strip()
        # fields beyond the header collect under the empty column name
        extra = ",".join(field.strip() for field in fields[len(columns):]).strip(",")
        if extra:
            row[""] = extra
        yield reader.line_num, row


def parse_row(row: Dict[str, Optional[str]]) -> Transaction:
    """Parse a CSV row into a Transaction."""
    if row.get(""):
        raise InvalidTransaction(f"unexpected extra fields: {row['']!r}")
    if row["type"] is None or row["client"] is None or row["tx"] is None:
        raise InvalidTransaction("row has too few fields")
    return transaction_from_fields(row["type"], row["client"], row["tx"], row["amount"])


class PaymentsEngine:
    """
    Feeds transactions to a State one at a time, in arrival order.
    Rejected transactions are logged and skipped; the run always continues.
    """

    def __init__(self, settings: Optional[EngineSettings] = None):
        self._settings = settings or EngineSettings()
        self._stats = ProcessingStats()

    @property
    def stats(self) -> ProcessingStats:
        return self._stats

    def process_transactions(
        self, transactions: Iterable[Transaction], state: Optional[State] = None
    ) -> State:
        """Apply each transaction to state (a fresh State if none given) and return it."""
        state = state if state is not None else State()
        for transaction in transactions:
            self._apply(state, transaction)
        return state

    def process_stream(self, stream: TextIO, state: Optional[State] = None) -> State:
        """
        Process a CSV stream of transactions.

        Malformed rows are skipped with a warning, or re-raised as
        InvalidTransaction when the engine runs in strict mode.
        """
        state = state if state is not None else State()
        logger.info("Starting transaction processing")

        for line_num, row in read_rows(stream):
            try:
                transaction = parse_row(row)
            except InvalidTransaction as e:
                if self._settings.strict:
                    raise InvalidTransaction(f"line {line_num}: {e}") from e
                logger.warning(f"Skipping line {line_num}: {e}")
                self._stats.record_invalid()
                continue
            self._apply(state, transaction)

        logger.info(self._stats.summary())
        return state

    def process_file(self, filepath: str, state: Optional[State] = None) -> State:
        """Process CSV file and return the resulting state."""
        with open(filepath, "r", encoding="utf-8-sig", newline="") as f:
            return self.process_stream(f, state)

    def _apply(self, state: State, transaction: Transaction) -> None:
        error = state.apply(transaction)
        if error is None:
            self._stats.record_success()
            return
        self._stats.record_rejection(error.kind)
        logger.info(f"Rejected {transaction}: {error.kind.value}")
