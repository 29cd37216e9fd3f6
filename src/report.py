import csv
from typing import Iterable, TextIO

from amount import Amount
from state import AccountSnapshot

HEADER = ("client", "available", "held", "total", "locked")


def format_amount(amount: Amount) -> str:
    """Format amount with exactly four decimal places."""
    return str(amount)


def write_accounts(accounts: Iterable[AccountSnapshot], out: TextIO) -> None:
    """Write one CSV record per account, in the order given."""
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(HEADER)
    for account in accounts:
        writer.writerow([
            account.client_id,
            format_amount(account.available),
            format_amount(account.held),
            format_amount(account.total),
            str(account.locked).lower(),
        ])
