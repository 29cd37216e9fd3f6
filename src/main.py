import csv
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from config import get_settings
from engine import PaymentsEngine
from models import InvalidTransaction
from report import write_accounts

logger = logging.getLogger(__name__)

USAGE = "Usage: payments-engine <transactions.csv>"


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print(USAGE, file=sys.stderr)
        return 1

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"ERROR: Invalid configuration: {e}", file=sys.stderr)
        return 1
    logging.basicConfig(
        level=settings.log_level,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    filepath = args[0]
    engine = PaymentsEngine(settings)
    try:
        state = engine.process_file(filepath)
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        logger.error(f"Failed to read {filepath}: {e}")
        return 1
    except InvalidTransaction as e:
        logger.error(f"Invalid transaction in {filepath}: {e}")
        return 1

    try:
        write_accounts(state.snapshot(), sys.stdout)
    except OSError as e:
        logger.error(f"Failed to write report: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
