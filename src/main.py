import csv
import sys
import logging
from decimal import Decimal
from typing import Iterable, TextIO

from engine import LedgerEngine
from models import ClientAccount
from record_source import RecordDecodeError

logging.basicConfig(
    level=logging.WARNING,
    format="%(levelname)s: %(message)s",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)

OUTPUT_HEADER = ["client", "available", "held", "total", "locked"]


def format_decimal(value: Decimal) -> str:
    """Format decimal at full precision, never in scientific notation."""
    return f"{value:f}"


def write_accounts(accounts: Iterable[ClientAccount], stream: TextIO) -> None:
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerow(OUTPUT_HEADER)
    for account in accounts:
        writer.writerow([
            account.client_id,
            format_decimal(account.available),
            format_decimal(account.held),
            format_decimal(account.total),
            str(account.locked).lower(),
        ])


def main():
    if len(sys.argv) != 2:
        print("Usage: python main.py <input.csv>", file=sys.stderr)
        sys.exit(1)

    filepath = sys.argv[1]
    engine = LedgerEngine()
    try:
        accounts = engine.process_file(filepath)
    except (OSError, UnicodeDecodeError) as e:
        logger.error(f"Cannot read file {filepath} properly: {e}")
        sys.exit(1)
    except RecordDecodeError as e:
        logger.error(f"Cannot decode transaction in {filepath}: {e}")
        sys.exit(1)

    write_accounts(accounts.values(), sys.stdout)


if __name__ == "__main__":
    main()
