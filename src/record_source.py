import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterator, Optional, TextIO

from models import Transaction, TransactionType

logger = logging.getLogger(__name__)

MAX_CLIENT_ID = 2**16 - 1
MAX_TRANSACTION_ID = 2**32 - 1

AMOUNT_REQUIRED = (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class RecordDecodeError(ValueError):
    """A CSV row that cannot be turned into a Transaction."""

    def __init__(self, message: str, line_number: int, row: Optional[Dict[str, str]] = None):
        super().__init__(f"line {line_number}: {message}")
        self.line_number = line_number
        self.row = row


class RecordSource:
    """
    Reads transactions from CSV with a `type, client, tx, amount` header.

    In strict mode the first undecodable row raises RecordDecodeError and ends the read.
    Otherwise the row is logged, counted in `skipped` and reading continues.
    """

    def __init__(self, strict: bool = True):
        self._strict = strict
        self.skipped = 0

    def read(self, stream: TextIO) -> Iterator[Transaction]:
        """Yield transactions in file order."""
        reader = csv.DictReader(stream)
        for row in reader:
            try:
                yield self.parse_row(row, reader.line_num)
            except RecordDecodeError as e:
                if self._strict:
                    raise
                self.skipped += 1
                logger.warning(f"Skipping row {row}: {e}")

    def parse_row(self, row: Dict[str, str], line_number: int = 0) -> Transaction:
        """Parse CSV row into Transaction."""
        # Short rows leave trailing values as None, extra values land under a None key
        normalized = {
            k.strip(): (v or "").strip()
            for k, v in row.items()
            if isinstance(k, str)
        }

        try:
            transaction_type = TransactionType(normalized["type"].lower())
            client_id = int(normalized["client"])
            transaction_id = int(normalized["tx"])
        except KeyError as e:
            raise RecordDecodeError(f"missing column {e}", line_number, row) from e
        except ValueError as e:
            raise RecordDecodeError(str(e), line_number, row) from e

        if not 0 <= client_id <= MAX_CLIENT_ID:
            raise RecordDecodeError(f"client id {client_id} out of range", line_number, row)
        if not 0 <= transaction_id <= MAX_TRANSACTION_ID:
            raise RecordDecodeError(f"transaction id {transaction_id} out of range", line_number, row)

        amount = self._parse_amount(normalized.get("amount", ""), line_number, row)
        if transaction_type not in AMOUNT_REQUIRED:
            # Only deposits and withdrawals carry an amount
            amount = None
        elif amount is None:
            raise RecordDecodeError(f"{transaction_type.value} requires an amount", line_number, row)

        return Transaction(
            transaction_type=transaction_type,
            client_id=client_id,
            transaction_id=transaction_id,
            amount=amount,
        )

    @staticmethod
    def _parse_amount(amount_str: str, line_number: int, row: Dict[str, str]) -> Optional[Decimal]:
        if not amount_str:
            return None
        try:
            amount = Decimal(amount_str)
        except InvalidOperation as e:
            raise RecordDecodeError(f"invalid amount {amount_str!r}", line_number, row) from e
        if not amount.is_finite():
            raise RecordDecodeError(f"invalid amount {amount_str!r}", line_number, row)
        return amount
