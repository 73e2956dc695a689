import logging
from typing import Dict

from models import ClientAccount
from ledger import Ledger
from record_source import RecordSource

logger = logging.getLogger(__name__)


class LedgerEngine:
    """
    Replays a transaction CSV through a Ledger in a single ordered pass.

    strict: abort on the first undecodable row (RecordDecodeError) instead of skipping it.
    enforce_locks: reject every operation on an account once it has been charged back.
    """

    def __init__(self, strict: bool = True, enforce_locks: bool = False):
        self._source = RecordSource(strict=strict)
        self._ledger = Ledger(enforce_locks=enforce_locks)

    @property
    def ledger(self) -> Ledger:
        return self._ledger

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states, in account creation order."""
        logger.info(f"Replaying transactions from {filepath}")

        with open(filepath, "r", newline="", encoding="utf-8-sig") as f:
            for transaction in self._source.read(f):
                self._ledger.process(transaction)

        stats = self._ledger.stats
        logger.info(
            f"Processed: {stats.processed}, "
            f"Applied: {stats.applied}, "
            f"Rejected: {stats.rejected}, "
            f"Ignored: {stats.ignored}, "
            f"Skipped rows: {self._source.skipped}"
        )

        return self._ledger.get_all_accounts()
