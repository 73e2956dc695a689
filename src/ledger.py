import dataclasses
import logging
from typing import Dict, Optional

from models import Transaction, TransactionType, ClientAccount, ProcessingResult, ProcessingStats
from state import LedgerState

logger = logging.getLogger(__name__)


class Ledger:
    """
    Applies transactions to account state, one at a time, in arrival order.

    Invalid operations never raise: they are logged as warnings and leave the
    ledger unchanged. Disputes, resolves and chargebacks that reference another
    client's transaction are dropped without a warning.

    With enforce_locks=True, every operation on a locked account is rejected.
    By default a chargeback only marks the account as locked.
    """

    def __init__(self, enforce_locks: bool = False):
        self._state = LedgerState()
        self._enforce_locks = enforce_locks
        self.stats = ProcessingStats()

    def process(self, transaction: Transaction) -> None:
        """Apply a single transaction. The outcome is only visible through account state and stats."""
        if self._enforce_locks and self._is_locked(transaction.client_id):
            logger.warning(f"{transaction.transaction_type.value.capitalize()} tx {transaction.transaction_id}: account {transaction.client_id} is locked")
            self.stats.record(ProcessingResult.REJECTED)
            return

        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                result = self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                result = self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                result = self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                result = self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                result = self._handle_chargeback(transaction)

        self.stats.record(result)

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Snapshot of a client's account, or None if the client never deposited."""
        account = self._state.get_account(client_id)
        if account is None:
            return None
        return dataclasses.replace(account)

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Snapshot of a recorded deposit or withdrawal."""
        transaction = self._state.get_transaction(transaction_id)
        if transaction is None:
            return None
        return dataclasses.replace(transaction)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Snapshots of every account, in the order the accounts were created."""
        return {
            client_id: dataclasses.replace(account)
            for client_id, account in self._state.get_all_accounts().items()
        }

    def _is_locked(self, client_id: int) -> bool:
        account = self._state.get_account(client_id)
        return account is not None and account.locked

    def _handle_deposit(self, transaction: Transaction) -> ProcessingResult:
        if transaction.amount is None:
            logger.warning(f"Deposit tx {transaction.transaction_id}: missing amount")
            return ProcessingResult.REJECTED

        if transaction.amount < 0:
            logger.warning(f"Deposit tx {transaction.transaction_id}: negative amount {transaction.amount} for client {transaction.client_id}")
            return ProcessingResult.REJECTED

        self._state.store_transaction(transaction)

        account = self._state.get_account(transaction.client_id)
        if account is None:
            account = self._state.create_account(transaction.client_id)
        account.credit(transaction.amount)
        return ProcessingResult.APPLIED

    def _handle_withdrawal(self, transaction: Transaction) -> ProcessingResult:
        if transaction.amount is None:
            logger.warning(f"Withdrawal tx {transaction.transaction_id}: missing amount")
            return ProcessingResult.REJECTED

        if transaction.amount < 0:
            logger.warning(f"Withdrawal tx {transaction.transaction_id}: negative amount {transaction.amount} for client {transaction.client_id}")
            return ProcessingResult.REJECTED

        # Recorded even when the funds check fails below
        self._state.store_transaction(transaction)

        account = self._state.get_account(transaction.client_id)
        if account is None:
            return ProcessingResult.IGNORED

        if account.available < transaction.amount:
            logger.warning(
                f"Withdrawal of {transaction.amount} from client {transaction.client_id} "
                f"is impossible due to insufficient available funds ({account.available})"
            )
            return ProcessingResult.REJECTED

        account.debit(transaction.amount)
        return ProcessingResult.APPLIED

    def _handle_dispute(self, transaction: Transaction) -> ProcessingResult:
        original = self._find_original(transaction, "dispute")
        if original is None:
            return ProcessingResult.REJECTED

        account = self._state.get_account(transaction.client_id)
        if original.client_id != transaction.client_id or account is None:
            return ProcessingResult.IGNORED

        # The flag is set even if the funds cannot be held
        original.disputed = True

        if account.available > original.amount:
            account.hold(original.amount)
            return ProcessingResult.APPLIED

        logger.warning(
            f"Dispute of {original.amount} for client {transaction.client_id} "
            f"is impossible due to insufficient available funds ({account.available})"
        )
        return ProcessingResult.REJECTED

    def _handle_resolve(self, transaction: Transaction) -> ProcessingResult:
        original = self._find_original(transaction, "resolve")
        if original is None:
            return ProcessingResult.REJECTED

        account = self._state.get_account(transaction.client_id)
        if original.client_id != transaction.client_id or account is None:
            return ProcessingResult.IGNORED

        if original.disputed and account.held >= original.amount:
            account.release_hold(original.amount)
            result = ProcessingResult.APPLIED
        else:
            logger.warning(
                f"Resolve of {original.amount} for client {transaction.client_id} "
                f"is impossible due to insufficient held funds ({account.held}) or not disputed"
            )
            result = ProcessingResult.REJECTED

        original.disputed = False
        return result

    def _handle_chargeback(self, transaction: Transaction) -> ProcessingResult:
        original = self._find_original(transaction, "chargeback")
        if original is None:
            return ProcessingResult.REJECTED

        account = self._state.get_account(transaction.client_id)
        if original.client_id != transaction.client_id or account is None:
            return ProcessingResult.IGNORED

        if original.disputed and account.held >= original.amount:
            account.remove_held(original.amount)
            account.locked = True
            result = ProcessingResult.APPLIED
        else:
            logger.warning(
                f"Chargeback of {original.amount} for client {transaction.client_id} "
                f"is impossible due to insufficient held funds ({account.held}) or not disputed"
            )
            result = ProcessingResult.REJECTED

        original.disputed = False
        return result

    def _find_original(self, transaction: Transaction, action: str) -> Optional[Transaction]:
        original = self._state.get_transaction(transaction.transaction_id)
        if original is None:
            logger.warning(f"Can't find transaction id {transaction.transaction_id} to {action}")
        return original
