from typing import Dict, Optional

from models import Transaction, ClientAccount


class LedgerState:
    """
    Account and transaction history storage for a single ledger.
    Accounts are kept in creation order; history only holds deposits and withdrawals.
    """

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}
        self._transactions: Dict[int, Transaction] = {}

    def get_account(self, client_id: int) -> Optional[ClientAccount]:
        """Return the live account for a client, or None if it was never created."""
        return self._accounts.get(client_id)

    def create_account(self, client_id: int) -> ClientAccount:
        """Create an empty account. Existing accounts are returned untouched."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def store_transaction(self, transaction: Transaction) -> None:
        """Store transaction for future dispute lookups, replacing any entry with the same id."""
        self._transactions[transaction.transaction_id] = transaction

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Retrieve stored transaction by ID."""
        return self._transactions.get(transaction_id)

    def get_all_accounts(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)
