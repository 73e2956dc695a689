import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import Transaction, TransactionType, ClientAccount, ProcessingResult, ProcessingStats


class TestTransaction:
    def test_create_deposit(self):
        transaction = Transaction(
            transaction_type=TransactionType.DEPOSIT,
            client_id=1,
            transaction_id=1,
            amount=Decimal("100.0"),
        )
        assert transaction.transaction_type == TransactionType.DEPOSIT
        assert transaction.client_id == 1
        assert transaction.transaction_id == 1
        assert transaction.amount == Decimal("100.0")
        assert transaction.disputed is False

    def test_create_dispute_no_amount(self):
        transaction = Transaction(
            transaction_type=TransactionType.DISPUTE,
            client_id=1,
            transaction_id=1,
        )
        assert transaction.amount is None

    def test_type_from_csv_value(self):
        assert TransactionType("chargeback") == TransactionType.CHARGEBACK


class TestClientAccount:
    def test_default_values(self):
        account = ClientAccount(client_id=1)
        assert account.available == Decimal("0")
        assert account.held == Decimal("0")
        assert account.total == Decimal("0")
        assert account.locked is False

    def test_total_property(self):
        account = ClientAccount(
            client_id=1,
            available=Decimal("100"),
            held=Decimal("50"),
        )
        assert account.total == Decimal("150")

    def test_hold_and_release_keep_total(self):
        account = ClientAccount(client_id=1, available=Decimal("10"))
        account.hold(Decimal("4"))
        assert account.available == Decimal("6")
        assert account.held == Decimal("4")
        assert account.total == Decimal("10")

        account.release_hold(Decimal("4"))
        assert account.available == Decimal("10")
        assert account.held == Decimal("0")

    def test_remove_held_reduces_total(self):
        account = ClientAccount(client_id=1, available=Decimal("10"), held=Decimal("4"))
        account.remove_held(Decimal("4"))
        assert account.held == Decimal("0")
        assert account.total == Decimal("10")


class TestProcessingStats:
    def test_record(self):
        stats = ProcessingStats()
        stats.record(ProcessingResult.APPLIED)
        stats.record(ProcessingResult.APPLIED)
        stats.record(ProcessingResult.REJECTED)
        stats.record(ProcessingResult.IGNORED)

        assert stats.applied == 2
        assert stats.rejected == 1
        assert stats.ignored == 1
        assert stats.processed == 4
