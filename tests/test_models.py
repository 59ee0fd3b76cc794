import sys
import os
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import Transaction, TransactionType, TransactionError, ClientAccount, ProcessingStats


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
        assert transaction.resolved is False

    def test_create_dispute_no_amount(self):
        transaction = Transaction(
            transaction_type=TransactionType.DISPUTE,
            client_id=1,
            transaction_id=1,
        )
        assert transaction.amount is None


class TestTransactionType:
    def test_monetary_kinds(self):
        assert TransactionType.DEPOSIT.is_monetary
        assert TransactionType.WITHDRAWAL.is_monetary

    def test_dispute_family_is_not_monetary(self):
        assert not TransactionType.DISPUTE.is_monetary
        assert not TransactionType.RESOLVE.is_monetary
        assert not TransactionType.CHARGEBACK.is_monetary


class TestClientAccount:
    def test_default_values(self):
        account = ClientAccount(client_id=1)
        assert account.available == Decimal("0")
        assert account.held == Decimal("0")
        assert account.locked is False

    def test_total_property(self):
        account = ClientAccount(
            client_id=1,
            available=Decimal("100"),
            held=Decimal("50"),
        )
        assert account.total == Decimal("150")

    def test_hold_keeps_available(self):
        account = ClientAccount(client_id=1, available=Decimal("40"))
        account.hold(Decimal("50"))
        assert account.available == Decimal("40")
        assert account.held == Decimal("50")

    def test_release_hold(self):
        account = ClientAccount(client_id=1, available=Decimal("40"), held=Decimal("50"))
        account.release_hold(Decimal("50"))
        assert account.available == Decimal("90")
        assert account.held == Decimal("0")

    def test_lock(self):
        account = ClientAccount(client_id=1)
        account.lock()
        assert account.locked is True


class TestTransactionError:
    def test_reasons_are_readable(self):
        assert str(TransactionError.ACCOUNT_FROZEN) == "Account frozen"
        assert str(TransactionError.INSUFFICIENT_FUNDS) == "Insufficient funds"
        assert str(TransactionError.FOREIGN_CLIENT) == "Dispute transaction of another client"


class TestProcessingStats:
    def test_counters(self):
        stats = ProcessingStats()
        stats.record_success()
        stats.record_success()
        stats.record_failure()
        stats.record_skipped()
        assert (stats.processed, stats.failed, stats.skipped) == (2, 1, 1)
        assert repr(stats) == "Processed: 2, Failed: 1, Skipped: 1"
