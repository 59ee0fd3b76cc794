from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    DISPUTE = "dispute"
    RESOLVE = "resolve"
    CHARGEBACK = "chargeback"

    @property
    def is_monetary(self) -> bool:
        """Deposits and withdrawals move money and are kept in the ledger."""
        return self in (TransactionType.DEPOSIT, TransactionType.WITHDRAWAL)


class TransactionError(Enum):
    """Reasons a well-formed transaction can be rejected by the processor."""

    ACCOUNT_FROZEN = "Account frozen"
    LIMIT_EXCEEDED = "Upper balance limit reached"
    INSUFFICIENT_FUNDS = "Insufficient funds"
    ALREADY_DISPUTED = "Transaction is already disputed"
    NOT_DISPUTED = "Transaction is not disputed"
    ALREADY_RESOLVED = "Transaction already resolved"
    TRANSACTION_NOT_FOUND = "Transaction not found"
    FOREIGN_CLIENT = "Dispute transaction of another client"
    INVALID_TRANSACTION = "Invalid transaction"
    ACCOUNT_NOT_FOUND = "Client not found"

    def __str__(self) -> str:
        return self.value


class TransactionFormatError(ValueError):
    """Raised when an input row cannot be turned into a Transaction."""


@dataclass
class Transaction:
    transaction_type: TransactionType
    client_id: int
    transaction_id: int
    amount: Optional[Decimal] = None
    disputed: bool = False
    resolved: bool = False

    def __repr__(self) -> str:
        return f"Transaction({self.transaction_type.value}, client={self.client_id}, tx={self.transaction_id}, amount={self.amount})"


@dataclass
class ClientAccount:
    client_id: int
    available: Decimal = Decimal("0")
    held: Decimal = Decimal("0")
    locked: bool = False

    @property
    def total(self) -> Decimal:
        return self.available + self.held

    def credit(self, amount: Decimal) -> None:
        self.available += amount

    def debit(self, amount: Decimal) -> None:
        self.available -= amount

    def hold(self, amount: Decimal) -> None:
        # Disputed funds are added to held without leaving available.
        self.held += amount

    def release_hold(self, amount: Decimal) -> None:
        self.held -= amount
        self.available += amount

    def remove_held(self, amount: Decimal) -> None:
        self.held -= amount

    def lock(self) -> None:
        self.locked = True


class ProcessingStats:
    """Counters for one engine run."""

    def __init__(self):
        self.processed = 0
        self.failed = 0
        self.skipped = 0

    def record_success(self):
        self.processed += 1

    def record_failure(self):
        self.failed += 1

    def record_skipped(self):
        self.skipped += 1

    def __repr__(self) -> str:
        return f"Processed: {self.processed}, Failed: {self.failed}, Skipped: {self.skipped}"
