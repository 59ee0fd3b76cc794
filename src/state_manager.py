from typing import Dict, Optional

from models import Transaction, ClientAccount


class Ledger:
    """
    Deposits and withdrawals keyed by transaction id.
    Kept for the lifetime of a run so later disputes can find them.
    """

    def __init__(self):
        self._transactions: Dict[int, Transaction] = {}

    def insert(self, transaction: Transaction) -> None:
        """Store a transaction, replacing any earlier one with the same id."""
        self._transactions[transaction.transaction_id] = transaction

    def lookup(self, transaction_id: int) -> Optional[Transaction]:
        """Return the stored transaction itself so callers can update its dispute flags."""
        return self._transactions.get(transaction_id)

    def __contains__(self, transaction_id: int) -> bool:
        return transaction_id in self._transactions

    def __len__(self) -> int:
        return len(self._transactions)


class AccountStore:
    """Client accounts keyed by client id, created on first reference."""

    def __init__(self):
        self._accounts: Dict[int, ClientAccount] = {}

    def get_or_create(self, client_id: int) -> ClientAccount:
        """Get existing account or create new one."""
        if client_id not in self._accounts:
            self._accounts[client_id] = ClientAccount(client_id=client_id)
        return self._accounts[client_id]

    def get(self, client_id: int) -> Optional[ClientAccount]:
        return self._accounts.get(client_id)

    def snapshot(self) -> Dict[int, ClientAccount]:
        """Return all accounts (for final output)."""
        return dict(self._accounts)

    def __len__(self) -> int:
        return len(self._accounts)


class Bank:
    """
    Processing context owning the ledger and the accounts.
    Handed explicitly to the TransactionProcessor; nothing else keeps references into it.
    """

    def __init__(self):
        self.ledger = Ledger()
        self.accounts = AccountStore()

    def record(self, transaction: Transaction) -> None:
        """Commit a successfully applied deposit or withdrawal to the ledger."""
        self.ledger.insert(transaction)
