import logging
from decimal import Decimal, Overflow, localcontext
from typing import Optional, Tuple, Union, assert_never

from models import Transaction, TransactionType, TransactionError
from state_manager import Bank

logger = logging.getLogger(__name__)


def checked_add(balance: Decimal, amount: Decimal) -> Optional[Decimal]:
    """
    Add amount to balance, or return None if the result overflows the
    exponent range of the current decimal context. Rounding is allowed.
    """
    with localcontext() as ctx:
        ctx.traps[Overflow] = True
        try:
            return balance + amount
        except Overflow:
            return None


class TransactionProcessor:
    """
    Applies transactions to the accounts held by a Bank.
    Returns None on success, or the TransactionError that rejected the transaction.
    A rejected transaction leaves the bank untouched.

    The processor never writes to the ledger: the caller commits deposits and
    withdrawals once they succeed.
    """

    def __init__(self, bank: Bank):
        self._bank = bank

    def process_transaction(self, transaction: Transaction) -> Optional[TransactionError]:
        match transaction.transaction_type:
            case TransactionType.DEPOSIT:
                error = self._handle_deposit(transaction)
            case TransactionType.WITHDRAWAL:
                error = self._handle_withdrawal(transaction)
            case TransactionType.DISPUTE:
                error = self._handle_dispute(transaction)
            case TransactionType.RESOLVE:
                error = self._handle_resolve(transaction)
            case TransactionType.CHARGEBACK:
                error = self._handle_chargeback(transaction)
            case _:
                assert_never(transaction.transaction_type)

        if error is not None:
            logger.info(f"{transaction.transaction_type.value.capitalize()} tx {transaction.transaction_id}: {error}")
        return error

    def _handle_deposit(self, transaction: Transaction) -> Optional[TransactionError]:
        if transaction.amount is None:
            return TransactionError.INVALID_TRANSACTION

        account = self._bank.accounts.get_or_create(transaction.client_id)
        if account.locked:
            return TransactionError.ACCOUNT_FROZEN

        if checked_add(account.available, transaction.amount) is None:
            return TransactionError.LIMIT_EXCEEDED

        account.credit(transaction.amount)
        return None

    def _handle_withdrawal(self, transaction: Transaction) -> Optional[TransactionError]:
        if transaction.amount is None:
            return TransactionError.INVALID_TRANSACTION

        account = self._bank.accounts.get_or_create(transaction.client_id)
        if account.locked:
            return TransactionError.ACCOUNT_FROZEN

        # Strictly greater: withdrawing the whole available balance is refused.
        if not account.available > transaction.amount:
            return TransactionError.INSUFFICIENT_FUNDS

        account.debit(transaction.amount)
        return None

    def _handle_dispute(self, transaction: Transaction) -> Optional[TransactionError]:
        found = self._find_disputed_transaction(transaction)
        if isinstance(found, TransactionError):
            return found
        original, amount = found

        if original.disputed:
            return TransactionError.ALREADY_DISPUTED

        account = self._bank.accounts.get(transaction.client_id)
        if account is None:
            return TransactionError.ACCOUNT_NOT_FOUND
        if account.locked:
            return TransactionError.ACCOUNT_FROZEN

        account.hold(amount)
        original.disputed = True
        return None

    def _handle_resolve(self, transaction: Transaction) -> Optional[TransactionError]:
        found = self._find_disputed_transaction(transaction)
        if isinstance(found, TransactionError):
            return found
        original, amount = found

        if not original.disputed:
            return TransactionError.NOT_DISPUTED
        if original.resolved:
            return TransactionError.ALREADY_RESOLVED

        account = self._bank.accounts.get(transaction.client_id)
        if account is None:
            return TransactionError.ACCOUNT_NOT_FOUND
        if account.locked:
            return TransactionError.ACCOUNT_FROZEN

        account.release_hold(amount)
        original.resolved = True
        return None

    def _handle_chargeback(self, transaction: Transaction) -> Optional[TransactionError]:
        found = self._find_disputed_transaction(transaction)
        if isinstance(found, TransactionError):
            return found
        original, amount = found

        if not original.disputed:
            return TransactionError.NOT_DISPUTED
        if original.resolved:
            return TransactionError.ALREADY_RESOLVED

        account = self._bank.accounts.get(transaction.client_id)
        if account is None:
            return TransactionError.ACCOUNT_NOT_FOUND

        account.remove_held(amount)
        account.lock()
        # The record goes back to undisputed; the lock is what blocks a second dispute.
        original.disputed = False
        return None

    def _find_disputed_transaction(
        self, transaction: Transaction
    ) -> Union[Tuple[Transaction, Decimal], TransactionError]:
        """Look up the ledger entry a dispute, resolve or chargeback refers to."""
        original = self._bank.ledger.lookup(transaction.transaction_id)

        if original is None:
            return TransactionError.TRANSACTION_NOT_FOUND

        if original.client_id != transaction.client_id:
            logger.warning(f"{transaction.transaction_type.value.capitalize()} for tx {transaction.transaction_id}: client mismatch (expected {original.client_id}, got {transaction.client_id})")
            return TransactionError.FOREIGN_CLIENT

        if original.amount is None:
            return TransactionError.INVALID_TRANSACTION

        return original, original.amount
