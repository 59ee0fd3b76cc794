import csv
import logging
from decimal import Decimal, InvalidOperation
from typing import Dict, Iterable, Iterator, Mapping, Optional

from config import Settings, get_settings
from models import (
    Transaction,
    TransactionType,
    TransactionError,
    TransactionFormatError,
    ClientAccount,
    ProcessingStats,
)
from state_manager import Bank
from transaction_processor import TransactionProcessor

logger = logging.getLogger(__name__)


def _parse_unsigned(name: str, value: str, maximum: int) -> int:
    try:
        number = int(value)
    except ValueError:
        raise TransactionFormatError(f"{name} is not an integer: {value!r}") from None
    if number < 0 or number > maximum:
        raise TransactionFormatError(f"{name} out of range 0..{maximum}: {number}")
    return number


def _parse_amount(value: str) -> Decimal:
    try:
        amount = Decimal(value)
    except InvalidOperation:
        raise TransactionFormatError(f"amount is not a decimal: {value!r}") from None
    if not amount.is_finite() or amount <= 0:
        raise TransactionFormatError(f"amount must be a positive number: {value!r}")
    return amount


def parse_csv_row(row: Mapping[Optional[str], object], settings: Optional[Settings] = None) -> Transaction:
    """
    Parse CSV row into Transaction.
    Raises TransactionFormatError when the row is malformed.
    """
    settings = settings or get_settings()

    # Short rows leave trailing fields as None; extra fields land under a None key.
    normalized = {
        k.strip(): v.strip()
        for k, v in row.items()
        if isinstance(k, str) and isinstance(v, str)
    }

    for column in ("type", "client", "tx"):
        if not normalized.get(column):
            raise TransactionFormatError(f"missing {column}")

    type_str = normalized["type"].lower()
    try:
        transaction_type = TransactionType(type_str)
    except ValueError:
        raise TransactionFormatError(f"unknown transaction type: {type_str!r}") from None

    client_id = _parse_unsigned("client", normalized["client"], settings.max_client_id)
    transaction_id = _parse_unsigned("tx", normalized["tx"], settings.max_transaction_id)

    amount = None
    amount_str = normalized.get("amount", "")
    if transaction_type.is_monetary:
        if not amount_str:
            raise TransactionFormatError("Amount is missing")
        amount = _parse_amount(amount_str)
    elif amount_str:
        logger.debug(f"Ignoring amount {amount_str!r} on {type_str} tx {transaction_id}")

    return Transaction(
        transaction_type=transaction_type,
        client_id=client_id,
        transaction_id=transaction_id,
        amount=amount,
    )


class PaymentsEngine:
    """
    Feeds transactions to the processor one at a time, in input order.
    Owns the Bank and commits successful deposits and withdrawals to its ledger.
    """

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings or get_settings()
        self.bank = Bank()
        self.stats = ProcessingStats()
        self._processor = TransactionProcessor(self.bank)

    def process_file(self, filepath: str) -> Dict[int, ClientAccount]:
        """Process CSV file and return final account states."""
        logger.info(f"Processing {filepath}")
        # Undecodable bytes become U+FFFD and fail parsing on their own row.
        with open(filepath, "r", newline="", encoding="utf-8", errors="replace") as f:
            return self.process_rows(self._read_csv_rows(csv.DictReader(f)))

    def _read_csv_rows(self, reader: csv.DictReader) -> Iterator[Dict[Optional[str], object]]:
        """Yield rows from the reader, skipping lines the csv module cannot split."""
        while True:
            try:
                row = next(reader)
            except StopIteration:
                return
            except csv.Error as e:
                logger.warning(f"Skipping unreadable line {reader.line_num}: {e}")
                self.stats.record_skipped()
                continue
            yield row

    def process_rows(self, rows: Iterable[Mapping[Optional[str], object]]) -> Dict[int, ClientAccount]:
        """Process already split CSV rows and return final account states."""
        for line_number, row in enumerate(rows, start=1):
            try:
                transaction = parse_csv_row(row, self._settings)
            except TransactionFormatError as e:
                logger.warning(f"Skipping row {line_number} {dict(row)}: {e}")
                self.stats.record_skipped()
                continue

            self.apply(transaction)

        logger.info(f"{self.stats}")
        return self.bank.accounts.snapshot()

    def apply(self, transaction: Transaction) -> Optional[TransactionError]:
        """Process one transaction, committing it to the ledger if it moved money."""
        error = self._processor.process_transaction(transaction)
        if error is not None:
            self.stats.record_failure()
            return error

        if transaction.transaction_type.is_monetary:
            self.bank.record(transaction)
        self.stats.record_success()
        return None
