import csv
from decimal import Decimal
from typing import List, Mapping, TextIO, Tuple

from models import ClientAccount

HEADER = "client, available, held, total, locked"


def format_decimal(value: Decimal, decimal_places: int = 4) -> str:
    """Format decimal with a fixed number of fractional digits."""
    return f"{value:.{decimal_places}f}"


def account_rows(accounts: Mapping[int, ClientAccount], decimal_places: int = 4) -> List[Tuple[int, str, str, str, str]]:
    """One (client, available, held, total, locked) row per account, ordered by client id."""
    rows = []
    for client_id in sorted(accounts.keys()):
        account = accounts[client_id]
        rows.append((
            client_id,
            format_decimal(account.available, decimal_places),
            format_decimal(account.held, decimal_places),
            format_decimal(account.total, decimal_places),
            str(account.locked).lower(),
        ))
    return rows


def write_report(accounts: Mapping[int, ClientAccount], stream: TextIO, decimal_places: int = 4) -> None:
    stream.write(HEADER + "\n")
    writer = csv.writer(stream, lineterminator="\n")
    writer.writerows(account_rows(accounts, decimal_places))
