import sys
import os
import io
from decimal import Decimal

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))

from models import ClientAccount
from report import HEADER, account_rows, format_decimal, write_report


class TestFormatDecimal:
    def test_pads_to_four_places(self):
        assert format_decimal(Decimal("1.5")) == "1.5000"

    def test_rounds_extra_places(self):
        assert format_decimal(Decimal("0.123456")) == "0.1235"

    def test_custom_places(self):
        assert format_decimal(Decimal("2"), 2) == "2.00"

    def test_negative(self):
        assert format_decimal(Decimal("-30")) == "-30.0000"


class TestAccountRows:
    def test_rows(self):
        accounts = {
            2: ClientAccount(client_id=2, available=Decimal("2"), held=Decimal("0")),
            1: ClientAccount(client_id=1, available=Decimal("40"), held=Decimal("0"), locked=True),
        }

        rows = account_rows(accounts)

        assert set(rows) == {
            (1, "40.0000", "0.0000", "40.0000", "true"),
            (2, "2.0000", "0.0000", "2.0000", "false"),
        }

    def test_total_includes_held(self):
        accounts = {1: ClientAccount(client_id=1, available=Decimal("40"), held=Decimal("50"))}

        assert account_rows(accounts) == [(1, "40.0000", "50.0000", "90.0000", "false")]

    def test_does_not_mutate_accounts(self):
        account = ClientAccount(client_id=1, available=Decimal("1.23456"))
        account_rows({1: account})
        assert account.available == Decimal("1.23456")


class TestWriteReport:
    def test_output(self):
        accounts = {
            1: ClientAccount(client_id=1, available=Decimal("1.5")),
            2: ClientAccount(client_id=2, available=Decimal("2"), locked=True),
        }
        stream = io.StringIO()

        write_report(accounts, stream)

        lines = stream.getvalue().splitlines()
        assert lines[0] == HEADER == "client, available, held, total, locked"
        assert sorted(lines[1:]) == [
            "1,1.5000,0.0000,1.5000,false",
            "2,2.0000,0.0000,2.0000,true",
        ]

    def test_empty(self):
        stream = io.StringIO()
        write_report({}, stream)
        assert stream.getvalue() == HEADER + "\n"
