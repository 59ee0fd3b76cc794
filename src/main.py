import sys
import logging

from pydantic import ValidationError

from config import get_settings
from payments_engine import PaymentsEngine
from report import write_report


def main():
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        sys.exit(1)

    logging.basicConfig(
        level=settings.log_level,
        format=settings.log_format,
        stream=sys.stderr,
    )

    if len(sys.argv) != 2:
        print("Usage: payments-engine <input.csv>", file=sys.stderr)
        sys.exit(1)

    filepath = sys.argv[1]
    engine = PaymentsEngine(settings)
    try:
        accounts = engine.process_file(filepath)
    except OSError as e:
        print(f"Cannot read {filepath}: {e}", file=sys.stderr)
        sys.exit(1)

    write_report(accounts, sys.stdout, settings.report_decimal_places)


if __name__ == "__main__":
    main()
