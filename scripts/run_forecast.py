#!/usr/bin/env python3
"""
Generate a revenue forecast from JSON snapshots of contracts and transactions.

Each input file holds a JSON array of rows shaped like the persisted
records (snake_case keys: ``amount``, ``billing_interval``,
``next_bill_date``, ``transaction_date``, ``raw_data`` ...).  The report
is printed to stdout as JSON.

Usage:
    python3 scripts/run_forecast.py --contracts contracts.json --transactions tx.json
    python3 scripts/run_forecast.py --contracts c.json --transactions t.json --preset next30days
    python3 scripts/run_forecast.py --contracts c.json --transactions t.json \\
        --start 2025-01-01 --end 2025-03-31 --today 2025-02-10

Exit codes:
    0  report printed
    1  unreadable input or invalid range / date / settings
"""

import argparse
import json
import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from forecast_config import get_active_config
from forecast_kernel.domain.clock import DeterministicClock, SystemClock
from forecast_kernel.domain.date_range import RangeSpec
from forecast_kernel.domain.dates import parse_utc
from forecast_kernel.domain.records import contract_from_row, transaction_from_row
from forecast_kernel.exceptions import ForecastKernelError
from forecast_kernel.logging_config import configure_logging, get_logger
from forecast_services import ForecastService

logger = get_logger("scripts.run_forecast")


def _load_rows(path: Path) -> list[dict]:
    with open(path) as f:
        rows = json.load(f)
    if not isinstance(rows, list):
        raise ValueError(f"{path}: expected a JSON array of rows")
    return rows


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Generate a revenue forecast from JSON snapshots.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "examples:\n"
            "  python3 scripts/run_forecast.py --contracts c.json --transactions t.json\n"
            "  python3 scripts/run_forecast.py --contracts c.json --transactions t.json "
            "--preset nextMonth\n"
        ),
    )
    parser.add_argument(
        "--contracts", type=Path, required=True,
        help="JSON array of contract rows",
    )
    parser.add_argument(
        "--transactions", type=Path, required=True,
        help="JSON array of transaction rows",
    )
    parser.add_argument(
        "--preset", type=str, default=None,
        help="Range preset (thisMonth, nextMonth, next7days, next30days, next90days)",
    )
    parser.add_argument("--start", type=str, default=None, help="Explicit start date")
    parser.add_argument("--end", type=str, default=None, help="Explicit end date")
    parser.add_argument(
        "--today", type=str, default=None,
        help="Pin 'today' (YYYY-MM-DD) instead of reading the system clock",
    )
    parser.add_argument(
        "--config", type=Path, default=None,
        help="Settings YAML (default: forecast_config/defaults.yaml)",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Emit debug-level structured logs to stderr (default: warnings only)",
    )

    args = parser.parse_args(argv)

    configure_logging(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        stream=sys.stderr,
    )

    preset = args.preset
    if preset is None and args.start is None and args.end is None:
        preset = "thisMonth"

    try:
        config = get_active_config(args.config)
        clock = (
            DeterministicClock.on(parse_utc(args.today))
            if args.today else SystemClock()
        )
        contracts = [contract_from_row(r) for r in _load_rows(args.contracts)]
        transactions = [transaction_from_row(r) for r in _load_rows(args.transactions)]
        report = ForecastService(clock=clock, config=config).generate(
            contracts,
            transactions,
            RangeSpec(preset=preset, start_date=args.start, end_date=args.end),
        )
    except ForecastKernelError as exc:
        logger.error("forecast_failed", exc_info=True)
        print(f"  ERROR [{exc.code}]: {exc}", file=sys.stderr)
        return 1
    except (OSError, ValueError, KeyError) as exc:
        logger.error("forecast_input_unreadable", exc_info=True)
        print(f"  ERROR: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(report.to_dict(), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
