"""CLI entry point for taxmove."""

from __future__ import annotations

import argparse
import logging
import sys

from .brackets import BracketError
from .estimate import ANALYSIS_MODES, DEFAULT_ANALYSIS_MODE, Citizen, EstimateError, EstimateResult, UnsupportedAnalysisError
from .location import JurisdictionRegistry, Location, LocationError
from .log import setup_logging
from .money import MoneyError, format_amount, parse_amount, split_amount
from .schema import JurisdictionTables, SchemaError, load_tables
from .tax import normalize_filing_status
from .tax_data import BASE_TAX_YEAR, FILING_STATUSES

logger = logging.getLogger("taxmove.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="taxmove",
        description=f"Estimate the income needed at another location to keep the same position after {BASE_TAX_YEAR} taxes",
    )
    parser.add_argument("source", help="Current location as COUNTRY///STATE///CITY, e.g. 'USA///CA///San Francisco'")
    parser.add_argument("target", help="Target location as COUNTRY///STATE///CITY")
    parser.add_argument("income", help="Gross income at the current location, e.g. '$120,000'")
    parser.add_argument("status", help=f"Filing status: {', '.join(FILING_STATUSES)}")
    parser.add_argument(
        "--usage",
        choices=ANALYSIS_MODES,
        default=DEFAULT_ANALYSIS_MODE,
        help=f"Analysis mode (default: {DEFAULT_ANALYSIS_MODE})",
    )
    parser.add_argument("--expenses", default="0", help="Fixed yearly expenses that do not depend on location (disposable mode)")
    parser.add_argument("--tables", help="JSON file with extra or overriding jurisdiction tables")
    parser.add_argument("--show-taxes", action="store_true", help="Also print taxes paid at both locations")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log engine details to stderr")
    parser.add_argument("--log-file", help="Also write logs to this file")
    return parser


def _print_result(result: EstimateResult, source: Location, target: Location, show_taxes: bool) -> None:
    equivalent = result.equivalent_income
    dollars, cents, remainder = split_amount(equivalent)
    print("Estimated equivalent income at new location:")
    print(f"    raw output: {equivalent}")
    print(f"    total: {dollars}.{cents:02d}")
    print(f"    rem fraction of a cent: {remainder}")
    if show_taxes:
        print(f"Mode: {result.mode}")
        print(f"Taxes at {source}: {format_amount(result.home_taxes)}")
        print(f"Taxes at {target}: {format_amount(result.target_taxes)}")


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, log_file=args.log_file)
    logger.info("Attempting to process arguments: %s", vars(args))

    try:
        tables = load_tables(args.tables) if args.tables else JurisdictionTables.default()
    except (SchemaError, OSError, ValueError) as exc:
        print(f"Failed to load tables: {exc}", file=sys.stderr)
        return 2

    registry = JurisdictionRegistry(tables)
    try:
        filing_status = normalize_filing_status(args.status)
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    try:
        source = registry.parse(args.source)
        target = registry.parse(args.target)
        income = parse_amount(args.income)
        expenses = parse_amount(args.expenses)
        citizen = Citizen(income=income, filing_status=filing_status, home=source)
        result = citizen.estimate(target, registry, mode=args.usage, fixed_expenses=expenses)
    except UnsupportedAnalysisError as exc:
        print(f"Not supported: {exc}", file=sys.stderr)
        return 3
    except BracketError as exc:
        print(f"Invalid tax tables: {exc}", file=sys.stderr)
        return 2
    except (LocationError, MoneyError, EstimateError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return 2

    _print_result(result, source, target, args.show_taxes)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
