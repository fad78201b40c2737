"""
Command-line interface for FinForecast.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from finforecast import Scenario, load_catalog
from finforecast.core.catalog_loader import CatalogError
from finforecast.core.errors import ConfigError
from finforecast.core.simulator import DEFAULT_SIMULATION_MONTHS
from finforecast.core.utils import index_to_year_month

EXAMPLE_CATALOG = {
    "version": 1,
    "name": "CLI Demo Household",
    "groups": [
        {"id": "alex", "name": "Alex"},
        {"id": "sam", "name": "Sam"},
    ],
    "assets": [
        {
            "id": "checking",
            "name": "Checking Account",
            "base_amount": 5000.0,
            "overdraft_policy": "warn",
        },
        {
            "id": "index_fund",
            "name": "Index Fund",
            "base_amount": 20000.0,
            "return_rate": 0.05,
            "group_id": "alex",
            "contributions": [
                {"id": "monthly_savings", "type": "monthly", "amount": 500.0}
            ],
        },
    ],
    "incomes": [
        {
            "id": "salary_alex",
            "name": "Salary Alex",
            "asset_source_id": "checking",
            "group_id": "alex",
            "cycles": [{"id": "pay", "type": "monthly", "amount": 3200.0}],
        },
        {
            "id": "salary_sam",
            "name": "Salary Sam",
            "asset_source_id": "checking",
            "group_id": "sam",
            "cycles": [
                {"id": "pay", "type": "monthly", "amount": 2800.0},
                {"id": "bonus", "type": "yearly", "amount": 2000.0, "start_month_index": 11},
            ],
        },
    ],
    "expenses": [
        {
            "id": "rent",
            "name": "Rent",
            "asset_source_id": "checking",
            "cycles": [{"id": "rent", "type": "monthly", "amount": 1600.0}],
        },
        {
            "id": "car_service",
            "name": "Car Service",
            "asset_source_id": "checking",
            "cycles": [
                {
                    "id": "service",
                    "type": "custom",
                    "amount": 450.0,
                    "interval": 6,
                    "interval_unit": "month",
                }
            ],
        },
    ],
    "liabilities": [
        {
            "id": "car_loan",
            "name": "Car Loan",
            "total_amount": 12000.0,
            "principal": 11000.0,
            "asset_source_id": "checking",
            "cycles": [
                {"id": "installment", "type": "monthly", "amount": 400.0, "end_month_index": 29}
            ],
        }
    ],
    "simulation": {"months": 120},
}


def _save_json(path: str, data: dict) -> None:
    """Save data as JSON to file path."""
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def _print_run_summary(result, months: int) -> None:
    """Print current cash flow and final balances to stdout."""
    current = result.current_monthly_cash_flow
    print(f"Simulated {months} months")
    print(
        f"Current month: income {current.income:,.2f}, "
        f"expense {current.expense:,.2f}, net {current.net:,.2f}"
    )
    if not result.has_data:
        print("No cash flow or balances to project")
        return

    final = result.monthly_data[-1]
    year, month = index_to_year_month(final.month_index)
    print(f"Balances at month {final.month_index} (year {year}, month {month}):")
    for entity_type, bucket in final.balances.items():
        for source_id, balance in bucket.items():
            print(f"  {entity_type}:{source_id}: {balance:,.2f}")


def cmd_example(_) -> int:
    """Print a minimal working scenario catalog (JSON)."""
    json.dump(EXAMPLE_CATALOG, sys.stdout, indent=2)
    sys.stdout.write("\n")
    return 0


def cmd_run(args) -> int:
    """Run a scenario catalog and optionally export the results."""
    try:
        catalog = load_catalog(args.input)
        scenario = Scenario.from_catalog(catalog)

        months = args.months
        if months is None:
            months = catalog.simulation_months or DEFAULT_SIMULATION_MONTHS
        result = scenario.run(simulation_months=months, active_group_ids=args.groups)
        _print_run_summary(result, months)

        if args.output:
            if args.csv:
                result.to_frame().to_csv(args.output)
            else:
                _save_json(args.output, result.to_dict())
            print(f"Results saved to {args.output}")
        return 0

    except (CatalogError, ConfigError, OSError) as e:
        print(f"Error running scenario: {e}", file=sys.stderr)
        return 1


def cmd_validate(args) -> int:
    """Validate a scenario catalog."""
    try:
        catalog = load_catalog(args.input)
    except (CatalogError, OSError) as e:
        print(f"Validation failed: {e}", file=sys.stderr)
        return 1

    months = catalog.simulation_months or DEFAULT_SIMULATION_MONTHS
    problems = Scenario.from_catalog(catalog).validate(simulation_months=months)
    if problems:
        print(f"Validation failed with {len(problems)} problem(s):")
        for problem in problems:
            print(f"  - {problem}")
        return 1

    print(f"{catalog.source}: OK ({catalog.record_count()} records)")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="finforecast", description="FinForecast - Household cash-flow projection"
    )

    parser.add_argument("--version", action="version", version="FinForecast 0.1.0")
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(
        dest="cmd", required=True, help="Available commands"
    )

    # Example command
    example_parser = subparsers.add_parser(
        "example", help="Print a minimal working scenario catalog"
    )
    example_parser.set_defaults(func=cmd_example)

    # Run command
    run_parser = subparsers.add_parser(
        "run", help="Run a scenario catalog (YAML or JSON)"
    )
    run_parser.add_argument(
        "-i", "--input", required=True, help="Input scenario catalog file"
    )
    run_parser.add_argument("-o", "--output", help="Output results file")
    run_parser.add_argument(
        "--months",
        type=int,
        default=None,
        help=f"Number of months to simulate (default: catalog value or {DEFAULT_SIMULATION_MONTHS})",
    )
    run_parser.add_argument(
        "--groups", nargs="*", help="Only include records of these groups"
    )
    run_parser.add_argument(
        "--csv", action="store_true", help="Write the monthly table as CSV"
    )
    run_parser.set_defaults(func=cmd_run)

    # Validate command
    validate_parser = subparsers.add_parser(
        "validate", help="Validate a scenario catalog"
    )
    validate_parser.add_argument(
        "-i", "--input", required=True, help="Input scenario catalog file"
    )
    validate_parser.set_defaults(func=cmd_validate)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s"
        )
    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
