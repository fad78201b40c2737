#!/usr/bin/env python3
"""
Household Projection Example

This example walks through the FinForecast building blocks:
- Cycles: monthly, yearly and custom recurrence rules
- Records: assets, incomes, expenses and liabilities
- Scenario: assembling records and running the projection
- Results: month-by-month breakdowns and a pandas view of balances
- Catalogs: loading the same kind of household from YAML
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from finforecast import Cycle, Group, Scenario, load_catalog
from finforecast.plugins import (
    AssetRecord,
    ExpenseRecord,
    IncomeRecord,
    LiabilityRecord,
)


def create_household_scenario() -> Scenario:
    """Create a two-person household built in code."""
    print("=== Household built in code ===")

    checking = AssetRecord(id="checking", name="Checking Account", base_amount=4000.0)
    etf = AssetRecord(
        id="etf",
        name="World ETF",
        base_amount=15000.0,
        return_rate=0.05,  # 5% p.a., compounded monthly
        group_id="alex",
        contributions=[Cycle(id="plan", type="monthly", amount=400.0)],
    )

    salary = IncomeRecord(
        id="salary",
        name="Salary",
        asset_source_id="checking",
        group_id="alex",
        cycles=[
            Cycle(id="pay", type="monthly", amount=3400.0),
            Cycle(id="bonus", type="yearly", amount=2500.0, start_month_index=11),
        ],
    )

    rent = ExpenseRecord(
        id="rent",
        name="Rent",
        asset_source_id="checking",
        cycles=[Cycle(id="rent", type="monthly", amount=1750.0)],
    )
    insurance = ExpenseRecord(
        id="insurance",
        name="Car Insurance",
        asset_source_id="checking",
        cycles=[
            Cycle(id="premium", type="custom", amount=540.0, interval=1, interval_unit="year")
        ],
    )

    loan = LiabilityRecord(
        id="student_loan",
        name="Student Loan",
        principal=9000.0,
        total_amount=9600.0,
        asset_source_id="checking",
        group_id="sam",
        cycles=[Cycle(id="installment", type="monthly", amount=200.0)],
    )

    return Scenario(
        name="Two-person household",
        groups=[Group(id="alex", name="Alex"), Group(id="sam", name="Sam")],
        records={
            "asset": [checking, etf],
            "income": [salary],
            "expense": [rent, insurance],
            "liability": [loan],
        },
    )


def print_summary(scenario: Scenario, months: int) -> None:
    result = scenario.run(simulation_months=months)

    current = result.current_monthly_cash_flow
    print(f"Current month: income {current.income:,.2f}, expense {current.expense:,.2f}")

    df = result.to_frame()
    yearly = df.iloc[11::12]
    balance_columns = [c for c in df.columns if c.startswith("balance:")]
    print(yearly[["income", "expense", "net"] + balance_columns].head(5).round(2))

    paid_off = df.index[df["balance:liability:student_loan"] == 0]
    if len(paid_off):
        print(f"Student loan repaid in month {paid_off[0]}")
    print()


def run_catalog_example() -> None:
    """Load the starter catalog shipped next to this example."""
    print("=== Household loaded from catalog ===")

    catalog = load_catalog(Path(__file__).parent / "catalogs" / "starter.yaml")
    scenario = Scenario.from_catalog(catalog)

    problems = scenario.validate()
    if problems:
        print("Problems:", *problems, sep="\n  ")
        return

    print_summary(scenario, catalog.simulation_months or 120)


def main():
    """Run all examples."""
    print("FinForecast Household Projection Examples")
    print("=" * 50)
    print()

    print_summary(create_household_scenario(), months=120)
    run_catalog_example()


if __name__ == "__main__":
    main()
