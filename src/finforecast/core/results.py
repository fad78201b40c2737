"""
Simulation result containers and tabular views over them.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class MonthlySimulationData:
    """
    Snapshot of one simulated month.

    Attributes:
        month_index: Zero-based month index
        income_breakdown: Inflows for the month (source id or plugin label -> amount)
        expense_breakdown: Outflows for the month (source id or plugin label -> amount)
        balances: Balance store contents at month end (entity type -> source id -> balance)
    """

    month_index: int
    income_breakdown: dict[str, float] = field(default_factory=dict)
    expense_breakdown: dict[str, float] = field(default_factory=dict)
    balances: dict[str, dict[str, float]] = field(default_factory=dict)

    @property
    def total_income(self) -> float:
        return sum(self.income_breakdown.values())

    @property
    def total_expense(self) -> float:
        return sum(self.expense_breakdown.values())

    def balance_of(self, entity_type: str, source_id: str) -> float | None:
        return self.balances.get(entity_type, {}).get(source_id)


@dataclass(frozen=True)
class CurrentCashFlow:
    """Cash flow of the current month (month 0)."""

    income: float
    expense: float
    net: float


@dataclass(frozen=True)
class SimulationResult:
    """
    Output of one ``Simulator.simulate()`` call.

    Attributes:
        monthly_data: One snapshot per simulated month, in month order
        current_monthly_cash_flow: Cash flow of month 0
        has_data: True iff month 0 has nonzero cash flow or any balance exists

    **Example Usage:**
        ```python
        result = simulator.simulate()
        df = result.to_frame()
        df["balance:asset:savings"].iloc[-1]
        result.balance_series("asset", "savings")
        ```
    """

    monthly_data: list[MonthlySimulationData]
    current_monthly_cash_flow: CurrentCashFlow
    has_data: bool

    def balance_keys(self) -> list[tuple[str, str]]:
        """Every ``(entity type, source id)`` that held a balance in any month, in first-seen order."""
        seen: dict[tuple[str, str], None] = {}
        for month in self.monthly_data:
            for entity_type, bucket in month.balances.items():
                for source_id in bucket:
                    seen.setdefault((entity_type, source_id), None)
        return list(seen)

    def balance_series(self, entity_type: str, source_id: str) -> np.ndarray:
        """Month-end balance per month; NaN where the balance did not exist."""
        values = [month.balance_of(entity_type, source_id) for month in self.monthly_data]
        return np.array([np.nan if v is None else v for v in values], dtype=float)

    def to_frame(self) -> pd.DataFrame:
        """
        Monthly table of totals and balances.

        Returns:
            DataFrame indexed by ``month_index`` with ``income``, ``expense`` and
            ``net`` columns plus one ``balance:<type>:<id>`` column per balance
        """
        keys = self.balance_keys()
        rows = []
        for month in self.monthly_data:
            row = {
                "month_index": month.month_index,
                "income": month.total_income,
                "expense": month.total_expense,
            }
            row["net"] = row["income"] - row["expense"]
            for entity_type, source_id in keys:
                value = month.balance_of(entity_type, source_id)
                row[f"balance:{entity_type}:{source_id}"] = (
                    np.nan if value is None else value
                )
            rows.append(row)

        columns = ["month_index", "income", "expense", "net"] + [
            f"balance:{t}:{i}" for t, i in keys
        ]
        return pd.DataFrame(rows, columns=columns).set_index("month_index")

    def to_dict(self) -> dict:
        """Plain-Python representation suitable for JSON export."""
        return {
            "has_data": self.has_data,
            "current_monthly_cash_flow": {
                "income": self.current_monthly_cash_flow.income,
                "expense": self.current_monthly_cash_flow.expense,
                "net": self.current_monthly_cash_flow.net,
            },
            "monthly_data": [
                {
                    "month_index": m.month_index,
                    "income_breakdown": dict(m.income_breakdown),
                    "expense_breakdown": dict(m.expense_breakdown),
                    "balances": {t: dict(b) for t, b in m.balances.items()},
                }
                for m in self.monthly_data
            ],
        }
