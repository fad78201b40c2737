"""
Generic cash flow aggregator over a set of named sources.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from .cashflow import CashFlowChange, sum_cash_flow_changes
from .source import CalculationResult, Source

S = TypeVar("S", bound=Source)


class Calculator(Generic[S]):
    """
    Holds a set of sources and sums or breaks down their cash flow per month.

    Sources are kept in insertion order; that order is the order the Simulator
    processes them in, so it must stay deterministic.

    **Example Usage:**
        ```python
        from finforecast.core.calculator import Calculator
        from finforecast.core.cashflow import CashFlowChange
        from finforecast.core.source import Source

        calc = Calculator()
        calc.add_source(
            Source(id="salary", name="Salary", type="income",
                   calculate=lambda m: CashFlowChange(3000.0, 0.0))
        )
        calc.calculate_for_period(0).net_cash_flow  # 3000.0
        ```
    """

    def __init__(self) -> None:
        self._sources: list[S] = []

    def add_source(self, source: S) -> None:
        """Add ``source``, replacing an existing source with the same id in place."""
        for i, existing in enumerate(self._sources):
            if existing.id == source.id:
                self._sources[i] = source
                return
        self._sources.append(source)

    def remove_source(self, id: str) -> None:
        """Remove the source with ``id``; no-op when absent."""
        self._sources = [s for s in self._sources if s.id != id]

    def calculate_total(self, month_index: int) -> CashFlowChange:
        """Sum of every source's cash flow for ``month_index``."""
        return sum_cash_flow_changes(s.calculate(month_index) for s in self._sources)

    def get_breakdown(self, month_index: int) -> dict[str, CashFlowChange]:
        """
        Per-source cash flow for ``month_index``.

        Sources whose income and expense are both zero are omitted; callers use
        the keys to know which sources were active this month.
        """
        breakdown: dict[str, CashFlowChange] = {}
        for source in self._sources:
            change = source.calculate(month_index)
            if not change.is_zero():
                breakdown[source.id] = change
        return breakdown

    def calculate_for_period(self, month_index: int) -> CalculationResult:
        """Totals and breakdown for one month; totals are derived from the breakdown."""
        breakdown = self.get_breakdown(month_index)
        totals = sum_cash_flow_changes(breakdown.values())
        return CalculationResult(
            total_income=totals.income,
            total_expense=totals.expense,
            net_cash_flow=totals.income - totals.expense,
            breakdown=breakdown,
            month_index=month_index,
        )

    def get_sources(self) -> list[S]:
        """Copy of the source list (mutating it does not affect the calculator)."""
        return list(self._sources)

    def get_source_by_id(self, id: str) -> S | None:
        for source in self._sources:
            if source.id == id:
                return source
        return None

    def __len__(self) -> int:
        return len(self._sources)

    def __repr__(self) -> str:
        return f"Calculator(sources={[s.id for s in self._sources]})"
