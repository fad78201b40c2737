"""
Context classes handed to plugin hooks during simulation.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from .balances import BalanceStore
from .cashflow import CashFlowChange
from .source import Source


@dataclass
class PostMonthlyContext:
    """
    Context passed once per month to every plugin's post-monthly hook.

    Attributes:
        month_index: Zero-based index of the month being processed
        balances: Balance store shared by all plugins for this run
        cash_inflows: Month's inflow accumulator (label -> amount)
        cash_outflows: Month's outflow accumulator (label -> amount)
        all_sources: Every source in the calculator (read-only)

    Note:
        Hooks may mutate ``balances`` for any entity type and add labelled
        amounts to the accumulators; the accumulators become the month's
        income/expense breakdown.
    """

    month_index: int
    balances: BalanceStore
    cash_inflows: dict[str, float]
    cash_outflows: dict[str, float]
    all_sources: Sequence[Source]

    def record_inflow(self, label: str, amount: float) -> None:
        self.cash_inflows[label] = self.cash_inflows.get(label, 0.0) + amount

    def record_outflow(self, label: str, amount: float) -> None:
        self.cash_outflows[label] = self.cash_outflows.get(label, 0.0) + amount

    def sources_of_type(self, entity_type: str) -> list[Source]:
        return [s for s in self.all_sources if s.type == entity_type]


@dataclass(kw_only=True)
class MonthlyProcessingContext(PostMonthlyContext):
    """
    Context passed to a plugin's monthly effect for one (source, cash flow) pair.

    Adds the source being processed and its nonzero cash flow for the month to
    the fields of :class:`PostMonthlyContext`. Both are keyword-only.
    """

    source: Source
    cash_flow_change: CashFlowChange
