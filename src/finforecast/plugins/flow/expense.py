"""
Recurring expense plugin.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from finforecast.core.cashflow import CashFlowChange
from finforecast.core.context import MonthlyProcessingContext
from finforecast.core.cycle import Cycle, calculate_cycles_for_month
from finforecast.core.interfaces import IGroupScoped, IMonthlyEffect, ISourcePlugin
from finforecast.core.kinds import K
from finforecast.core.source import Source


@dataclass
class ExpenseRecord:
    """
    A recurring expense (rent, utilities, insurance, subscriptions).

    Attributes:
        id: Identifier of the expense
        name: Display name
        cycles: When and how much is paid
        asset_source_id: Asset the expense is paid from (None = not debited)
        group_id: Display group
        color: Display color
    """

    id: str
    name: str
    cycles: list[Cycle] = field(default_factory=list)
    asset_source_id: str | None = None
    group_id: str | None = None
    color: str | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ExpenseRecord:
        return cls(
            id=data["id"],
            name=data["name"],
            cycles=[Cycle.from_dict(c) for c in data.get("cycles") or []],
            asset_source_id=data.get("asset_source_id"),
            group_id=data.get("group_id"),
            color=data.get("color"),
        )


class FlowExpense(ISourcePlugin, IMonthlyEffect, IGroupScoped):
    """
    Expense plugin (type: 'expense').

    The source reports the sum of active cycles as expense; the monthly effect
    pays it from the linked asset.
    """

    type = K.EXPENSE
    display_name = "Expenses"
    description = "Living costs, fixed costs and other outgoings"
    dependencies = (K.ASSET,)

    def create_sources(self, record: ExpenseRecord) -> list[Source]:
        cycles = list(record.cycles)

        def calculate(month_index: int) -> CashFlowChange:
            return CashFlowChange(
                income=0.0, expense=calculate_cycles_for_month(cycles, month_index)
            )

        return [
            Source(
                id=record.id,
                name=record.name,
                type=self.type,
                calculate=calculate,
                metadata={
                    "asset_source_id": record.asset_source_id,
                    "group_id": record.group_id,
                    "color": record.color,
                },
            )
        ]

    def apply_monthly_effect(self, ctx: MonthlyProcessingContext) -> None:
        expense = ctx.cash_flow_change.expense
        asset_id = ctx.source.metadata.get("asset_source_id")
        if expense > 0 and asset_id and ctx.balances.has(K.ASSET, asset_id):
            ctx.balances.adjust(K.ASSET, asset_id, -expense)

    def get_group_id(self, record: ExpenseRecord) -> str | None:
        return record.group_id
