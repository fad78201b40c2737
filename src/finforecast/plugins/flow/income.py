"""
Recurring income plugin.
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
class IncomeRecord:
    """
    A recurring income stream (salary, side job, pension).

    Attributes:
        id: Identifier of the income
        name: Display name
        cycles: When and how much is received
        asset_source_id: Asset the income is deposited into (None = not deposited)
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
    def from_dict(cls, data: Mapping[str, Any]) -> IncomeRecord:
        return cls(
            id=data["id"],
            name=data["name"],
            cycles=[Cycle.from_dict(c) for c in data.get("cycles") or []],
            asset_source_id=data.get("asset_source_id"),
            group_id=data.get("group_id"),
            color=data.get("color"),
        )


class FlowIncome(ISourcePlugin, IMonthlyEffect, IGroupScoped):
    """
    Income plugin (type: 'income').

    The source reports the sum of active cycles as income. The monthly effect
    deposits that income into the linked asset, provided the asset holds a
    balance in this run.
    """

    type = K.INCOME
    display_name = "Income"
    description = "Salary, side income, dividends and other income streams"
    dependencies = (K.ASSET,)

    def create_sources(self, record: IncomeRecord) -> list[Source]:
        cycles = list(record.cycles)

        def calculate(month_index: int) -> CashFlowChange:
            return CashFlowChange(
                income=calculate_cycles_for_month(cycles, month_index), expense=0.0
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
        income = ctx.cash_flow_change.income
        asset_id = ctx.source.metadata.get("asset_source_id")
        if income > 0 and asset_id and ctx.balances.has(K.ASSET, asset_id):
            ctx.balances.adjust(K.ASSET, asset_id, income)

    def get_group_id(self, record: IncomeRecord) -> str | None:
        return record.group_id
