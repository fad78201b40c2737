"""
Fixed-schedule liability plugin.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from finforecast.core.cashflow import CashFlowChange
from finforecast.core.context import MonthlyProcessingContext
from finforecast.core.cycle import Cycle, calculate_cycles_for_month
from finforecast.core.errors import ConfigError
from finforecast.core.interfaces import (
    IGroupScoped,
    IInitialBalance,
    IMonthlyEffect,
    ISourcePlugin,
)
from finforecast.core.kinds import K
from finforecast.core.source import Source


@dataclass
class LiabilityRecord:
    """
    A loan repaid by fixed amounts on a recurring schedule (no interest).

    Attributes:
        id: Identifier of the liability
        name: Display name
        total_amount: Outstanding amount at month 0 (principal plus any fixed charges)
        cycles: Repayment schedule
        principal: Amount originally borrowed (informational)
        asset_source_id: Asset repayments are paid from (None = not debited)
        group_id: Display group
        color: Display color
    """

    id: str
    name: str
    total_amount: float
    cycles: list[Cycle] = field(default_factory=list)
    principal: float | None = None
    asset_source_id: str | None = None
    group_id: str | None = None
    color: str | None = None

    def __post_init__(self) -> None:
        self.total_amount = float(self.total_amount)
        if self.total_amount < 0:
            raise ConfigError(
                f"{self.id}: total_amount must be >= 0, got {self.total_amount}"
            )

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> LiabilityRecord:
        return cls(
            id=data["id"],
            name=data["name"],
            total_amount=data.get("total_amount", 0.0),
            cycles=[Cycle.from_dict(c) for c in data.get("cycles") or []],
            principal=data.get("principal"),
            asset_source_id=data.get("asset_source_id"),
            group_id=data.get("group_id"),
            color=data.get("color"),
        )


class ScheduleLiability(ISourcePlugin, IInitialBalance, IMonthlyEffect, IGroupScoped):
    """
    Liability plugin (type: 'liability').

    The outstanding balance starts at ``total_amount``. Each repayment lowers
    it, never below zero, records outflow ``repayment_<liability id>`` and is
    paid in full from the linked asset.
    """

    type = K.LIABILITY
    display_name = "Liabilities"
    description = "Loans and other borrowing repaid on a schedule"
    dependencies = (K.ASSET,)

    def create_sources(self, record: LiabilityRecord) -> list[Source]:
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
                    "total_amount": record.total_amount,
                    "principal": record.principal,
                    "asset_source_id": record.asset_source_id,
                    "group_id": record.group_id,
                    "color": record.color,
                },
            )
        ]

    def get_initial_balance(self, source: Source) -> float:
        return float(source.metadata.get("total_amount", 0.0))

    def apply_monthly_effect(self, ctx: MonthlyProcessingContext) -> None:
        repayment = ctx.cash_flow_change.expense
        if repayment <= 0:
            return

        source_id = ctx.source.id
        if ctx.balances.has(self.type, source_id):
            outstanding = ctx.balances.get(self.type, source_id)
            ctx.balances.set(self.type, source_id, max(0.0, outstanding - repayment))
        ctx.record_outflow(f"repayment_{source_id}", repayment)

        asset_id = ctx.source.metadata.get("asset_source_id")
        if asset_id and ctx.balances.has(K.ASSET, asset_id):
            ctx.balances.adjust(K.ASSET, asset_id, -repayment)

    def get_group_id(self, record: LiabilityRecord) -> str | None:
        return record.group_id
