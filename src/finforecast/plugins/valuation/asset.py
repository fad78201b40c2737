"""
Interest-bearing asset plugin.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from finforecast.core.cashflow import CashFlowChange
from finforecast.core.context import MonthlyProcessingContext, PostMonthlyContext
from finforecast.core.cycle import Cycle, calculate_cycles_for_month
from finforecast.core.errors import ConfigError, OverdraftError
from finforecast.core.interfaces import (
    IGroupScoped,
    IInitialBalance,
    IMonthlyEffect,
    IPostMonthlyProcess,
    ISourcePlugin,
)
from finforecast.core.kinds import K
from finforecast.core.source import Source

logger = logging.getLogger(__name__)

OVERDRAFT_POLICIES = ("ignore", "warn", "raise")


@dataclass
class AssetRecord:
    """
    A savings or investment account.

    Attributes:
        id: Identifier of the asset
        name: Display name
        base_amount: Balance at month 0, before any flows
        return_rate: Annual return, compounded monthly at ``return_rate / 12``
        contributions: Cycles paying money into the asset
        withdrawals: Cycles taking money out of the asset
        group_id: Display group the asset belongs to
        color: Display color
        overdraft_policy: What to do when the balance goes negative
            ('ignore' | 'warn' | 'raise')
    """

    id: str
    name: str
    base_amount: float = 0.0
    return_rate: float = 0.0
    contributions: list[Cycle] = field(default_factory=list)
    withdrawals: list[Cycle] = field(default_factory=list)
    group_id: str | None = None
    color: str | None = None
    overdraft_policy: str = "ignore"

    def __post_init__(self) -> None:
        self.base_amount = float(self.base_amount)
        self.return_rate = float(self.return_rate)
        policy = str(self.overdraft_policy).lower()
        if policy not in OVERDRAFT_POLICIES:
            raise ConfigError(
                f"{self.id}: overdraft_policy must be 'ignore'|'warn'|'raise', got {self.overdraft_policy!r}"
            )
        self.overdraft_policy = policy

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> AssetRecord:
        return cls(
            id=data["id"],
            name=data["name"],
            base_amount=data.get("base_amount", 0.0),
            return_rate=data.get("return_rate", 0.0),
            contributions=[Cycle.from_dict(c) for c in data.get("contributions") or []],
            withdrawals=[Cycle.from_dict(c) for c in data.get("withdrawals") or []],
            group_id=data.get("group_id"),
            color=data.get("color"),
            overdraft_policy=data.get("overdraft_policy", "ignore"),
        )


class ValuationAsset(
    ISourcePlugin, IInitialBalance, IMonthlyEffect, IPostMonthlyProcess, IGroupScoped
):
    """
    Asset plugin (type: 'asset').

    Tracks a running balance per asset. The asset's own source reports
    contributions as expense (money leaving the household's pocket) and
    withdrawals as income; the monthly effect mirrors them into the balance.
    Other plugins (income, expense, liability) credit and debit asset balances
    directly, which is why they declare a dependency on this plugin.

    Month-end processing accrues interest at ``return_rate / 12`` on the balance
    as it stands after the month's flows, and records it as inflow
    ``return_<asset id>``.

    **Note:**
        Balances are not clamped at zero; a negative balance is an overdraft and
        is handled according to the record's ``overdraft_policy``.
    """

    type = K.ASSET
    display_name = "Financial assets"
    description = "Deposits, funds, stocks and other interest-bearing assets"
    dependencies: tuple[str, ...] = ()

    def create_sources(self, record: AssetRecord) -> list[Source]:
        contributions = list(record.contributions)
        withdrawals = list(record.withdrawals)

        def calculate(month_index: int) -> CashFlowChange:
            return CashFlowChange(
                income=calculate_cycles_for_month(withdrawals, month_index),
                expense=calculate_cycles_for_month(contributions, month_index),
            )

        return [
            Source(
                id=record.id,
                name=record.name,
                type=self.type,
                calculate=calculate,
                metadata={
                    "base_amount": record.base_amount,
                    "return_rate": record.return_rate,
                    "overdraft_policy": record.overdraft_policy,
                    "group_id": record.group_id,
                    "color": record.color,
                },
            )
        ]

    def get_initial_balance(self, source: Source) -> float:
        return float(source.metadata.get("base_amount", 0.0))

    def apply_monthly_effect(self, ctx: MonthlyProcessingContext) -> None:
        change = ctx.cash_flow_change
        # contributions raise the balance, withdrawals lower it
        ctx.balances.adjust(self.type, ctx.source.id, change.expense - change.income)
        if change.expense > 0:
            ctx.record_outflow(f"investment_{ctx.source.id}", change.expense)

    def post_monthly_process(self, ctx: PostMonthlyContext) -> None:
        for source in ctx.sources_of_type(self.type):
            balance = ctx.balances.get(self.type, source.id, 0.0)
            return_rate = float(source.metadata.get("return_rate", 0.0))
            if return_rate != 0:
                interest = balance * (return_rate / 12)
                balance += interest
                ctx.balances.set(self.type, source.id, balance)
                ctx.record_inflow(f"return_{source.id}", interest)

            if balance < 0:
                self._handle_overdraft(source, balance, ctx.month_index)

    def get_group_id(self, record: AssetRecord) -> str | None:
        return record.group_id

    def _handle_overdraft(self, source: Source, balance: float, month_index: int) -> None:
        policy = source.metadata.get("overdraft_policy", "ignore")
        if policy == "raise":
            raise OverdraftError(
                f"{source.id}: balance went negative at month {month_index}: {balance:.2f}"
            )
        if policy == "warn":
            logger.warning(
                "%s: balance went negative at month %d: %.2f",
                source.id,
                month_index,
                balance,
            )
