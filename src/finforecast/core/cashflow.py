"""
Cash flow value type shared by sources, the calculator and the simulator.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass


@dataclass(frozen=True)
class CashFlowChange:
    """
    Money moving toward (income) or away from (expense) a holder in one month.

    Both components are non-negative; the net effect is ``income - expense``.

    Attributes:
        income: Money received this month
        expense: Money paid out this month
    """

    income: float = 0.0
    expense: float = 0.0

    def __post_init__(self) -> None:
        if self.income < 0 or self.expense < 0:
            raise ValueError(
                f"CashFlowChange components must be >= 0, got income={self.income}, expense={self.expense}"
            )

    @classmethod
    def zero(cls) -> CashFlowChange:
        return cls(0.0, 0.0)

    @property
    def net(self) -> float:
        return self.income - self.expense

    def is_zero(self) -> bool:
        """True when neither income nor expense moved this month."""
        return self.income == 0 and self.expense == 0

    def __add__(self, other: CashFlowChange) -> CashFlowChange:
        if not isinstance(other, CashFlowChange):
            return NotImplemented
        return CashFlowChange(self.income + other.income, self.expense + other.expense)


def sum_cash_flow_changes(changes: Iterable[CashFlowChange]) -> CashFlowChange:
    """Sum income and expense component-wise over ``changes``."""
    income = 0.0
    expense = 0.0
    for change in changes:
        income += change.income
        expense += change.expense
    return CashFlowChange(income, expense)
