"""
Recurrence rules and their month-by-month evaluation.

A :class:`Cycle` says when and how much money a source moves. Month indices are
zero-based absolute offsets from the simulation's month 0.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any

import numpy as np

from .errors import CycleConfigError
from .utils import TimeRange, active_mask, is_within_time_range, year_month_to_index


class CycleType(str, Enum):
    MONTHLY = "monthly"  # every month in range
    YEARLY = "yearly"  # once per 12 months, same offset as start
    CUSTOM = "custom"  # every N months / N years


class IntervalUnit(str, Enum):
    MONTH = "month"
    YEAR = "year"


@dataclass(frozen=True)
class Cycle:
    """
    A recurrence rule for one amount.

    Attributes:
        id: Identifier of the rule (unique within its record)
        type: monthly | yearly | custom
        amount: Amount moved each time the rule fires (>= 0)
        start_month_index: First month the rule may fire (inclusive)
        end_month_index: Last month the rule may fire (inclusive), None = open ended
        interval: Step size for custom rules
        interval_unit: Unit of ``interval`` for custom rules (month | year)

    Note:
        ``type`` and ``interval_unit`` accept either the enum members or their
        string values. Unrecognised values are kept as given and rejected when the
        rule is evaluated.
    """

    id: str
    type: CycleType | str
    amount: float
    start_month_index: int = 0
    end_month_index: int | None = None
    interval: int | None = None
    interval_unit: IntervalUnit | str | None = None

    def __post_init__(self) -> None:
        if self.amount < 0:
            raise CycleConfigError(
                f"Cycle '{self.id}' amount must be >= 0, got {self.amount}"
            )
        if isinstance(self.type, str) and not isinstance(self.type, CycleType):
            try:
                object.__setattr__(self, "type", CycleType(self.type))
            except ValueError:
                pass
        if isinstance(self.interval_unit, str) and not isinstance(
            self.interval_unit, IntervalUnit
        ):
            try:
                object.__setattr__(
                    self, "interval_unit", IntervalUnit(self.interval_unit)
                )
            except ValueError:
                pass

    @property
    def window(self) -> TimeRange:
        """Inclusive month window the rule may fire in."""
        return TimeRange(self.start_month_index, self.end_month_index)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Cycle:
        """
        Build a cycle from a plain mapping.

        Start/end may be given either as ``start_month_index``/``end_month_index``
        or as ``start``/``end`` mappings of the form ``{"year": 1, "month": 4}``.
        """
        start = data.get("start_month_index")
        if start is None and data.get("start") is not None:
            start = year_month_to_index(data["start"]["year"], data["start"]["month"])
        end = data.get("end_month_index")
        if end is None and data.get("end") is not None:
            end = year_month_to_index(data["end"]["year"], data["end"]["month"])
        return cls(
            id=str(data.get("id", "")),
            type=data.get("type", CycleType.MONTHLY),
            amount=float(data.get("amount", 0.0)),
            start_month_index=int(start) if start is not None else 0,
            end_month_index=int(end) if end is not None else None,
            interval=data.get("interval"),
            interval_unit=data.get("interval_unit"),
        )


def _period_months(cycle: Cycle) -> int:
    """Number of months between firings; 1 for monthly rules."""
    if cycle.type == CycleType.MONTHLY:
        return 1
    if cycle.type == CycleType.YEARLY:
        return 12
    if cycle.type == CycleType.CUSTOM:
        if not cycle.interval or not cycle.interval_unit:
            raise CycleConfigError(
                f"Custom cycle '{cycle.id}' requires interval and interval_unit"
            )
        interval = cycle.interval
        if isinstance(interval, float) and interval.is_integer():
            interval = int(interval)
        if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
            raise CycleConfigError(
                f"Custom cycle '{cycle.id}' interval must be a positive integer, got {cycle.interval!r}"
            )
        if cycle.interval_unit == IntervalUnit.MONTH:
            return interval
        if cycle.interval_unit == IntervalUnit.YEAR:
            return interval * 12
        raise CycleConfigError(
            f"Custom cycle '{cycle.id}' has unknown interval_unit {cycle.interval_unit!r}"
        )
    raise CycleConfigError(f"Unknown cycle type: {cycle.type!r}")


def is_cycle_active_in_month(cycle: Cycle, month_index: int) -> bool:
    """
    Check whether ``cycle`` fires in ``month_index``.

    Rules, in order: before start -> inactive; after a defined end -> inactive;
    otherwise dispatch on the cycle type.

    Raises:
        CycleConfigError: For custom cycles without interval/interval_unit and for
            unknown cycle types (only when the month lies inside the window)
    """
    if not is_within_time_range(cycle.window, month_index):
        return False
    return (month_index - cycle.start_month_index) % _period_months(cycle) == 0


def calculate_cycles_for_month(cycles: Iterable[Cycle], month_index: int) -> float:
    """Sum ``amount`` over every cycle that fires in ``month_index``."""
    return sum(
        (cycle.amount for cycle in cycles if is_cycle_active_in_month(cycle, month_index)),
        0.0,
    )


def cycle_amounts(cycles: Iterable[Cycle], months: int) -> np.ndarray:
    """
    Evaluate ``cycles`` over a whole horizon at once.

    Entry ``m`` of the returned array equals ``calculate_cycles_for_month(cycles, m)``.

    **Args:**
        cycles: Recurrence rules to evaluate
        months: Length of the horizon

    **Returns:**
        Float array of length ``months``
    """
    out = np.zeros(months)
    idx = np.arange(months)
    for cycle in cycles:
        mask = active_mask(months, cycle.start_month_index, cycle.end_month_index)
        if not mask.any():
            continue
        period = _period_months(cycle)
        mask &= (idx - cycle.start_month_index) % period == 0
        out[mask] += cycle.amount
    return out
