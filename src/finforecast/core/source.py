"""
Source contract consumed by the Calculator and the Simulator.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from .cashflow import CashFlowChange
from .errors import ConfigError
from .utils import slugify_name


@dataclass(frozen=True)
class Source:
    """
    One financial entity's month-indexed cash flow generator.

    A Source is produced by a plugin from one domain record (one asset, one
    income, ...). ``calculate`` must be a pure function of the month index and the
    record it closes over; balance mutation belongs to plugins, not sources.

    Attributes:
        id: Identifier, unique within a Calculator
        name: Human-readable name
        type: Entity-type tag used to look up the owning plugin (e.g. 'asset')
        calculate: ``month_index -> CashFlowChange``
        metadata: Read-only key/value data plugins need later (rates, links, ...)

    Note:
        When ``id`` is omitted it is derived from ``name``
        (e.g. ``"Main Savings"`` -> ``"main_savings"``).
    """

    name: str
    type: str
    calculate: Callable[[int], CashFlowChange]
    metadata: Mapping[str, Any] = field(default_factory=dict)
    id: str = ""

    def __post_init__(self) -> None:
        if not self.id:
            if not self.name:
                raise ConfigError("Source must define either an id or a name")
            normalized = slugify_name(self.name)
            if not normalized:
                raise ConfigError(
                    f"Source name '{self.name}' cannot be converted into a valid id"
                )
            object.__setattr__(self, "id", normalized)
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))


@dataclass(frozen=True)
class CalculationResult:
    """Totals and per-source breakdown for one month."""

    total_income: float
    total_expense: float
    net_cash_flow: float
    breakdown: dict[str, CashFlowChange]
    month_index: int
