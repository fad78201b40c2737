"""
Plugin capability protocols for FinForecast.
Defines the contracts an entity-type plugin may satisfy.

Every plugin implements :class:`ISourcePlugin`. The hooks the Simulator calls are
separate capabilities; a plugin opts in by subclassing the capability protocol,
and the Simulator checks for it explicitly with ``isinstance``.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from .context import MonthlyProcessingContext, PostMonthlyContext
from .source import Source


@runtime_checkable
class ISourcePlugin(Protocol):
    """
    Contract shared by all entity-type plugins.

    Attributes:
        type: Entity type handled by the plugin (e.g. 'asset')
        display_name: Human-readable name of the entity type
        dependencies: Entity types that must be registered first and whose
            month-end processing must run before this plugin's
    """

    type: str
    display_name: str
    dependencies: Sequence[str]

    def create_sources(self, record: Any) -> list[Source]:
        """Turn one domain record into the sources that represent it."""
        ...


@runtime_checkable
class IInitialBalance(Protocol):
    """Capability: seed the balance store before month 0."""

    def get_initial_balance(self, source: Source) -> float:
        ...


@runtime_checkable
class IMonthlyEffect(Protocol):
    """Capability: react to one source's nonzero cash flow in one month."""

    def apply_monthly_effect(self, ctx: MonthlyProcessingContext) -> None:
        ...


@runtime_checkable
class IPostMonthlyProcess(Protocol):
    """
    Capability: end-of-month processing across all sources of the type.

    Runs once per month after every source has been processed, in dependency
    order, so dependents see their dependencies' updated balances.
    """

    def post_monthly_process(self, ctx: PostMonthlyContext) -> None:
        ...


@runtime_checkable
class IGroupScoped(Protocol):
    """Capability: records belong to a display group and can be filtered by it."""

    def get_group_id(self, record: Any) -> str | None:
        ...


__all__ = [
    "ISourcePlugin",
    "IInitialBalance",
    "IMonthlyEffect",
    "IPostMonthlyProcess",
    "IGroupScoped",
]
