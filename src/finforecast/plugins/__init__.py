"""
Plugin implementations for FinForecast.

This module contains the concrete entity-type plugins. Each plugin turns one kind
of household record into calculator sources and reacts to the resulting cash
flow during simulation.

Plugin Categories:
- Valuation Plugins: Balance-holding assets with interest accrual
- Flow Plugins: Income and expenses routed into and out of assets
- Schedule Plugins: Liabilities repaid on a fixed schedule

Registry System:
Nothing is registered on import. Call :func:`create_default_registry` (or
:func:`register_defaults` on an existing registry) and pass the registry to the
simulator explicitly.
"""

from .flow import ExpenseRecord, FlowExpense, FlowIncome, IncomeRecord
from .registry import RECORD_TYPES, create_default_registry, register_defaults
from .schedule import LiabilityRecord, ScheduleLiability
from .valuation import AssetRecord, ValuationAsset

__all__ = [
    # Valuation plugins
    "ValuationAsset",
    "AssetRecord",
    # Flow plugins
    "FlowIncome",
    "IncomeRecord",
    "FlowExpense",
    "ExpenseRecord",
    # Schedule plugins
    "ScheduleLiability",
    "LiabilityRecord",
    # Registry
    "RECORD_TYPES",
    "register_defaults",
    "create_default_registry",
]
