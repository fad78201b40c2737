"""
Core module for FinForecast.

This module contains the cash-flow engine: recurrence rules, the source
calculator, the plugin registry and the month-by-month simulator.
"""

from .balances import BalanceStore
from .calculator import Calculator
from .cashflow import CashFlowChange, sum_cash_flow_changes
from .catalog_loader import CatalogDefinition, CatalogError, load_catalog
from .context import MonthlyProcessingContext, PostMonthlyContext
from .cycle import (
    Cycle,
    CycleType,
    IntervalUnit,
    calculate_cycles_for_month,
    cycle_amounts,
    is_cycle_active_in_month,
)
from .errors import (
    CircularDependencyError,
    ConfigError,
    CycleConfigError,
    MissingDependencyError,
    MissingPluginError,
    OverdraftError,
    SimulationRangeError,
)
from .interfaces import (
    IGroupScoped,
    IInitialBalance,
    IMonthlyEffect,
    IPostMonthlyProcess,
    ISourcePlugin,
)
from .kinds import K
from .registry import PluginRegistry
from .results import CurrentCashFlow, MonthlySimulationData, SimulationResult
from .scenario import Group, Scenario
from .simulator import (
    DEFAULT_SIMULATION_MONTHS,
    MAX_SIMULATION_MONTHS,
    MIN_SIMULATION_MONTHS,
    SimulationParams,
    Simulator,
    create_simulator,
)
from .source import CalculationResult, Source
from .utils import (
    TimeRange,
    active_mask,
    index_to_year_month,
    is_within_time_range,
    slugify_name,
    year_month_to_index,
)

__all__ = [
    # Errors
    "ConfigError",
    "CycleConfigError",
    "SimulationRangeError",
    "MissingDependencyError",
    "CircularDependencyError",
    "MissingPluginError",
    "OverdraftError",
    "CatalogError",
    # Values
    "CashFlowChange",
    "sum_cash_flow_changes",
    "Source",
    "CalculationResult",
    "K",
    # Cycles
    "Cycle",
    "CycleType",
    "IntervalUnit",
    "is_cycle_active_in_month",
    "calculate_cycles_for_month",
    "cycle_amounts",
    # Engine
    "Calculator",
    "BalanceStore",
    "PostMonthlyContext",
    "MonthlyProcessingContext",
    "PluginRegistry",
    "Simulator",
    "SimulationParams",
    "create_simulator",
    "MIN_SIMULATION_MONTHS",
    "MAX_SIMULATION_MONTHS",
    "DEFAULT_SIMULATION_MONTHS",
    # Interfaces
    "ISourcePlugin",
    "IInitialBalance",
    "IMonthlyEffect",
    "IPostMonthlyProcess",
    "IGroupScoped",
    # Results
    "SimulationResult",
    "MonthlySimulationData",
    "CurrentCashFlow",
    # Scenarios
    "Scenario",
    "Group",
    "CatalogDefinition",
    "load_catalog",
    # Utilities
    "TimeRange",
    "is_within_time_range",
    "year_month_to_index",
    "index_to_year_month",
    "active_mask",
    "slugify_name",
]
