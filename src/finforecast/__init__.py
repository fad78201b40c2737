"""
FinForecast - Plugin-Driven Household Cash-Flow Projection

FinForecast projects a household's finances month by month: recurring income and
expenses, interest-bearing assets and scheduled loan repayments. Every kind of
record is handled by a plugin, so new kinds of money movement can be added
without touching the engine.

Architecture Overview:
- **Cycle**: Recurrence rule (monthly, yearly, every N months/years)
- **Source**: Named producer of monthly income/expense
- **Calculator**: Holds sources, sums them and breaks them down per month
- **PluginRegistry**: Maps entity types to plugins, ordered by dependencies
- **Simulator**: Runs the month loop, tracks balances and cash-flow labels
- **Scenario**: Turns household records (or a YAML/JSON catalog) into a run

Quick Start:
    ```python
    from finforecast import Cycle, Scenario
    from finforecast.plugins import AssetRecord, ExpenseRecord, IncomeRecord

    scenario = Scenario(
        records={
            "asset": [AssetRecord(id="savings", name="Savings",
                                  base_amount=20_000, return_rate=0.03)],
            "income": [IncomeRecord(id="salary", name="Salary", asset_source_id="savings",
                                    cycles=[Cycle(id="s", type="monthly", amount=4_000)])],
            "expense": [ExpenseRecord(id="rent", name="Rent", asset_source_id="savings",
                                      cycles=[Cycle(id="r", type="monthly", amount=1_500)])],
        }
    )
    result = scenario.run(simulation_months=120)
    result.to_frame()
    ```

Available Plugins:
    - 'asset': Savings/investments with monthly compounded returns
    - 'income': Recurring income credited to an asset
    - 'expense': Recurring expense debited from an asset
    - 'liability': Loan with a fixed repayment schedule
"""

# Version information
__version__ = "0.1.0"
__author__ = "FinForecast Team"
__description__ = "Plugin-Driven Household Cash-Flow Projection"

# Import core components for easy access
from .core import (
    BalanceStore,
    CalculationResult,
    Calculator,
    CashFlowChange,
    CatalogError,
    CircularDependencyError,
    ConfigError,
    CurrentCashFlow,
    Cycle,
    CycleConfigError,
    CycleType,
    Group,
    IntervalUnit,
    K,
    MissingDependencyError,
    MissingPluginError,
    MonthlySimulationData,
    OverdraftError,
    PluginRegistry,
    Scenario,
    SimulationParams,
    SimulationRangeError,
    SimulationResult,
    Simulator,
    Source,
    create_simulator,
    load_catalog,
)
from .plugins import create_default_registry, register_defaults

__all__ = [
    # Engine
    "Cycle",
    "CycleType",
    "IntervalUnit",
    "CashFlowChange",
    "Source",
    "CalculationResult",
    "Calculator",
    "BalanceStore",
    "PluginRegistry",
    "Simulator",
    "SimulationParams",
    "create_simulator",
    "K",
    # Results
    "SimulationResult",
    "MonthlySimulationData",
    "CurrentCashFlow",
    # Scenarios
    "Scenario",
    "Group",
    "load_catalog",
    # Plugins
    "create_default_registry",
    "register_defaults",
    # Errors
    "ConfigError",
    "CycleConfigError",
    "SimulationRangeError",
    "MissingDependencyError",
    "CircularDependencyError",
    "MissingPluginError",
    "OverdraftError",
    "CatalogError",
]
