"""
Default plugin registration for FinForecast.
"""

from finforecast.core.kinds import K
from finforecast.core.registry import PluginRegistry

from .flow.expense import ExpenseRecord, FlowExpense
from .flow.income import FlowIncome, IncomeRecord
from .schedule.liability import LiabilityRecord, ScheduleLiability
from .valuation.asset import AssetRecord, ValuationAsset

# Record type accepted by each default plugin, used when loading catalogs
RECORD_TYPES = {
    K.ASSET: AssetRecord,
    K.INCOME: IncomeRecord,
    K.EXPENSE: ExpenseRecord,
    K.LIABILITY: LiabilityRecord,
}


def register_defaults(registry: PluginRegistry) -> PluginRegistry:
    """
    Register the default plugin implementations in ``registry``.

    Plugins are registered in dependency order: the asset plugin first, since
    income, expense and liability plugins move money in and out of assets.

    Registered Plugins:
        - 'asset': Interest-bearing balance with contributions and withdrawals
        - 'income': Recurring income deposited into an asset
        - 'expense': Recurring expense paid from an asset
        - 'liability': Fixed-schedule loan repaid from an asset

    Returns:
        The same registry, for chaining
    """
    registry.register(ValuationAsset())
    registry.register(FlowIncome())
    registry.register(FlowExpense())
    registry.register(ScheduleLiability())
    return registry


def create_default_registry() -> PluginRegistry:
    """Build a fresh registry populated with the default plugins."""
    return register_defaults(PluginRegistry())
