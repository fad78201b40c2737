"""
Month-by-month simulation engine.

The Simulator combines a Calculator (what cash moves each month) with a
PluginRegistry (what that movement does to balances) and produces a monthly
time series of breakdowns and balances.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .balances import BalanceStore
from .calculator import Calculator
from .context import MonthlyProcessingContext, PostMonthlyContext
from .errors import MissingPluginError, SimulationRangeError
from .interfaces import IInitialBalance, IMonthlyEffect, IPostMonthlyProcess
from .registry import PluginRegistry
from .results import CurrentCashFlow, MonthlySimulationData, SimulationResult
from .source import Source

logger = logging.getLogger(__name__)

MIN_SIMULATION_MONTHS = 1
MAX_SIMULATION_MONTHS = 1200  # 100 years
DEFAULT_SIMULATION_MONTHS = 360


@dataclass(frozen=True)
class SimulationParams:
    """
    Parameters of a simulation run.

    Attributes:
        simulation_months: Number of months to project (1..1200)
        strict_plugins: When True, sources whose type has no registered plugin
            abort the run; when False they are reported in the breakdown only
            and a warning is logged once per type
    """

    simulation_months: int = DEFAULT_SIMULATION_MONTHS
    strict_plugins: bool = True


def _validate_months(simulation_months) -> None:
    if (
        isinstance(simulation_months, bool)
        or not isinstance(simulation_months, int)
        or not MIN_SIMULATION_MONTHS <= simulation_months <= MAX_SIMULATION_MONTHS
    ):
        raise SimulationRangeError(
            f"simulation_months must be between {MIN_SIMULATION_MONTHS} and "
            f"{MAX_SIMULATION_MONTHS} months (1 to 100 years), got {simulation_months!r}"
        )


class Simulator:
    """
    Orchestrates a deterministic multi-year monthly projection.

    Each run goes through: validate -> initialise balances -> for every month
    (realise cash flow -> per-source effects -> per-plugin month-end effects ->
    snapshot) -> result. Nothing persists between runs, so ``simulate()`` can be
    called repeatedly and reads, but never mutates, the calculator and registry.

    **Example Usage:**
        ```python
        from finforecast.core.simulator import SimulationParams, Simulator
        from finforecast.plugins import create_default_registry

        simulator = Simulator(calculator, SimulationParams(120), create_default_registry())
        result = simulator.simulate()
        result.monthly_data[-1].balances["asset"]
        ```

    **Ordering:**
        Sources are processed in calculator (insertion) order; month-end hooks run
        in the registry's dependency order. Both are deterministic.
    """

    def __init__(
        self,
        calculator: Calculator,
        params: SimulationParams,
        registry: PluginRegistry,
    ):
        """
        Args:
            calculator: Calculator populated with the run's sources
            params: Simulation parameters
            registry: Registry holding a plugin for every source type

        Raises:
            SimulationRangeError: If ``params.simulation_months`` is outside 1..1200
        """
        _validate_months(params.simulation_months)
        self._calculator = calculator
        self._params = params
        self._registry = registry

    @property
    def simulation_months(self) -> int:
        return self._params.simulation_months

    def get_current_monthly_cash_flow(self) -> CurrentCashFlow:
        """Cash flow of the current month (month index 0)."""
        total = self._calculator.calculate_total(0)
        return CurrentCashFlow(
            income=total.income, expense=total.expense, net=total.income - total.expense
        )

    def simulate(self) -> SimulationResult:
        """
        Run the full projection.

        Returns:
            SimulationResult with one MonthlySimulationData per month

        Raises:
            MissingPluginError: In strict mode, if a source type has no plugin
        """
        current = self.get_current_monthly_cash_flow()
        sources = self._calculator.get_sources()
        self._check_plugins(sources)

        by_id = {s.id: s for s in sources}
        sorted_plugins = self._registry.get_all_plugins_sorted()
        balances = self._initial_balances(sources)
        logger.debug(
            "Simulating %d months over %d sources (plugin order: %s)",
            self.simulation_months,
            len(sources),
            [p.type for p in sorted_plugins],
        )

        monthly_data: list[MonthlySimulationData] = []
        for month_index in range(self.simulation_months):
            cash_inflows: dict[str, float] = {}
            cash_outflows: dict[str, float] = {}

            for source_id, change in self._calculator.get_breakdown(month_index).items():
                source = by_id.get(source_id)
                if source is None:
                    continue

                plugin = self._registry.get_plugin(source.type)
                if isinstance(plugin, IMonthlyEffect):
                    plugin.apply_monthly_effect(
                        MonthlyProcessingContext(
                            month_index=month_index,
                            balances=balances,
                            cash_inflows=cash_inflows,
                            cash_outflows=cash_outflows,
                            all_sources=sources,
                            source=source,
                            cash_flow_change=change,
                        )
                    )

                # Raw flow is reported whether or not a plugin handled it
                if change.income > 0:
                    cash_inflows[source_id] = change.income
                if change.expense > 0:
                    cash_outflows[source_id] = change.expense

            post_ctx = PostMonthlyContext(
                month_index=month_index,
                balances=balances,
                cash_inflows=cash_inflows,
                cash_outflows=cash_outflows,
                all_sources=sources,
            )
            for plugin in sorted_plugins:
                if isinstance(plugin, IPostMonthlyProcess):
                    plugin.post_monthly_process(post_ctx)

            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Month %d: inflows %.2f, outflows %.2f",
                    month_index,
                    sum(cash_inflows.values()),
                    sum(cash_outflows.values()),
                )

            monthly_data.append(
                MonthlySimulationData(
                    month_index=month_index,
                    income_breakdown=dict(cash_inflows),
                    expense_breakdown=dict(cash_outflows),
                    balances=balances.snapshot(),
                )
            )

        has_data = current.income != 0 or current.expense != 0 or not balances.is_empty()
        logger.debug("Simulation finished: %d months, has_data=%s", len(monthly_data), has_data)
        return SimulationResult(
            monthly_data=monthly_data,
            current_monthly_cash_flow=current,
            has_data=has_data,
        )

    def get_monthly_projection(self, month_index: int) -> MonthlySimulationData | None:
        """Snapshot of ``month_index`` from a fresh run, or None when out of range."""
        if month_index < 0 or month_index >= self.simulation_months:
            return None
        return self.simulate().monthly_data[month_index]

    def _check_plugins(self, sources: list[Source]) -> None:
        unknown = [s.type for s in sources if not self._registry.has_plugin(s.type)]
        if not unknown:
            return
        if self._params.strict_plugins:
            raise MissingPluginError(unknown)
        for entity_type in sorted(set(unknown)):
            logger.warning(
                "No plugin registered for source type '%s'; its cash flow is reported "
                "but no balance effects are applied",
                entity_type,
            )

    def _initial_balances(self, sources: list[Source]) -> BalanceStore:
        balances = BalanceStore()
        for source in sources:
            plugin = self._registry.get_plugin(source.type)
            if isinstance(plugin, IInitialBalance):
                balances.set(source.type, source.id, plugin.get_initial_balance(source))
        return balances


def create_simulator(
    calculator: Calculator,
    params: SimulationParams | int,
    registry: PluginRegistry,
) -> Simulator:
    """Build a Simulator from a params object or a plain month count."""
    if not isinstance(params, SimulationParams):
        params = SimulationParams(simulation_months=params)
    return Simulator(calculator, params, registry)
