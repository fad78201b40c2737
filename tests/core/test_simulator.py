"""
Tests for the month-by-month Simulator.
"""

import logging

import pytest
from finforecast.core.calculator import Calculator
from finforecast.core.cashflow import CashFlowChange
from finforecast.core.cycle import Cycle
from finforecast.core.errors import ConfigError, MissingPluginError, SimulationRangeError
from finforecast.core.registry import PluginRegistry
from finforecast.core.simulator import (
    DEFAULT_SIMULATION_MONTHS,
    MAX_SIMULATION_MONTHS,
    MIN_SIMULATION_MONTHS,
    SimulationParams,
    Simulator,
    create_simulator,
)
from finforecast.core.source import Source
from finforecast.plugins import (
    AssetRecord,
    ExpenseRecord,
    IncomeRecord,
    ValuationAsset,
    create_default_registry,
)


def _household_calculator() -> Calculator:
    """Savings account fed by a salary and drained by rent."""
    registry = create_default_registry()
    records = [
        ("asset", AssetRecord(id="savings", name="Savings", base_amount=10_000)),
        (
            "income",
            IncomeRecord(
                id="salary",
                name="Salary",
                asset_source_id="savings",
                cycles=[Cycle(id="pay", type="monthly", amount=3000)],
            ),
        ),
        (
            "expense",
            ExpenseRecord(
                id="rent",
                name="Rent",
                asset_source_id="savings",
                cycles=[Cycle(id="rent", type="monthly", amount=1200)],
            ),
        ),
    ]
    calc = Calculator()
    for kind, record in records:
        for source in registry.get_plugin(kind).create_sources(record):
            calc.add_source(source)
    return calc


def _orphan_source() -> Source:
    return Source(
        id="pension",
        name="Pension",
        type="pension",
        calculate=lambda m: CashFlowChange(income=800.0),
    )


class TestSimulationRange:
    """Horizon validation at construction time."""

    @pytest.mark.parametrize("months", [0, -1, 1201, 5000])
    def test_out_of_range_is_rejected(self, months):
        with pytest.raises(SimulationRangeError, match="between 1 and 1200"):
            Simulator(Calculator(), SimulationParams(months), create_default_registry())

    @pytest.mark.parametrize("months", [1.5, "12", True, None])
    def test_non_integer_is_rejected(self, months):
        with pytest.raises(SimulationRangeError):
            Simulator(Calculator(), SimulationParams(months), create_default_registry())

    @pytest.mark.parametrize("months", [MIN_SIMULATION_MONTHS, 12, MAX_SIMULATION_MONTHS])
    def test_bounds_are_inclusive(self, months):
        result = Simulator(
            Calculator(), SimulationParams(months), create_default_registry()
        ).simulate()

        assert len(result.monthly_data) == months

    def test_range_error_is_config_error(self):
        assert issubclass(SimulationRangeError, ConfigError)

    def test_defaults(self):
        assert SimulationParams().simulation_months == DEFAULT_SIMULATION_MONTHS == 360
        assert SimulationParams().strict_plugins is True


class TestSimulate:
    def test_balances_follow_linked_flows(self):
        simulator = create_simulator(_household_calculator(), 12, create_default_registry())

        result = simulator.simulate()

        first = result.monthly_data[0]
        assert first.balances["asset"]["savings"] == pytest.approx(11_800)
        assert first.income_breakdown == {"salary": 3000}
        assert first.expense_breakdown == {"rent": 1200}
        assert result.monthly_data[-1].balances["asset"]["savings"] == pytest.approx(
            10_000 + 12 * 1800
        )

    def test_month_indices_are_sequential(self):
        result = create_simulator(_household_calculator(), 24, create_default_registry()).simulate()

        assert [m.month_index for m in result.monthly_data] == list(range(24))

    def test_current_monthly_cash_flow(self):
        simulator = create_simulator(_household_calculator(), 6, create_default_registry())

        current = simulator.get_current_monthly_cash_flow()

        assert current.income == pytest.approx(3000)
        assert current.expense == pytest.approx(1200)
        assert current.net == pytest.approx(1800)
        assert simulator.simulate().current_monthly_cash_flow == current

    def test_empty_calculator_has_no_data(self):
        result = create_simulator(Calculator(), 3, create_default_registry()).simulate()

        assert result.has_data is False
        assert len(result.monthly_data) == 3
        assert all(m.balances == {} for m in result.monthly_data)

    def test_balance_alone_counts_as_data(self):
        calc = Calculator()
        for source in ValuationAsset().create_sources(AssetRecord(id="a", name="A")):
            calc.add_source(source)

        result = create_simulator(calc, 2, create_default_registry()).simulate()

        assert result.has_data is True
        assert result.monthly_data[0].balances == {"asset": {"a": 0.0}}

    def test_simulate_is_repeatable(self):
        simulator = create_simulator(_household_calculator(), 36, create_default_registry())

        assert simulator.simulate().to_dict() == simulator.simulate().to_dict()

    def test_snapshots_are_independent(self):
        result = create_simulator(_household_calculator(), 3, create_default_registry()).simulate()

        balances = [m.balances["asset"]["savings"] for m in result.monthly_data]

        assert balances == pytest.approx([11_800, 13_600, 15_400])

    def test_get_monthly_projection(self):
        simulator = create_simulator(_household_calculator(), 12, create_default_registry())

        assert simulator.get_monthly_projection(-1) is None
        assert simulator.get_monthly_projection(12) is None
        projection = simulator.get_monthly_projection(5)
        assert projection == simulator.simulate().monthly_data[5]


class TestPluginPolicy:
    """Sources whose type has no registered plugin."""

    def test_strict_mode_raises(self):
        calc = _household_calculator()
        calc.add_source(_orphan_source())
        simulator = create_simulator(calc, 12, create_default_registry())

        with pytest.raises(MissingPluginError) as exc_info:
            simulator.simulate()

        assert exc_info.value.types == ["pension"]

    def test_lenient_mode_reports_raw_flow(self, caplog):
        calc = _household_calculator()
        calc.add_source(_orphan_source())
        simulator = Simulator(
            calc,
            SimulationParams(simulation_months=3, strict_plugins=False),
            create_default_registry(),
        )

        with caplog.at_level(logging.WARNING, logger="finforecast.core.simulator"):
            result = simulator.simulate()

        assert result.monthly_data[0].income_breakdown["pension"] == 800.0
        assert "pension" not in result.monthly_data[0].balances
        # savings unaffected by the orphan source
        assert result.monthly_data[0].balances["asset"]["savings"] == pytest.approx(11_800)
        warnings = [r for r in caplog.records if "pension" in r.getMessage()]
        assert len(warnings) == 1


class _BalanceObserver:
    """Month-end hook that records the asset balance it sees."""

    type = "observer"
    display_name = "Observer"
    dependencies = ("asset",)

    def __init__(self):
        self.seen: list[float] = []

    def create_sources(self, record):
        return []

    def post_monthly_process(self, ctx):
        self.seen.append(ctx.balances.get("asset", "fund"))


def test_month_end_hooks_run_in_dependency_order():
    registry = PluginRegistry()
    registry.register(ValuationAsset())
    observer = _BalanceObserver()
    registry.register(observer)
    # Put the observer ahead of the asset plugin in registration order
    registry.unregister("asset")
    registry.register(ValuationAsset())

    calc = Calculator()
    for source in ValuationAsset().create_sources(
        AssetRecord(id="fund", name="Fund", base_amount=1_200_000, return_rate=0.05)
    ):
        calc.add_source(source)

    create_simulator(calc, 1, registry).simulate()

    assert observer.seen == [pytest.approx(1_205_000)]
