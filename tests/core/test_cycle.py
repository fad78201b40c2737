"""
Tests for recurrence rules and their month-by-month evaluation.
"""

import numpy as np
import pytest
from finforecast.core.cycle import (
    Cycle,
    CycleType,
    IntervalUnit,
    calculate_cycles_for_month,
    cycle_amounts,
    is_cycle_active_in_month,
)
from finforecast.core.errors import ConfigError, CycleConfigError
from finforecast.core.utils import TimeRange


def _active_months(cycle: Cycle, horizon: int = 60) -> list[int]:
    return [m for m in range(horizon) if is_cycle_active_in_month(cycle, m)]


class TestCycleActivity:
    """Firing rules per cycle type."""

    def test_monthly_respects_inclusive_window(self):
        cycle = Cycle(
            id="c", type="monthly", amount=100, start_month_index=6, end_month_index=11
        )

        assert _active_months(cycle) == [6, 7, 8, 9, 10, 11]
        assert not is_cycle_active_in_month(cycle, 5)
        assert not is_cycle_active_in_month(cycle, 12)

    def test_monthly_without_end_is_open_ended(self):
        cycle = Cycle(id="c", type=CycleType.MONTHLY, amount=1)

        assert is_cycle_active_in_month(cycle, 0)
        assert is_cycle_active_in_month(cycle, 1199)

    def test_yearly_fires_on_start_anniversary(self):
        cycle = Cycle(id="bonus", type="yearly", amount=2000, start_month_index=5)

        assert _active_months(cycle) == [5, 17, 29, 41, 53]
        assert not is_cycle_active_in_month(cycle, 6)
        assert not is_cycle_active_in_month(cycle, 16)

    def test_custom_every_three_months(self):
        cycle = Cycle(
            id="q", type="custom", amount=10, interval=3, interval_unit="month"
        )

        assert _active_months(cycle, 10) == [0, 3, 6, 9]

    def test_custom_every_two_years(self):
        cycle = Cycle(
            id="c",
            type="custom",
            amount=10,
            start_month_index=1,
            interval=2,
            interval_unit=IntervalUnit.YEAR,
        )

        assert _active_months(cycle, 60) == [1, 25, 49]
        assert not is_cycle_active_in_month(cycle, 13)

    def test_end_before_start_never_fires(self):
        cycle = Cycle(
            id="c", type="monthly", amount=1, start_month_index=10, end_month_index=4
        )

        assert _active_months(cycle) == []


class TestCycleErrors:
    def test_custom_without_interval_raises_inside_window(self):
        cycle = Cycle(id="broken", type="custom", amount=1)

        with pytest.raises(CycleConfigError, match="requires interval and interval_unit"):
            is_cycle_active_in_month(cycle, 0)

    def test_custom_without_interval_is_inactive_before_start(self):
        cycle = Cycle(id="broken", type="custom", amount=1, start_month_index=10)

        assert is_cycle_active_in_month(cycle, 5) is False

    def test_custom_with_zero_interval_raises(self):
        cycle = Cycle(id="c", type="custom", amount=1, interval=0, interval_unit="month")

        with pytest.raises(CycleConfigError):
            is_cycle_active_in_month(cycle, 0)

    def test_custom_with_unknown_unit_raises(self):
        cycle = Cycle(id="c", type="custom", amount=1, interval=2, interval_unit="week")

        with pytest.raises(CycleConfigError, match="interval_unit"):
            is_cycle_active_in_month(cycle, 0)

    def test_unknown_type_raises(self):
        cycle = Cycle(id="c", type="weekly", amount=1)

        assert cycle.type == "weekly"
        with pytest.raises(CycleConfigError, match="Unknown cycle type"):
            is_cycle_active_in_month(cycle, 0)

    def test_negative_amount_is_rejected(self):
        with pytest.raises(CycleConfigError, match="amount must be >= 0"):
            Cycle(id="c", type="monthly", amount=-50)

        with pytest.raises(CycleConfigError):
            Cycle.from_dict({"id": "c", "amount": -0.01})

    def test_cycle_errors_are_config_errors(self):
        assert issubclass(CycleConfigError, ConfigError)


def test_window_mirrors_start_and_end():
    cycle = Cycle(id="c", type="monthly", amount=1, start_month_index=3, end_month_index=8)

    assert cycle.window == TimeRange(start_month_index=3, end_month_index=8)
    assert Cycle(id="o", type="monthly", amount=1).window.end_month_index is None


def test_string_types_are_coerced_to_enums():
    cycle = Cycle(id="c", type="custom", amount=1, interval=1, interval_unit="year")

    assert cycle.type is CycleType.CUSTOM
    assert cycle.interval_unit is IntervalUnit.YEAR


def test_calculate_cycles_for_month_sums_active_cycles():
    cycles = [
        Cycle(id="pay", type="monthly", amount=3000),
        Cycle(id="bonus", type="yearly", amount=1500, start_month_index=11),
    ]

    assert calculate_cycles_for_month(cycles, 0) == pytest.approx(3000)
    assert calculate_cycles_for_month(cycles, 11) == pytest.approx(4500)
    assert calculate_cycles_for_month(cycles, 23) == pytest.approx(4500)
    assert calculate_cycles_for_month([], 3) == 0.0


def test_from_dict_accepts_year_month_bounds():
    cycle = Cycle.from_dict(
        {
            "id": "c",
            "type": "monthly",
            "amount": 50,
            "start": {"year": 2, "month": 3},
            "end": {"year": 3, "month": 1},
        }
    )

    assert cycle.start_month_index == 14
    assert cycle.end_month_index == 24
    assert cycle.amount == 50.0


def test_from_dict_defaults():
    cycle = Cycle.from_dict({"id": "c", "amount": 10})

    assert cycle.type is CycleType.MONTHLY
    assert cycle.start_month_index == 0
    assert cycle.end_month_index is None


class TestCycleAmounts:
    """Vectorised evaluation over a horizon."""

    def test_matches_per_month_evaluation(self):
        cycles = [
            Cycle(id="a", type="monthly", amount=100, start_month_index=2, end_month_index=20),
            Cycle(id="b", type="yearly", amount=1000, start_month_index=3),
            Cycle(id="c", type="custom", amount=7, interval=5, interval_unit="month"),
        ]
        amounts = cycle_amounts(cycles, 48)

        expected = np.array([calculate_cycles_for_month(cycles, m) for m in range(48)])
        np.testing.assert_allclose(amounts, expected)

    def test_cycle_outside_horizon_is_not_evaluated(self):
        broken = Cycle(id="later", type="custom", amount=1, start_month_index=100)

        amounts = cycle_amounts([broken], 12)

        assert amounts.shape == (12,)
        assert not amounts.any()


def test_custom_years_from_month_zero():
    cycle = Cycle(id="c", type="custom", amount=1, interval=2, interval_unit="year")

    assert _active_months(cycle, 60) == [0, 24, 48]


def test_overlapping_cycles_both_contribute():
    cycles = [
        Cycle(id="a", type="monthly", amount=100),
        Cycle(id="b", type="monthly", amount=100, start_month_index=3, end_month_index=3),
    ]

    assert calculate_cycles_for_month(cycles, 3) == pytest.approx(200)
    assert calculate_cycles_for_month(cycles, 4) == pytest.approx(100)
