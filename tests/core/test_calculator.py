"""
Tests for cash flow values, sources and the Calculator aggregator.
"""

import pytest
from finforecast.core.calculator import Calculator
from finforecast.core.cashflow import CashFlowChange, sum_cash_flow_changes
from finforecast.core.errors import ConfigError
from finforecast.core.source import Source


def _source(id: str, income: float = 0.0, expense: float = 0.0, type: str = "income", active=None):
    """Source with a constant cash flow, optionally only in ``active`` months."""

    def calculate(month_index: int) -> CashFlowChange:
        if active is not None and month_index not in active:
            return CashFlowChange.zero()
        return CashFlowChange(income, expense)

    return Source(id=id, name=id.title(), type=type, calculate=calculate)


class TestCashFlowChange:
    def test_negative_components_are_rejected(self):
        with pytest.raises(ValueError):
            CashFlowChange(income=-1.0)
        with pytest.raises(ValueError):
            CashFlowChange(expense=-0.01)

    def test_net_and_zero(self):
        change = CashFlowChange(income=300.0, expense=120.0)

        assert change.net == pytest.approx(180.0)
        assert not change.is_zero()
        assert CashFlowChange.zero().is_zero()

    def test_addition(self):
        total = CashFlowChange(1.0, 2.0) + CashFlowChange(3.0, 4.0)

        assert total == CashFlowChange(4.0, 6.0)

    def test_sum_of_nothing_is_zero(self):
        assert sum_cash_flow_changes([]) == CashFlowChange.zero()


class TestSource:
    def test_id_is_derived_from_name(self):
        source = Source(name="Main Savings", type="asset", calculate=lambda m: CashFlowChange())

        assert source.id == "main_savings"

    def test_missing_id_and_name_raises(self):
        with pytest.raises(ConfigError):
            Source(name="", type="asset", calculate=lambda m: CashFlowChange())

    def test_metadata_is_read_only(self):
        source = Source(
            id="a",
            name="A",
            type="asset",
            calculate=lambda m: CashFlowChange(),
            metadata={"return_rate": 0.05},
        )

        assert source.metadata["return_rate"] == 0.05
        with pytest.raises(TypeError):
            source.metadata["return_rate"] = 0.1


class TestCalculator:
    """Source management and monthly aggregation."""

    def test_empty_calculator_totals_are_zero(self):
        calc = Calculator()

        assert calc.calculate_total(0) == CashFlowChange.zero()
        assert calc.get_breakdown(0) == {}
        result = calc.calculate_for_period(0)
        assert result.total_income == 0.0
        assert result.net_cash_flow == 0.0

    def test_add_source_replaces_same_id_in_place(self):
        calc = Calculator()
        calc.add_source(_source("salary", income=1000))
        calc.add_source(_source("rent", expense=500, type="expense"))
        calc.add_source(_source("salary", income=2000))

        assert [s.id for s in calc.get_sources()] == ["salary", "rent"]
        assert calc.calculate_total(0).income == pytest.approx(2000)

    def test_remove_source(self):
        calc = Calculator()
        calc.add_source(_source("salary", income=1000))
        calc.remove_source("missing")
        assert len(calc) == 1

        calc.remove_source("salary")
        assert len(calc) == 0

    def test_breakdown_omits_inactive_sources(self):
        calc = Calculator()
        calc.add_source(_source("salary", income=1000))
        calc.add_source(_source("bonus", income=500, active={11}))
        calc.add_source(_source("rent", expense=400, type="expense"))

        breakdown = calc.get_breakdown(0)

        assert list(breakdown) == ["salary", "rent"]
        assert "bonus" in calc.get_breakdown(11)

    def test_calculate_for_period_totals_match_breakdown(self):
        calc = Calculator()
        calc.add_source(_source("salary", income=3000))
        calc.add_source(_source("fund", income=100, expense=250, type="asset"))
        calc.add_source(_source("rent", expense=1200, type="expense"))

        result = calc.calculate_for_period(4)

        assert result.month_index == 4
        assert result.total_income == pytest.approx(3100)
        assert result.total_expense == pytest.approx(1450)
        assert result.net_cash_flow == pytest.approx(1650)
        assert sum(c.income for c in result.breakdown.values()) == pytest.approx(
            result.total_income
        )

    def test_get_sources_returns_a_copy(self):
        calc = Calculator()
        calc.add_source(_source("salary", income=1))

        calc.get_sources().clear()

        assert len(calc) == 1

    def test_get_source_by_id(self):
        calc = Calculator()
        salary = _source("salary", income=1)
        calc.add_source(salary)

        assert calc.get_source_by_id("salary") is salary
        assert calc.get_source_by_id("nope") is None


def test_calculate_for_period_is_idempotent():
    calc = Calculator()
    calc.add_source(_source("salary", income=1000))
    calc.add_source(_source("rent", expense=700, type="expense", active={0, 2}))

    assert calc.calculate_for_period(2) == calc.calculate_for_period(2)
