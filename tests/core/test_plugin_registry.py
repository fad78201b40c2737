"""
Tests for plugin registration and dependency ordering.
"""

import pytest
from finforecast.core.errors import (
    CircularDependencyError,
    ConfigError,
    MissingDependencyError,
)
from finforecast.core.registry import PluginRegistry
from finforecast.plugins import (
    FlowExpense,
    FlowIncome,
    ScheduleLiability,
    ValuationAsset,
    create_default_registry,
)


class _Plugin:
    """Minimal plugin with configurable dependencies."""

    def __init__(self, type: str, dependencies=()):
        self.type = type
        self.display_name = type.title()
        self.dependencies = tuple(dependencies)

    def create_sources(self, record):
        return []


def _types(plugins) -> list[str]:
    return [p.type for p in plugins]


class TestRegistration:
    def test_register_and_lookup(self):
        registry = PluginRegistry()
        asset = ValuationAsset()
        registry.register(asset)

        assert registry.get_plugin("asset") is asset
        assert registry.has_plugin("asset")
        assert "asset" in registry
        assert registry.get_plugin("income") is None
        assert len(registry) == 1

    def test_missing_dependency_raises(self):
        registry = PluginRegistry()

        with pytest.raises(MissingDependencyError) as exc_info:
            registry.register(FlowIncome())

        assert str(exc_info.value) == "Plugin 'income' requires: asset"
        assert exc_info.value.missing == ["asset"]
        assert "income" not in registry

    def test_missing_dependencies_are_all_listed(self):
        registry = PluginRegistry()

        with pytest.raises(ConfigError, match="requires: a, b"):
            registry.register(_Plugin("c", dependencies=["a", "b"]))

    def test_overwrite_warns_and_replaces(self):
        registry = PluginRegistry()
        first = ValuationAsset()
        second = ValuationAsset()
        registry.register(first)

        with pytest.warns(UserWarning, match="already registered. Overwriting"):
            registry.register(second)

        assert registry.get_plugin("asset") is second
        assert len(registry) == 1

    def test_unregister(self):
        registry = PluginRegistry()
        registry.register(ValuationAsset())

        registry.unregister("missing")
        registry.unregister("asset")

        assert len(registry) == 0
        assert registry.get_all_plugins() == []

    def test_default_registry_contents(self):
        registry = create_default_registry()

        assert _types(registry.get_all_plugins()) == [
            "asset",
            "income",
            "expense",
            "liability",
        ]
        assert isinstance(registry.get_plugin("expense"), FlowExpense)
        assert isinstance(registry.get_plugin("liability"), ScheduleLiability)

    def test_registries_are_independent(self):
        one = create_default_registry()
        two = create_default_registry()
        one.unregister("liability")

        assert "liability" in two


class TestSorting:
    """Topological ordering of plugins."""

    def test_dependencies_come_first(self):
        registry = PluginRegistry()
        registry.register(_Plugin("a"))
        registry.register(_Plugin("b", dependencies=["a"]))
        # Re-registering a after removing it puts b first in registration order
        registry.unregister("a")
        registry.register(_Plugin("a"))

        assert _types(registry.get_all_plugins()) == ["b", "a"]
        assert _types(registry.get_all_plugins_sorted()) == ["a", "b"]

    def test_independent_plugins_keep_registration_order(self):
        registry = PluginRegistry()
        for name in ["x", "y", "z"]:
            registry.register(_Plugin(name))

        assert _types(registry.get_all_plugins_sorted()) == ["x", "y", "z"]

    def test_diamond_dependencies(self):
        registry = PluginRegistry()
        registry.register(_Plugin("a"))
        registry.register(_Plugin("b", dependencies=["a"]))
        registry.register(_Plugin("c", dependencies=["a"]))
        registry.register(_Plugin("d", dependencies=["b", "c"]))

        order = _types(registry.get_all_plugins_sorted())

        assert order == ["a", "b", "c", "d"]

    def test_unregistered_dependencies_are_skipped(self):
        registry = PluginRegistry()
        registry.register(_Plugin("a"))
        registry.register(_Plugin("b", dependencies=["a"]))
        registry.unregister("a")

        assert _types(registry.get_all_plugins_sorted()) == ["b"]

    def test_cycle_is_detected(self):
        registry = PluginRegistry()
        registry.register(_Plugin("a"))
        registry.register(_Plugin("b", dependencies=["a"]))
        with pytest.warns(UserWarning):
            registry.register(_Plugin("a", dependencies=["b"]))

        with pytest.raises(CircularDependencyError, match="Circular dependency detected involving"):
            registry.get_all_plugins_sorted()

    def test_sorted_contains_each_plugin_once(self):
        registry = create_default_registry()

        order = _types(registry.get_all_plugins_sorted())

        assert order[0] == "asset"
        assert sorted(order) == sorted(set(order))
        assert len(order) == 4


def test_every_kind_has_a_default_plugin():
    """Default registry and RECORD_TYPES cover exactly the known kinds."""
    from finforecast.core.kinds import K
    from finforecast.plugins import RECORD_TYPES

    registry = create_default_registry()

    assert sorted(_types(registry.get_all_plugins())) == sorted(K.all_kinds())
    assert set(RECORD_TYPES) == set(K.all_kinds())
