"""
Registry of entity-type plugins with dependency validation.

Provides lookup and dependency ordering for the simulation engine.
"""
from __future__ import annotations

import logging
import warnings
from typing import TYPE_CHECKING

from .errors import CircularDependencyError, MissingDependencyError

if TYPE_CHECKING:
    from .interfaces import ISourcePlugin

logger = logging.getLogger(__name__)


class PluginRegistry:
    """
    Registry of capability plugins keyed by entity type.

    The PluginRegistry tells the Simulator which plugin owns each source type and
    in which order month-end processing has to run. It is an explicit value built
    once before a simulation run and passed to the Simulator; it is only read
    during the run.

    **Use Cases:**
    - Resolving the plugin of a source during simulation
    - Ordering month-end hooks so dependents see their dependencies' updates
    - Validating that plugins are registered in dependency order

    **Example Usage:**
        ```python
        from finforecast.core.registry import PluginRegistry
        from finforecast.plugins import FlowIncome, ValuationAsset

        registry = PluginRegistry()
        registry.register(ValuationAsset())
        registry.register(FlowIncome())   # depends on 'asset'

        registry.get_plugin("income")
        [p.type for p in registry.get_all_plugins_sorted()]  # ['asset', 'income']
        ```

    **Key Features:**
    - Registration fails when a declared dependency is not registered yet
    - Re-registering a type overwrites it with a warning
    - Depth-first topological ordering with explicit cycle detection
    """

    def __init__(self) -> None:
        self._plugins: dict[str, ISourcePlugin] = {}

    def register(self, plugin: ISourcePlugin) -> None:
        """
        Register ``plugin`` for its entity type.

        Args:
            plugin: Plugin to register

        Raises:
            MissingDependencyError: If any declared dependency is not registered yet
        """
        dependencies = list(getattr(plugin, "dependencies", None) or ())
        missing = [dep for dep in dependencies if dep not in self._plugins]
        if missing:
            raise MissingDependencyError(plugin.type, missing)

        if plugin.type in self._plugins:
            warnings.warn(
                f"Plugin for type '{plugin.type}' already registered. Overwriting.",
                category=UserWarning,
                stacklevel=2,
            )
        self._plugins[plugin.type] = plugin
        logger.debug("Registered plugin '%s' (depends on %s)", plugin.type, dependencies)

    def unregister(self, type: str) -> None:
        """Remove the plugin for ``type``; no-op when absent."""
        self._plugins.pop(type, None)

    def get_plugin(self, type: str) -> ISourcePlugin | None:
        return self._plugins.get(type)

    def get_all_plugins(self) -> list[ISourcePlugin]:
        """All plugins in registration order."""
        return list(self._plugins.values())

    def has_plugin(self, type: str) -> bool:
        return type in self._plugins

    def get_all_plugins_sorted(self) -> list[ISourcePlugin]:
        """
        All plugins ordered so that each one follows its dependencies.

        Depth-first topological sort over ``dependencies`` starting from the
        registration order. Dependencies that are no longer registered (after
        ``unregister``) are skipped.

        Raises:
            CircularDependencyError: If the dependency graph contains a cycle
        """
        result: list[ISourcePlugin] = []
        visited: set[str] = set()
        visiting: set[str] = set()

        def visit(type_: str) -> None:
            if type_ in visited:
                return
            if type_ in visiting:
                raise CircularDependencyError(type_)
            plugin = self._plugins.get(type_)
            if plugin is None:
                return

            visiting.add(type_)
            for dep in getattr(plugin, "dependencies", None) or ():
                visit(dep)
            visiting.discard(type_)
            visited.add(type_)
            result.append(plugin)

        for type_ in self._plugins:
            visit(type_)
        return result

    def __len__(self) -> int:
        return len(self._plugins)

    def __contains__(self, type: str) -> bool:
        return type in self._plugins

    def __repr__(self) -> str:
        return f"PluginRegistry(plugins={list(self._plugins)})"
