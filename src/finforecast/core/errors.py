"""
Error classes for FinForecast.

This module defines the exception hierarchy used throughout the FinForecast system
for reporting configuration errors, invalid recurrence rules, plugin wiring problems
and out-of-range simulation parameters.
"""


class ConfigError(Exception):
    """
    Configuration error during simulation setup or validation.

    This exception is raised when the inputs handed to the simulation core are
    malformed: invalid recurrence rules, plugins registered out of dependency order,
    sources whose entity type has no plugin, or simulation parameters out of range.

    **Common Causes:**
    - A custom cycle without ``interval``/``interval_unit``
    - A plugin registered before the plugins it depends on
    - A circular dependency between plugins
    - A simulation horizon outside 1..1200 months

    **Example Usage:**
        ```python
        from finforecast.core.errors import ConfigError
        from finforecast.core.simulator import create_simulator

        try:
            create_simulator(calculator, 0, registry)
        except ConfigError as e:
            print(f"Configuration error: {e}")
        ```

    **When to Use:**
    - During simulator construction and run validation
    - In plugin registration
    - In cycle evaluation when a rule cannot be interpreted
    """

    pass


class SimulationRangeError(ConfigError):
    """Raised when the simulation horizon is outside the supported range."""


class CycleConfigError(ConfigError):
    """Raised when a recurrence rule cannot be evaluated."""


class MissingDependencyError(ConfigError):
    """
    Raised when a plugin is registered before one of its dependencies.

    Attributes:
        plugin_type: The entity type being registered
        missing: The dependency types that were not registered yet
    """

    def __init__(self, plugin_type: str, missing: list[str]):
        self.plugin_type = plugin_type
        self.missing = list(missing)
        super().__init__(f"Plugin '{plugin_type}' requires: {', '.join(self.missing)}")


class CircularDependencyError(ConfigError):
    """
    Raised when plugin dependencies form a cycle.

    Attributes:
        plugin_type: The entity type that closed the cycle
    """

    def __init__(self, plugin_type: str):
        self.plugin_type = plugin_type
        super().__init__(f"Circular dependency detected involving '{plugin_type}'")


class MissingPluginError(ConfigError):
    """
    Raised when sources or records reference entity types with no registered plugin.

    Attributes:
        types: Sorted list of the unregistered entity types
    """

    def __init__(self, types):
        self.types = sorted(set(types))
        super().__init__(
            f"No plugin registered for entity type(s): {', '.join(self.types)}"
        )


class OverdraftError(ConfigError):
    """Raised when an asset configured with overdraft_policy='raise' goes negative."""
