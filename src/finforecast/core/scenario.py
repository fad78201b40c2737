"""
Scenario assembly: household records + plugin registry -> simulation run.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from .calculator import Calculator
from .cycle import Cycle, cycle_amounts
from .errors import ConfigError, CycleConfigError, MissingPluginError
from .interfaces import IGroupScoped
from .kinds import K
from .registry import PluginRegistry
from .results import SimulationResult
from .simulator import DEFAULT_SIMULATION_MONTHS, SimulationParams, Simulator

if TYPE_CHECKING:
    from .catalog_loader import CatalogDefinition

logger = logging.getLogger(__name__)


@dataclass
class Group:
    """
    Display group records can belong to (e.g. one per household member).

    Attributes:
        id: Identifier of the group
        name: Display name
        is_active: Whether records of this group take part in runs by default
        color: Display color
    """

    id: str
    name: str
    is_active: bool = True
    color: str | None = None


class Scenario:
    """
    A household's records, ready to be turned into sources and simulated.

    **Example Usage:**
        ```python
        from finforecast import Scenario
        from finforecast.core.cycle import Cycle
        from finforecast.plugins import AssetRecord, IncomeRecord

        scenario = Scenario(
            records={
                "asset": [AssetRecord(id="savings", name="Savings", base_amount=10_000)],
                "income": [
                    IncomeRecord(
                        id="salary", name="Salary", asset_source_id="savings",
                        cycles=[Cycle(id="c1", type="monthly", amount=3_000)],
                    )
                ],
            }
        )
        result = scenario.run(simulation_months=120)
        ```

    Note:
        A registry is created with the default plugins when none is given. Records
        are converted kind by kind in the registry's dependency order, so asset
        sources precede the sources that move money in and out of them.
    """

    def __init__(
        self,
        records: Mapping[str, Iterable[Any]],
        registry: PluginRegistry | None = None,
        groups: Iterable[Group] = (),
        name: str = "",
    ):
        if registry is None:
            from finforecast.plugins import create_default_registry

            registry = create_default_registry()
        self.records: dict[str, list[Any]] = {
            kind: list(items) for kind, items in records.items()
        }
        self.registry = registry
        self.groups = list(groups)
        self.name = name

    @classmethod
    def from_catalog(
        cls, catalog: CatalogDefinition, registry: PluginRegistry | None = None
    ) -> Scenario:
        return cls(
            records=catalog.records,
            registry=registry,
            groups=catalog.groups,
            name=catalog.metadata.get("name", ""),
        )

    def default_active_group_ids(self) -> set[str] | None:
        """Active groups when groups are declared; None (= everything) otherwise."""
        if not self.groups:
            return None
        return {g.id for g in self.groups if g.is_active}

    def build_calculator(
        self,
        active_group_ids: Iterable[str] | None = None,
        strict_plugins: bool = True,
    ) -> Calculator:
        """
        Convert every record into sources and load them into a fresh Calculator.

        Args:
            active_group_ids: Only records of these groups are included; records
                without a group are always included. Defaults to the active groups.
            strict_plugins: When False, records of a kind with no registered
                plugin are left out with one warning per kind

        Raises:
            MissingPluginError: In strict mode, if a record kind has no registered plugin
        """
        unknown = [k for k, items in self.records.items() if items and k not in self.registry]
        if unknown:
            if strict_plugins:
                raise MissingPluginError(unknown)
            for kind in sorted(unknown):
                logger.warning(
                    "No plugin registered for entity type '%s'; its %d record(s) are skipped",
                    kind,
                    len(self.records[kind]),
                )

        active = (
            set(active_group_ids)
            if active_group_ids is not None
            else self.default_active_group_ids()
        )

        calculator = Calculator()
        for plugin in self.registry.get_all_plugins_sorted():
            for record in self.records.get(plugin.type, []):
                if active is not None and isinstance(plugin, IGroupScoped):
                    group_id = plugin.get_group_id(record)
                    if group_id is not None and group_id not in active:
                        continue
                for source in plugin.create_sources(record):
                    calculator.add_source(source)
        logger.debug("Built calculator with %d sources", len(calculator))
        return calculator

    def validate(self, simulation_months: int = DEFAULT_SIMULATION_MONTHS) -> list[str]:
        """
        Check the scenario for wiring problems without running it.

        Args:
            simulation_months: Horizon over which every recurrence rule is evaluated

        Returns:
            Human-readable problem descriptions (empty when the scenario is sound)
        """
        problems: list[str] = []

        for kind, items in self.records.items():
            if items and kind not in self.registry:
                problems.append(f"No plugin registered for entity type '{kind}'")

        try:
            self.registry.get_all_plugins_sorted()
        except ConfigError as exc:
            problems.append(str(exc))

        seen: dict[str, str] = {}
        for kind, items in self.records.items():
            for record in items:
                record_id = getattr(record, "id", None)
                if record_id in seen:
                    problems.append(
                        f"Duplicate id '{record_id}' ({seen[record_id]} and {kind}); the later one replaces the earlier"
                    )
                else:
                    seen[record_id] = kind

        asset_ids = {getattr(r, "id", None) for r in self.records.get(K.ASSET, [])}
        for kind, items in self.records.items():
            for record in items:
                link = getattr(record, "asset_source_id", None)
                if link and link not in asset_ids:
                    problems.append(
                        f"{kind} '{record.id}' references unknown asset '{link}'"
                    )

        group_ids = {g.id for g in self.groups}
        if group_ids:
            for kind, items in self.records.items():
                for record in items:
                    group_id = getattr(record, "group_id", None)
                    if group_id is not None and group_id not in group_ids:
                        problems.append(
                            f"{kind} '{record.id}' references unknown group '{group_id}'"
                        )

        for kind, items in self.records.items():
            for record in items:
                for field_name, cycles in _cycle_fields(record):
                    try:
                        cycle_amounts(cycles, simulation_months)
                    except CycleConfigError as exc:
                        problems.append(f"{kind} '{record.id}' {field_name}: {exc}")
        return problems

    def run(
        self,
        simulation_months: int = DEFAULT_SIMULATION_MONTHS,
        active_group_ids: Iterable[str] | None = None,
        strict_plugins: bool = True,
    ) -> SimulationResult:
        """Build the calculator and simulator and run the projection."""
        params = SimulationParams(
            simulation_months=simulation_months, strict_plugins=strict_plugins
        )
        calculator = self.build_calculator(active_group_ids, strict_plugins=strict_plugins)
        simulator = Simulator(calculator, params, self.registry)
        return simulator.simulate()

    def __repr__(self) -> str:
        counts = {kind: len(items) for kind, items in self.records.items()}
        return f"Scenario(name={self.name!r}, records={counts})"


def _cycle_fields(record: Any) -> list[tuple[str, list[Cycle]]]:
    """(attribute name, cycles) for every list-of-Cycle attribute of ``record``."""
    return [
        (name, value)
        for name, value in getattr(record, "__dict__", {}).items()
        if isinstance(value, list) and value and all(isinstance(c, Cycle) for c in value)
    ]
