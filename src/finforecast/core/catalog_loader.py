"""Utilities for loading household scenario catalogs from YAML/JSON sources."""

from __future__ import annotations

import json
from copy import deepcopy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .cycle import CycleType, IntervalUnit
from .errors import ConfigError
from .kinds import K
from .scenario import Group
from .simulator import MAX_SIMULATION_MONTHS, MIN_SIMULATION_MONTHS
from .utils import slugify_name

__all__ = [
    "CatalogError",
    "CatalogDefinition",
    "SECTION_KINDS",
    "load_catalog",
]

# catalog section -> entity kind
SECTION_KINDS: dict[str, str] = {
    "assets": K.ASSET,
    "incomes": K.INCOME,
    "expenses": K.EXPENSE,
    "liabilities": K.LIABILITY,
}

_CYCLE_FIELDS = {
    K.ASSET: ("contributions", "withdrawals"),
    K.INCOME: ("cycles",),
    K.EXPENSE: ("cycles",),
    K.LIABILITY: ("cycles",),
}


class CatalogError(ValueError):
    """Raised when a catalog file cannot be parsed or validated."""


@dataclass(slots=True)
class CatalogDefinition:
    """Structured representation of a scenario catalog."""

    records: dict[str, list[Any]]
    groups: list[Group] = field(default_factory=list)
    simulation_months: int | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    source: str = "<memory>"

    def record_count(self) -> int:
        return sum(len(items) for items in self.records.values())


def load_catalog(
    source: str | Path | dict[str, Any], *, format: str | None = None
) -> CatalogDefinition:
    """Parse a scenario catalog from YAML/JSON/dict into typed records."""

    mapping, label = _read_source(source, format=format)
    unknown = sorted(
        set(mapping) - set(SECTION_KINDS) - {"groups", "simulation", "version", "name"}
    )
    if unknown:
        raise CatalogError(f"{label}: unknown section(s): {', '.join(unknown)}")

    groups = _normalize_groups(mapping.get("groups"), label)
    records: dict[str, list[Any]] = {}
    for section, kind in SECTION_KINDS.items():
        records[kind] = _normalize_records(mapping.get(section), kind, f"{label}::{section}")

    if not any(records.values()):
        raise CatalogError(f"{label}: catalog must define at least one record")

    simulation = _ensure_dict(mapping.get("simulation"), f"{label}::simulation")
    months = _coerce_months(simulation.get("months"), f"{label}::simulation.months")

    metadata = {
        "version": mapping.get("version", 1),
        "name": mapping.get("name", ""),
    }
    return CatalogDefinition(
        records=records,
        groups=groups,
        simulation_months=months,
        metadata=metadata,
        source=label,
    )


def _read_source(
    source: str | Path | dict[str, Any], *, format: str | None
) -> tuple[dict[str, Any], str]:
    if isinstance(source, dict):
        return deepcopy(source), "<mapping>"

    path = Path(source)
    if not path.exists():
        raise FileNotFoundError(path)

    fmt = (format or path.suffix.lstrip(".")).lower()
    text = path.read_text(encoding="utf-8")
    try:
        if fmt in {"yaml", "yml", ""}:
            data = yaml.safe_load(text)
        elif fmt == "json":
            data = json.loads(text)
        else:
            raise CatalogError(f"Unsupported catalog format '{fmt}' for {path}")
    except (yaml.YAMLError, json.JSONDecodeError) as exc:
        raise CatalogError(f"{path}: could not parse {fmt or 'yaml'}: {exc}") from exc

    if not isinstance(data, dict):
        raise CatalogError(f"Catalog root must be a mapping (source={path})")
    return data, str(path)


def _normalize_groups(raw: Any, label: str) -> list[Group]:
    entries = _ensure_list(raw, f"{label}::groups", allow_none=True)
    if entries is None:
        return []

    groups: list[Group] = []
    seen: set[str] = set()
    for idx, entry in enumerate(entries):
        ctx = f"{label}::groups[{idx}]"
        data = _ensure_dict(entry, ctx)
        name = _coerce_str(data.get("name"), f"{ctx}.name")
        group_id = data.get("id") or slugify_name(name)
        if group_id in seen:
            raise CatalogError(f"{ctx}: duplicate group id '{group_id}'")
        seen.add(group_id)
        is_active = data.get("is_active", True)
        if not isinstance(is_active, bool):
            raise CatalogError(f"{ctx}.is_active must be boolean when provided")
        groups.append(
            Group(id=group_id, name=name, is_active=is_active, color=data.get("color"))
        )
    return groups


def _normalize_records(raw: Any, kind: str, label: str) -> list[Any]:
    from finforecast.plugins import RECORD_TYPES

    entries = _ensure_list(raw, label, allow_none=True)
    if entries is None:
        return []

    record_type = RECORD_TYPES[kind]
    records: list[Any] = []
    for idx, entry in enumerate(entries):
        ctx = f"{label}[{idx}]"
        data = _ensure_dict(entry, ctx)
        name = _coerce_str(data.get("name"), f"{ctx}.name")
        if not data.get("id"):
            data["id"] = slugify_name(name)
            if not data["id"]:
                raise CatalogError(f"{ctx}: could not derive an id from name '{name}'")

        for cycle_field in _CYCLE_FIELDS[kind]:
            _check_cycles(data.get(cycle_field), f"{ctx}.{cycle_field}")

        try:
            records.append(record_type.from_dict(data))
        except (ConfigError, KeyError, TypeError, ValueError) as exc:
            raise CatalogError(f"{ctx}: {exc}") from exc
    return records


def _check_cycles(raw: Any, ctx: str) -> None:
    entries = _ensure_list(raw, ctx, allow_none=True)
    if entries is None:
        return
    for idx, entry in enumerate(entries):
        cctx = f"{ctx}[{idx}]"
        data = _ensure_dict(entry, cctx)
        cycle_type = data.get("type", CycleType.MONTHLY.value)
        if cycle_type not in {t.value for t in CycleType}:
            raise CatalogError(f"{cctx}.type: unknown cycle type '{cycle_type}'")
        amount = data.get("amount")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            raise CatalogError(f"{cctx}.amount: expected a number")
        if amount < 0:
            raise CatalogError(f"{cctx}.amount: must be >= 0, got {amount}")
        if cycle_type == CycleType.CUSTOM.value:
            interval = data.get("interval")
            if isinstance(interval, bool) or not isinstance(interval, int) or interval < 1:
                raise CatalogError(f"{cctx}.interval: custom cycles need a positive integer interval")
            if data.get("interval_unit") not in {u.value for u in IntervalUnit}:
                raise CatalogError(f"{cctx}.interval_unit: expected 'month' or 'year'")


def _coerce_months(value: Any, ctx: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise CatalogError(f"{ctx}: expected integer months")
    if not MIN_SIMULATION_MONTHS <= value <= MAX_SIMULATION_MONTHS:
        raise CatalogError(
            f"{ctx}: must be between {MIN_SIMULATION_MONTHS} and {MAX_SIMULATION_MONTHS}"
        )
    return value


def _coerce_str(value: Any, ctx: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise CatalogError(f"{ctx}: expected non-empty string")
    return value


def _ensure_dict(value: Any, ctx: str) -> dict[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise CatalogError(f"{ctx}: expected a mapping")
    return deepcopy(value)


def _ensure_list(value: Any, ctx: str, *, allow_none: bool = False) -> list[Any] | None:
    if value is None:
        if allow_none:
            return None
        raise CatalogError(f"{ctx}: expected a list")
    if not isinstance(value, list):
        raise CatalogError(f"{ctx}: expected a list")
    return list(value)
