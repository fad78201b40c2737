"""
Running balances per entity type and source id.
"""

from __future__ import annotations

from collections.abc import Iterator


class BalanceStore:
    """
    Two-level table of running balances keyed by ``(entity type, source id)``.

    The store is owned by a single ``Simulator.simulate()`` call and handed by
    reference to every plugin hook of that run. An entry exists only once a plugin
    created it (initial balance or monthly effect); absence is not the same as zero.

    **Example Usage:**
        ```python
        store = BalanceStore()
        store.set("asset", "savings", 1_000.0)
        store.adjust("asset", "savings", 250.0)
        store.get("asset", "savings")   # 1250.0
        store.snapshot()                # {"asset": {"savings": 1250.0}}
        ```
    """

    def __init__(self) -> None:
        self._balances: dict[str, dict[str, float]] = {}

    def ensure_type(self, entity_type: str) -> dict[str, float]:
        """Return the bucket for ``entity_type``, creating it when missing."""
        return self._balances.setdefault(entity_type, {})

    def has(self, entity_type: str, source_id: str) -> bool:
        return source_id in self._balances.get(entity_type, {})

    def get(
        self, entity_type: str, source_id: str, default: float | None = None
    ) -> float | None:
        return self._balances.get(entity_type, {}).get(source_id, default)

    def set(self, entity_type: str, source_id: str, value: float) -> None:
        self.ensure_type(entity_type)[source_id] = float(value)

    def adjust(self, entity_type: str, source_id: str, delta: float) -> float:
        """Add ``delta`` to a balance (absent balances start at 0.0); return the new value."""
        bucket = self.ensure_type(entity_type)
        bucket[source_id] = bucket.get(source_id, 0.0) + delta
        return bucket[source_id]

    def types(self) -> list[str]:
        return list(self._balances)

    def items(self, entity_type: str) -> Iterator[tuple[str, float]]:
        return iter(list(self._balances.get(entity_type, {}).items()))

    def is_empty(self) -> bool:
        return not any(self._balances.values())

    def snapshot(self) -> dict[str, dict[str, float]]:
        """Copy of the current contents as nested dicts."""
        return {t: dict(bucket) for t, bucket in self._balances.items()}

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._balances.values())

    def __repr__(self) -> str:
        return f"BalanceStore({self._balances!r})"
