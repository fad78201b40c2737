"""
Utility functions for FinForecast.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

import numpy as np


def year_month_to_index(year: int, month: int) -> int:
    """
    Convert a (simulation year, calendar month) pair into a zero-based month index.

    Years are counted from 1 (the first simulated year) and months run 1..12, so
    ``year_month_to_index(1, 1) == 0`` and ``year_month_to_index(2, 3) == 14``.

    **Args:**
        year: Simulation year, starting at 1
        month: Calendar month within that year (1-12)

    **Returns:**
        Zero-based month offset from the simulation's month 0

    **Raises:**
        ValueError: If year < 1 or month outside 1..12
    """
    if isinstance(year, bool) or not isinstance(year, int) or year < 1:
        raise ValueError(f"year must be an integer >= 1, got {year!r}")
    if isinstance(month, bool) or not isinstance(month, int) or not 1 <= month <= 12:
        raise ValueError(f"month must be an integer between 1 and 12, got {month!r}")
    return (year - 1) * 12 + (month - 1)


def index_to_year_month(month_index: int) -> tuple[int, int]:
    """Inverse of :func:`year_month_to_index`, for display purposes."""
    if month_index < 0:
        raise ValueError(f"month_index must be >= 0, got {month_index}")
    return month_index // 12 + 1, month_index % 12 + 1


@dataclass(frozen=True)
class TimeRange:
    """Inclusive month window; a missing bound is open."""

    start_month_index: int | None = None
    end_month_index: int | None = None


def is_within_time_range(time_range: TimeRange | None, month_index: int) -> bool:
    """Check whether ``month_index`` falls inside ``time_range`` (None = always)."""
    if time_range is None:
        return True
    after_start = (
        time_range.start_month_index is None
        or month_index >= time_range.start_month_index
    )
    before_end = (
        time_range.end_month_index is None or month_index <= time_range.end_month_index
    )
    return after_start and before_end


def active_mask(months: int, start: int, end: int | None = None) -> np.ndarray:
    """
    Create a boolean mask marking the months in which a window is active.

    **Args:**
        months: Length of the simulated horizon
        start: First active month index (inclusive)
        end: Last active month index (inclusive); None = until the horizon ends

    **Returns:**
        Boolean array of length ``months``

    **Example:**
        ```python
        from finforecast.core.utils import active_mask

        mask = active_mask(24, start=6, end=17)
        mask[:6].any()   # False
        mask[6:18].all() # True
        ```
    """
    idx = np.arange(months)
    mask = idx >= start
    if end is not None:
        mask &= idx <= end
    return mask


def slugify_name(name: str) -> str:
    """
    Derive an identifier from a human-readable name.

    Lowercases and replaces runs of whitespace/punctuation with underscores,
    e.g. ``"Cash Reserve"`` -> ``"cash_reserve"``.
    """
    return re.sub(r"[^0-9a-z]+", "_", name.strip().lower()).strip("_")
