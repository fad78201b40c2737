"""
Schedule plugins for liability records.
"""

from .liability import LiabilityRecord, ScheduleLiability

__all__ = [
    "ScheduleLiability",
    "LiabilityRecord",
]
