"""
Valuation plugins for balance-holding asset records.
"""

from .asset import AssetRecord, ValuationAsset

__all__ = [
    "ValuationAsset",
    "AssetRecord",
]
