"""Shared domain models."""

from .enums import DataCategory, PriceSource, RefreshInterval  # noqa: F401
from .snapshot import (  # noqa: F401
    BlockExtras,
    BlockInfo,
    DifficultyAdjustment,
    Fees,
    MempoolStats,
    PriceDetails,
    PriceQuote,
    Snapshot,
)

__all__ = [
    "DataCategory",
    "PriceSource",
    "RefreshInterval",
    "BlockExtras",
    "BlockInfo",
    "DifficultyAdjustment",
    "Fees",
    "MempoolStats",
    "PriceDetails",
    "PriceQuote",
    "Snapshot",
]
