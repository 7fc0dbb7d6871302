"""
mempool.space payload mappers.

Each mapper turns a decoded JSON payload into a domain model, raising
ValueError/TypeError when a required field cannot be resolved. Optional
fields resolve to None individually.
"""

from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

from blockwatch.ingestion.decoding import (
    as_float,
    as_float_list,
    as_int,
    as_mapping,
    as_pool_name,
    as_str,
    probe,
)
from blockwatch.shared.models import (
    BlockExtras,
    BlockInfo,
    DifficultyAdjustment,
    Fees,
    MempoolStats,
)

# Candidate keys per field, in probe order
BLOCK_KEYS = {
    "id": ("id", "hash"),
    "height": ("height",),
    "timestamp": ("timestamp", "time"),
    "tx_count": ("tx_count", "txCount", "nTx"),
    "size": ("size",),
    "weight": ("weight",),
    "difficulty": ("difficulty",),
}

EXTRAS_KEYS = {
    "fee_range": ("feeRange", "fee_range"),
    "median_fee": ("medianFee", "median_fee"),
    "total_fees": ("totalFees", "total_fees"),
    "reward": ("reward",),
    "pool_name": ("pool", "poolName", "pool_name", "miner"),
}

DIFFICULTY_KEYS = {
    "progress_percent": ("progressPercent",),
    "remaining_blocks": ("remainingBlocks",),
    "estimated_retarget_date": ("estimatedRetargetDate",),
    "difficulty_change": ("difficultyChange", "estimatedDifficultyDelta"),
    "time_avg": ("timeAvg", "averageBlockTime"),
}

FEE_TIER_INDEXES = (0, 2, 5)  # fastest, half-hour, hour


def _require(value: Any, field: str) -> Any:
    if value is None:
        raise ValueError(f"Missing required field '{field}'")
    return value


def _first_element(payload: Any) -> Any:
    if not isinstance(payload, list):
        raise TypeError(f"Expected list, got {type(payload).__name__}")
    if not payload:
        raise ValueError("Empty block list")
    return payload[0]


def map_block_extras(raw: Any) -> BlockExtras | None:
    extras = probe(raw, ("extras",), as_mapping)
    if extras is None:
        return None
    return BlockExtras(
        fee_range=probe(extras, EXTRAS_KEYS["fee_range"], as_float_list) or [],
        median_fee=probe(extras, EXTRAS_KEYS["median_fee"], as_float),
        total_fees=probe(extras, EXTRAS_KEYS["total_fees"], as_int),
        reward=probe(extras, EXTRAS_KEYS["reward"], as_int),
        pool_name=probe(extras, EXTRAS_KEYS["pool_name"], as_pool_name),
    )


def map_latest_block(payload: Any) -> BlockInfo:
    """Newest-first block listing -> element 0."""
    raw = as_mapping(_first_element(payload))
    return BlockInfo(
        id=_require(probe(raw, BLOCK_KEYS["id"], as_str), "id"),
        height=_require(probe(raw, BLOCK_KEYS["height"], as_int), "height"),
        timestamp=_require(probe(raw, BLOCK_KEYS["timestamp"], as_int), "timestamp"),
        tx_count=_require(probe(raw, BLOCK_KEYS["tx_count"], as_int), "tx_count"),
        size=_require(probe(raw, BLOCK_KEYS["size"], as_int), "size"),
        weight=_require(probe(raw, BLOCK_KEYS["weight"], as_int), "weight"),
        difficulty=probe(raw, BLOCK_KEYS["difficulty"], as_float),
        extras=map_block_extras(raw),
    )


def map_mempool_stats(payload: Any) -> MempoolStats:
    raw = as_mapping(payload)
    return MempoolStats(
        count=_require(probe(raw, ("count",), as_int), "count"),
        vsize=_require(probe(raw, ("vsize",), as_int), "vsize"),
        total_fee=probe(raw, ("total_fee", "totalFee"), as_int),
    )


def map_recommended_fees(payload: Any) -> Fees:
    raw = as_mapping(payload)
    return Fees(
        fastest_fee=_require(probe(raw, ("fastestFee",), as_float), "fastestFee"),
        half_hour_fee=_require(probe(raw, ("halfHourFee",), as_float), "halfHourFee"),
        hour_fee=_require(probe(raw, ("hourFee",), as_float), "hourFee"),
        economy_fee=probe(raw, ("economyFee",), as_float),
        minimum_fee=probe(raw, ("minimumFee",), as_float),
    )


def map_mempool_block_medians(payload: Any) -> list[float]:
    """Projected-block list -> median fee per upcoming block."""
    if not isinstance(payload, list):
        raise TypeError(f"Expected list, got {type(payload).__name__}")
    medians = []
    for index, entry in enumerate(payload):
        median = probe(entry, ("medianFee", "median_fee"), as_float)
        medians.append(_require(median, f"[{index}].medianFee"))
    return medians


def round_fee(fee: float) -> float:
    """One decimal, half away from zero."""
    quantized = Decimal(str(fee)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return float(quantized)


def derive_fee_tiers(medians: Sequence[float]) -> Fees | None:
    """
    Derive fee tiers from per-block median estimates.

    Takes index 0 (fastest), min(2, last) (half-hour) and min(5, last)
    (hour). Short lists make the later tiers coincide.
    """
    if not medians:
        return None
    last = len(medians) - 1
    fastest, half_hour, hour = (
        round_fee(medians[min(index, last)]) for index in FEE_TIER_INDEXES
    )
    return Fees(fastest_fee=fastest, half_hour_fee=half_hour, hour_fee=hour)


def map_difficulty(payload: Any) -> DifficultyAdjustment:
    raw = as_mapping(payload)
    adjustment = DifficultyAdjustment(
        progress_percent=probe(raw, DIFFICULTY_KEYS["progress_percent"], as_float),
        remaining_blocks=probe(raw, DIFFICULTY_KEYS["remaining_blocks"], as_int),
        estimated_retarget_date=probe(
            raw, DIFFICULTY_KEYS["estimated_retarget_date"], as_int
        ),
        difficulty_change=probe(raw, DIFFICULTY_KEYS["difficulty_change"], as_float),
        time_avg=probe(raw, DIFFICULTY_KEYS["time_avg"], as_float),
    )
    # An object with none of the known fields is a schema mismatch, not data
    if all(value is None for value in adjustment.model_dump().values()):
        raise ValueError("Difficulty payload has no recognised fields")
    return adjustment


def map_price(payload: Any, currency: str = "USD") -> float:
    raw = as_mapping(payload)
    return _require(probe(raw, (currency.upper(), currency.lower()), as_float), currency)
