"""
Bitcoin Utilities
=================

Values derived from snapshot fields: sats conversion, fee span text,
block subsidy by height and difficulty-epoch helpers.
"""

import math
from collections.abc import Sequence

SATS_PER_BTC = 100_000_000
INITIAL_SUBSIDY_BTC = 50.0
HALVING_INTERVAL = 210_000
MAX_HALVINGS = 64
TARGET_BLOCK_MINUTES = 10


def sats_per_unit(price: float) -> int | None:
    """
    Number of satoshis one unit of fiat buys.

    Args:
        price: BTC price in the fiat currency

    Returns:
        round(100,000,000 / price), or None for a non-positive price
    """
    if price <= 0:
        return None
    return round(SATS_PER_BTC / price)


def block_subsidy(height: int) -> float:
    """
    Block subsidy in BTC following the halving schedule.

    50 x 2^-floor(height / 210000), and zero once 64 halvings have passed.

    Raises:
        ValueError: If height is negative
    """
    if height < 0:
        raise ValueError(f"Block height must be non-negative, got {height}")

    halvings = height // HALVING_INTERVAL
    if halvings >= MAX_HALVINGS:
        return 0.0
    return math.ldexp(INITIAL_SUBSIDY_BTC, -halvings)


def format_fee_span(fee_range: Sequence[float] | None) -> str | None:
    """
    Render a block fee range as "min-max sat/vB".

    Returns None for an empty range and a single value when min == max.
    """
    if not fee_range:
        return None

    low = min(fee_range)
    high = max(fee_range)
    if low == high:
        return f"{low:.1f} sat/vB"
    return f"{low:.1f}-{high:.1f} sat/vB"


def average_block_time_seconds(time_avg_ms: float | None) -> float | None:
    """Convert the difficulty endpoint's average block time (ms) to seconds."""
    if time_avg_ms is None:
        return None
    return time_avg_ms / 1000.0


def days_until_retarget(remaining_blocks: int | None) -> float | None:
    """Estimated days until the next retarget at the 10 minute block target."""
    if remaining_blocks is None:
        return None
    return remaining_blocks * TARGET_BLOCK_MINUTES / 60.0 / 24.0
