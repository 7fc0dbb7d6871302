"""
Shared enumerations for blockwatch.

Small, closed vocabularies used across ingestion, orchestration and the
outward service interface.
"""

import enum

from blockwatch.exceptions import InvalidRefreshInterval


class DataCategory(str, enum.Enum):
    """Independent upstream data domains fetched in one cycle."""

    BLOCK = "block"
    MEMPOOL = "mempool"
    PRICE = "price"
    FEES = "fees"
    DIFFICULTY = "difficulty"


class PriceSource(str, enum.Enum):
    """Provider that actually answered the price request."""

    COINGECKO = "coingecko"  # Rich market data (price + change + extrema)
    MEMPOOL = "mempool"  # Price-only fallback

    @property
    def label(self) -> str:
        return _PRICE_SOURCE_LABELS[self]


_PRICE_SOURCE_LABELS = {
    PriceSource.COINGECKO: "CoinGecko",
    PriceSource.MEMPOOL: "mempool.space",
}


class RefreshInterval(str, enum.Enum):
    """Supported refresh cadences. MANUAL disables the periodic timer."""

    MANUAL = "manual"
    FIVE_MINUTES = "five_minutes"
    TEN_MINUTES = "ten_minutes"
    FIFTEEN_MINUTES = "fifteen_minutes"

    @property
    def minutes(self) -> int:
        return _INTERVAL_MINUTES[self]

    @property
    def seconds(self) -> float:
        return float(self.minutes * 60)

    @property
    def label(self) -> str:
        if self is RefreshInterval.MANUAL:
            return "Manual"
        return f"Every {self.minutes} minutes"

    @classmethod
    def from_minutes(cls, minutes: int | float) -> "RefreshInterval":
        """
        Resolve an interval from its length in minutes.

        Raises:
            InvalidRefreshInterval: If minutes is not one of 0, 5, 10, 15
        """
        for interval, value in _INTERVAL_MINUTES.items():
            if value == minutes:
                return interval
        allowed = sorted(_INTERVAL_MINUTES.values())
        raise InvalidRefreshInterval(
            f"Unsupported refresh interval {minutes!r} minutes (allowed: {allowed})"
        )


_INTERVAL_MINUTES = {
    RefreshInterval.MANUAL: 0,
    RefreshInterval.FIVE_MINUTES: 5,
    RefreshInterval.TEN_MINUTES: 10,
    RefreshInterval.FIFTEEN_MINUTES: 15,
}
