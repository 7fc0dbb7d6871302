"""
Snapshot models: one immutable aggregated result per fetch cycle.

Every category is optional. A cycle where some upstreams failed still
produces a Snapshot; it is only rejected when nothing usable came back
(see Snapshot.has_data).
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from blockwatch.common.utils.bitcoin import sats_per_unit
from blockwatch.shared.models.enums import DataCategory, PriceSource


class _FrozenModel(BaseModel):
    model_config = ConfigDict(frozen=True)


class BlockExtras(_FrozenModel):
    """Extended block metadata (mempool.space v1 `extras`)."""

    fee_range: list[float] = Field(default_factory=list)
    median_fee: float | None = None
    total_fees: int | None = None  # sats
    reward: int | None = None  # sats, subsidy + fees
    pool_name: str | None = None


class BlockInfo(_FrozenModel):
    """Latest mined block."""

    id: str
    height: int
    timestamp: int  # unix seconds
    tx_count: int
    size: int  # bytes
    weight: int  # weight units
    difficulty: float | None = None
    extras: BlockExtras | None = None


class MempoolStats(_FrozenModel):
    count: int
    vsize: int
    total_fee: int | None = None


class Fees(_FrozenModel):
    """Fee-rate estimates in sat/vB."""

    fastest_fee: float
    half_hour_fee: float
    hour_fee: float
    economy_fee: float | None = None
    minimum_fee: float | None = None


class DifficultyAdjustment(_FrozenModel):
    progress_percent: float | None = None
    remaining_blocks: int | None = None
    estimated_retarget_date: int | None = None  # unix milliseconds
    difficulty_change: float | None = None  # percent
    time_avg: float | None = None  # milliseconds


class PriceDetails(_FrozenModel):
    """Extended market data only the rich provider supplies."""

    change_7d: float | None = None
    change_30d: float | None = None
    high_24h: float | None = None
    low_24h: float | None = None
    ath: float | None = None
    ath_date: datetime | None = None
    atl: float | None = None
    atl_date: datetime | None = None
    last_updated: datetime | None = None
    sparkline_7d: list[float] = Field(default_factory=list)


class PriceQuote(_FrozenModel):
    """Outcome of the price category. All-None when every provider failed."""

    price: float | None = None
    change_24h: float | None = None
    source: PriceSource | None = None
    details: PriceDetails | None = None


class Snapshot(_FrozenModel):
    """Immutable aggregate of one fetch cycle."""

    block: BlockInfo | None = None
    mempool: MempoolStats | None = None
    price_usd: float | None = None
    price_change_24h: float | None = None
    price_source: PriceSource | None = None
    price_details: PriceDetails | None = None
    fees: Fees | None = None
    difficulty: DifficultyAdjustment | None = None
    fetched_at: datetime

    @property
    def has_data(self) -> bool:
        """True iff at least one core category is present."""
        return (
            self.block is not None
            or self.mempool is not None
            or self.price_usd is not None
            or self.fees is not None
            or self.difficulty is not None
        )

    @property
    def sats_per_unit(self) -> int | None:
        """Satoshis per one USD at the snapshot price."""
        if self.price_usd is None:
            return None
        return sats_per_unit(self.price_usd)

    def available_categories(self) -> list[DataCategory]:
        present = {
            DataCategory.BLOCK: self.block is not None,
            DataCategory.MEMPOOL: self.mempool is not None,
            DataCategory.PRICE: self.price_usd is not None,
            DataCategory.FEES: self.fees is not None,
            DataCategory.DIFFICULTY: self.difficulty is not None,
        }
        return [category for category, ok in present.items() if ok]
