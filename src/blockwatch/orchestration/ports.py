"""
Orchestration Layer Protocol Definitions
=========================================

Protocol interfaces between the upstream client, the aggregator, the retry
controller and the scheduler. They let tests substitute any stage.
"""

from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Protocol, runtime_checkable

from blockwatch.shared.models import (
    BlockInfo,
    DifficultyAdjustment,
    Fees,
    MempoolStats,
    PriceQuote,
    Snapshot,
)

# Injectable sleep, asyncio.sleep in production
Sleeper = Callable[[float], Awaitable[None]]


class SchedulerState(str, Enum):
    """Refresh scheduler state machine."""

    IDLE = "idle"
    FETCHING = "fetching"


@runtime_checkable
class IUpstreamClient(Protocol):
    """One call per data category; absence means the category failed."""

    async def fetch_block(self) -> BlockInfo | None: ...

    async def fetch_mempool(self) -> MempoolStats | None: ...

    async def fetch_price(self) -> PriceQuote: ...

    async def fetch_fees(self) -> Fees | None: ...

    async def fetch_difficulty(self) -> DifficultyAdjustment | None: ...


@runtime_checkable
class ISnapshotSource(Protocol):
    """Produces one Snapshot per call (possibly without data)."""

    async def fetch_snapshot(self) -> Snapshot: ...


@runtime_checkable
class ISnapshotFetcher(Protocol):
    """Produces a usable Snapshot or None."""

    async def fetch_with_retry(self) -> Snapshot | None: ...
