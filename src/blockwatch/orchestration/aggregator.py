"""
Snapshot Aggregator
===================

Fans out the five category fetches concurrently, joins them into one
Snapshot stamped with the cycle start, and carries the last known 24h
price change forward when the answering price provider omits it.
"""

import asyncio
from typing import Any

from blockwatch.infrastructure.impls.system import SystemClock
from blockwatch.infrastructure.observability import get_orchestration_logger
from blockwatch.infrastructure.ports.system import IClock
from blockwatch.orchestration.ports import IUpstreamClient
from blockwatch.shared.models import DataCategory, PriceQuote, Snapshot


class SnapshotAggregator:
    """
    Builds one Snapshot per cycle from independent category fetches.

    Branches are joined with gather(return_exceptions=True): a failing or
    cancelled branch becomes an absent field and never cancels its siblings.
    """

    def __init__(
        self,
        upstream: IUpstreamClient,
        clock: IClock | None = None,
        carry_forward_max_cycles: int | None = None,
    ):
        """
        Args:
            upstream: Category-level client
            clock: Time source for fetched_at
            carry_forward_max_cycles: Drop a remembered 24h change after this
                many consecutive cycles without a fresh one. None keeps it
                for the aggregator's lifetime.
        """
        self.upstream = upstream
        self.clock = clock or SystemClock()
        self.carry_forward_max_cycles = carry_forward_max_cycles
        self.log = get_orchestration_logger("snapshot-aggregator")

        self._last_change_24h: float | None = None
        self._carried_cycles = 0

    @property
    def last_change_24h(self) -> float | None:
        return self._last_change_24h

    async def fetch_snapshot(self) -> Snapshot:
        fetched_at = self.clock.utcnow()
        started = self.clock.monotonic()

        results = await asyncio.gather(
            self.upstream.fetch_block(),
            self.upstream.fetch_mempool(),
            self.upstream.fetch_price(),
            self.upstream.fetch_fees(),
            self.upstream.fetch_difficulty(),
            return_exceptions=True,
        )
        categories = (
            DataCategory.BLOCK,
            DataCategory.MEMPOOL,
            DataCategory.PRICE,
            DataCategory.FEES,
            DataCategory.DIFFICULTY,
        )
        block, mempool, quote, fees, difficulty = (
            self._unwrap(category, result)
            for category, result in zip(categories, results, strict=True)
        )
        quote = quote or PriceQuote()

        snapshot = Snapshot(
            block=block,
            mempool=mempool,
            price_usd=quote.price,
            price_change_24h=self._merge_change_24h(quote.change_24h),
            price_source=quote.source,
            price_details=quote.details,
            fees=fees,
            difficulty=difficulty,
            fetched_at=fetched_at,
        )

        self.log.info(
            "snapshot_aggregated",
            categories=[c.value for c in snapshot.available_categories()],
            price_source=snapshot.price_source.value if snapshot.price_source else None,
            duration_ms=round((self.clock.monotonic() - started) * 1000, 1),
        )
        return snapshot

    def _unwrap(self, category: DataCategory, result: Any) -> Any:
        if isinstance(result, asyncio.CancelledError):
            self.log.warning("category_cancelled", category=category.value)
            return None
        if isinstance(result, Exception):
            self.log.error(
                "category_fetch_crashed",
                category=category.value,
                error=repr(result),
            )
            return None
        if isinstance(result, BaseException):
            raise result
        return result

    def _merge_change_24h(self, change: float | None) -> float | None:
        if change is not None:
            self._last_change_24h = change
            self._carried_cycles = 0
            return change

        if self._last_change_24h is None:
            return None

        limit = self.carry_forward_max_cycles
        if limit is not None and self._carried_cycles >= limit:
            self.log.info("change_24h_expired", carried_cycles=self._carried_cycles)
            self._last_change_24h = None
            self._carried_cycles = 0
            return None

        self._carried_cycles += 1
        self.log.debug(
            "change_24h_carried_forward",
            value=self._last_change_24h,
            carried_cycles=self._carried_cycles,
        )
        return self._last_change_24h
