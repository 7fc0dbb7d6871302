"""
BlockwatchService: public entrypoint for a presentation layer.

Exposes the read-only snapshot/error/fetching/stale view, the two commands
(refresh_now, set_refresh_interval) and change subscriptions.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable

from blockwatch.config.state import ConfigState
from blockwatch.dependency_container import BlockwatchDependencyContainer
from blockwatch.infrastructure.observability import get_service_logger
from blockwatch.orchestration.scheduler import RefreshScheduler
from blockwatch.orchestration.store import Observer, SnapshotStore, StoreState
from blockwatch.shared.models import RefreshInterval, Snapshot


class BlockwatchService:
    """Owns the store and scheduler for one process."""

    def __init__(self, container: BlockwatchDependencyContainer) -> None:
        self.container = container
        self._store: SnapshotStore = container.create_store()
        self._scheduler: RefreshScheduler = container.create_scheduler(self._store)
        self.log = get_service_logger()

    @classmethod
    def from_config(cls, state: ConfigState, **overrides) -> BlockwatchService:
        return cls(BlockwatchDependencyContainer.from_config(state, **overrides))

    # ==================== Read-only view ====================

    @property
    def snapshot(self) -> Snapshot | None:
        return self._store.snapshot

    @property
    def error_message(self) -> str | None:
        return self._store.error_message

    @property
    def is_fetching(self) -> bool:
        return self._store.is_fetching

    @property
    def is_stale(self) -> bool:
        return self._store.is_stale

    @property
    def refresh_interval(self) -> RefreshInterval:
        return self._store.refresh_interval

    def state(self) -> StoreState:
        return self._store.state()

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        return self._store.subscribe(observer)

    # ==================== Commands ====================

    def refresh_now(self) -> asyncio.Task | None:
        """Trigger a refresh; ignored (returns None) while one is in flight."""
        return self._scheduler.trigger_refresh()

    async def refresh(self) -> bool:
        """Run one refresh cycle to completion."""
        return await self._scheduler.refresh()

    def set_refresh_interval(self, value: RefreshInterval | int) -> None:
        """
        Change the refresh cadence; the timer is re-armed immediately.

        Args:
            value: RefreshInterval or minutes (0, 5, 10, 15)

        Raises:
            InvalidRefreshInterval: For unsupported minute values
        """
        interval = (
            value
            if isinstance(value, RefreshInterval)
            else RefreshInterval.from_minutes(value)
        )
        self._store.set_refresh_interval(interval)

    # ==================== Lifecycle ====================

    async def start(self) -> None:
        await self._scheduler.start()

    async def stop(self) -> None:
        await self._scheduler.stop()
        await self.container.close()
        self.log.info("service_stopped")

    async def __aenter__(self) -> BlockwatchService:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.stop()
