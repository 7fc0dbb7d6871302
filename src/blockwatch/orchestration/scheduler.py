"""
Refresh Scheduler
=================

Runs the retry-wrapped fetch on the configured interval (or only on
demand), publishes outcomes into the store and keeps at most one refresh
cycle in flight.

State machine:
    IDLE --refresh()--> FETCHING --success/failure/cancel--> IDLE
"""

import asyncio

from blockwatch.config.value_objects import SchedulerConfig
from blockwatch.infrastructure.impls.system import SystemClock
from blockwatch.infrastructure.observability import get_orchestration_logger
from blockwatch.infrastructure.ports.system import IClock
from blockwatch.orchestration.ports import ISnapshotFetcher, SchedulerState, Sleeper
from blockwatch.orchestration.staleness import StalenessEvaluator
from blockwatch.orchestration.store import SnapshotStore, StoreEvent


class RefreshScheduler:
    """
    Drives refresh cycles and the staleness ticker.

    The IDLE/FETCHING guard lives in the store's is_fetching flag; the
    periodic timer only triggers refreshes and never awaits them, so
    re-arming the timer cannot cancel a cycle already in flight.
    """

    def __init__(
        self,
        store: SnapshotStore,
        fetcher: ISnapshotFetcher,
        staleness: StalenessEvaluator,
        clock: IClock | None = None,
        config: SchedulerConfig | None = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.store = store
        self.fetcher = fetcher
        self.staleness = staleness
        self.clock = clock or SystemClock()
        self.config = config or SchedulerConfig()
        self._sleep = sleep
        self.log = get_orchestration_logger("refresh-scheduler")

        self._timer_task: asyncio.Task | None = None
        self._staleness_task: asyncio.Task | None = None
        self._inflight: set[asyncio.Task] = set()
        self._unsubscribe = None
        self._started = False

    @property
    def state(self) -> SchedulerState:
        return SchedulerState.FETCHING if self.store.is_fetching else SchedulerState.IDLE

    @property
    def is_running(self) -> bool:
        return self._started

    # ==================== Refresh cycle ====================

    async def refresh(self) -> bool:
        """
        Run one retry-wrapped cycle unless one is already in flight.

        Returns:
            True if a snapshot was published, False on failure or when skipped
        """
        if self.store.is_fetching:
            self.log.debug("refresh_skipped", reason="already_fetching")
            return False

        self.store.begin_fetch()
        self.log.info("refresh_started", interval=self.store.refresh_interval.value)

        try:
            snapshot = await self.fetcher.fetch_with_retry()
        except asyncio.CancelledError:
            self.log.info("refresh_cancelled")
            self.store.end_fetch()
            self.staleness.evaluate()
            raise
        except Exception:
            self.log.exception("refresh_crashed")
            snapshot = None

        if snapshot is None:
            self.store.fail(self.config.error_message)
            self.log.warning("refresh_failed", error=self.config.error_message)
        else:
            self.store.publish(snapshot, self.clock.utcnow())
            self.log.info(
                "snapshot_published",
                fetched_at=snapshot.fetched_at.isoformat(),
                categories=[c.value for c in snapshot.available_categories()],
            )

        self.staleness.evaluate()
        return snapshot is not None

    def trigger_refresh(self) -> asyncio.Task | None:
        """
        Start a refresh in the background.

        Returns:
            The refresh task, or None if a cycle is already in flight
        """
        if self.store.is_fetching:
            self.log.debug("refresh_trigger_ignored", reason="already_fetching")
            return None
        task = asyncio.create_task(self.refresh(), name="blockwatch-refresh")
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        return task

    # ==================== Lifecycle ====================

    async def start(self) -> None:
        """Immediate refresh, then periodic timer and staleness ticker."""
        if self._started:
            return
        self._started = True

        self._unsubscribe = self.store.subscribe(self._on_store_event)
        self.staleness.evaluate()
        self.trigger_refresh()
        self._arm_timer()
        self._staleness_task = asyncio.create_task(
            self.staleness.run(), name="blockwatch-staleness"
        )
        self.log.info("scheduler_started", interval=self.store.refresh_interval.value)

    async def stop(self) -> None:
        """Cancel timer, staleness ticker and in-flight refreshes as a unit."""
        if not self._started:
            return
        self._started = False

        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

        tasks = [t for t in (self._timer_task, self._staleness_task) if t is not None]
        tasks.extend(self._inflight)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

        self._timer_task = None
        self._staleness_task = None
        self._inflight.clear()
        self.log.info("scheduler_stopped")

    # ==================== Timer ====================

    def _on_store_event(self, event: StoreEvent) -> None:
        if "refresh_interval" in event.changed:
            self.log.info("refresh_interval_changed", interval=event.state.refresh_interval.value)
            self._arm_timer()
            self.staleness.evaluate()

    def _arm_timer(self) -> None:
        if self._timer_task is not None:
            self._timer_task.cancel()
            self._timer_task = None

        seconds = self.store.refresh_interval.seconds
        if seconds <= 0:
            self.log.info("timer_disabled", reason="manual_refresh")
            return

        self._timer_task = asyncio.create_task(
            self._timer_loop(seconds), name="blockwatch-refresh-timer"
        )
        self.log.info("timer_armed", interval_seconds=seconds)

    async def _timer_loop(self, seconds: float) -> None:
        while True:
            await self._sleep(seconds)
            self.trigger_refresh()
