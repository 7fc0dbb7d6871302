"""
Staleness Evaluator
===================

Derives whether the displayed snapshot can be trusted from the error
state and the time since the last successful fetch. Runs on its own tick
and is also invoked after every refresh outcome.
"""

import asyncio
from datetime import datetime

from blockwatch.config.value_objects import SchedulerConfig
from blockwatch.infrastructure.impls.system import SystemClock
from blockwatch.infrastructure.observability import get_orchestration_logger
from blockwatch.infrastructure.ports.system import IClock
from blockwatch.orchestration.ports import Sleeper
from blockwatch.orchestration.store import SnapshotStore


def staleness_threshold(
    interval_seconds: float,
    floor_seconds: float = 180.0,
    factor: float = 1.5,
) -> float:
    """Seconds after the last success before a snapshot counts as stale."""
    return max(interval_seconds * factor, floor_seconds)


def is_stale(
    error_message: str | None,
    last_success: datetime | None,
    interval_seconds: float,
    now: datetime,
    floor_seconds: float = 180.0,
    factor: float = 1.5,
) -> bool:
    """
    Stale if an error is set, nothing ever succeeded, or the last success
    is strictly older than max(interval * factor, floor) seconds.
    """
    if error_message is not None:
        return True
    if last_success is None:
        return True
    elapsed = (now - last_success).total_seconds()
    return elapsed > staleness_threshold(interval_seconds, floor_seconds, factor)


class StalenessEvaluator:
    """Writes the derived staleness flag into the store."""

    def __init__(
        self,
        store: SnapshotStore,
        clock: IClock | None = None,
        config: SchedulerConfig | None = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.store = store
        self.clock = clock or SystemClock()
        self.config = config or SchedulerConfig()
        self._sleep = sleep
        self.log = get_orchestration_logger("staleness-evaluator")

    def evaluate(self) -> bool:
        stale = is_stale(
            self.store.error_message,
            self.store.last_successful_fetch,
            self.store.refresh_interval.seconds,
            self.clock.utcnow(),
            floor_seconds=self.config.staleness_floor_seconds,
            factor=self.config.staleness_factor,
        )
        if stale != self.store.is_stale:
            self.log.info("staleness_changed", is_stale=stale)
        self.store.set_stale(stale)
        return stale

    async def run(self) -> None:
        """Tick forever; cancel the task to stop."""
        tick = self.config.staleness_tick_seconds
        while True:
            await self._sleep(tick)
            self.evaluate()
