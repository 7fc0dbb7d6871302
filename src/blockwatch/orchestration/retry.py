"""
Retry Controller
================

Wraps a full aggregation cycle in a bounded retry loop. A cycle succeeds
as soon as one attempt yields a snapshot with data.
"""

import asyncio

from blockwatch.config.value_objects import RetryPolicy
from blockwatch.infrastructure.observability import get_orchestration_logger
from blockwatch.orchestration.ports import ISnapshotSource, Sleeper
from blockwatch.shared.models import Snapshot


class RetryController:
    """Attempts the snapshot source up to len(policy.delays) times.

    Each delay is slept before its attempt; a zero delay (the first one by
    default) skips the sleep. Task cancellation propagates out of any sleep
    or fetch and abandons the remaining attempts.
    """

    def __init__(
        self,
        source: ISnapshotSource,
        policy: RetryPolicy | None = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        self.source = source
        self.policy = policy or RetryPolicy()
        self._sleep = sleep
        self.log = get_orchestration_logger("retry-controller")

    async def fetch_with_retry(self) -> Snapshot | None:
        """
        Returns:
            First snapshot with has_data, or None when every attempt was empty

        Raises:
            asyncio.CancelledError: If the calling task is cancelled
        """
        attempts = self.policy.max_attempts
        for attempt, delay in enumerate(self.policy.delays, start=1):
            if delay > 0:
                self.log.debug("retry_backoff", attempt=attempt, delay_seconds=delay)
                await self._sleep(delay)

            snapshot = await self.source.fetch_snapshot()
            if snapshot.has_data:
                if attempt > 1:
                    self.log.info("snapshot_recovered", attempt=attempt)
                return snapshot

            self.log.warning("snapshot_attempt_empty", attempt=attempt, attempts=attempts)

        self.log.error("snapshot_retries_exhausted", attempts=attempts)
        return None
