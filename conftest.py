"""
Root conftest: src on path plus in-memory stand-ins for the HTTP
transport, the clock and sleeping.
"""

import asyncio
import logging
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest

# Ensure src on path
sys.path.insert(0, str(Path(__file__).parent / "src"))

from blockwatch.infrastructure.ports.system import IClock  # noqa: E402
from blockwatch.ingestion.ports.http import HttpResponse  # noqa: E402

logger = logging.getLogger(__name__)


class FakeHttpClient:
    """IHttpClient serving canned responses keyed by URL (query ignored)."""

    def __init__(self):
        self.routes: dict[str, list[Any]] = {}
        self.calls: list[tuple[str, dict | None]] = []
        self.closed = False

    def add(self, url: str, body: Any = None, status: int = 200) -> None:
        """Queue a response; the last one queued for a URL repeats."""
        self.routes.setdefault(url, []).append(
            HttpResponse(status_code=status, body=body, headers={}, url=url)
        )

    def fail(self, url: str, exc: BaseException) -> None:
        self.routes.setdefault(url, []).append(exc)

    def requested(self, url: str) -> int:
        return sum(1 for called, _ in self.calls if called == url)

    async def get(self, url, params=None, headers=None, timeout=None) -> HttpResponse:
        self.calls.append((url, params))
        await asyncio.sleep(0)
        queued = self.routes.get(url)
        if not queued:
            return HttpResponse(status_code=404, body="Not Found", headers={}, url=url)
        outcome = queued.pop(0) if len(queued) > 1 else queued[0]
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True


class ManualClock(IClock):
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 4, 20, 12, 0, tzinfo=UTC)
        self.mono = 1000.0

    def utcnow(self) -> datetime:
        return self.now

    def monotonic(self) -> float:
        return self.mono

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)
        self.mono += seconds


class RecordingSleeper:
    """Returns immediately, remembering every requested delay."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.sleep(0)


class ControlledSleeper:
    """Blocks each sleep until the test releases it by duration."""

    def __init__(self):
        self.delays: list[float] = []
        self._pending: list[tuple[float, asyncio.Future]] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        waiter = asyncio.get_running_loop().create_future()
        entry = (delay, waiter)
        self._pending.append(entry)
        try:
            await waiter
        finally:
            self._pending.remove(entry)

    def pending(self) -> list[float]:
        return [delay for delay, waiter in self._pending if not waiter.done()]

    def release(self, delay: float) -> int:
        released = 0
        for pending_delay, waiter in list(self._pending):
            if pending_delay == delay and not waiter.done():
                waiter.set_result(None)
                released += 1
        return released


async def settle(rounds: int = 20) -> None:
    """Let every ready task run until the loop is quiet."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def fake_http():
    return FakeHttpClient()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def instant_sleep():
    return RecordingSleeper()


@pytest.fixture
def controlled_sleep():
    return ControlledSleeper()


@pytest.fixture
def run_pending():
    return settle
