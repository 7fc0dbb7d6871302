"""
Snapshot Store
==============

Explicit mutable state owned by one coordinator (the event loop running
the scheduler). Observers subscribe for change notifications and read an
immutable StoreState; only the scheduler and the staleness evaluator
mutate it.
"""

from collections.abc import Callable
from dataclasses import dataclass, fields, replace
from datetime import datetime

from blockwatch.infrastructure.observability import get_orchestration_logger
from blockwatch.shared.models import RefreshInterval, Snapshot


@dataclass(frozen=True)
class StoreState:
    """Read-only view of the store at one point in time."""

    snapshot: Snapshot | None = None
    error_message: str | None = None
    is_fetching: bool = False
    last_successful_fetch: datetime | None = None
    is_stale: bool = False
    refresh_interval: RefreshInterval = RefreshInterval.TEN_MINUTES


@dataclass(frozen=True)
class StoreEvent:
    """Notification sent to observers after a mutation."""

    changed: frozenset[str]
    state: StoreState


Observer = Callable[[StoreEvent], None]


class SnapshotStore:
    """Observable holder of the current snapshot and fetch status."""

    def __init__(self, refresh_interval: RefreshInterval = RefreshInterval.TEN_MINUTES):
        self._state = StoreState(refresh_interval=refresh_interval)
        self._observers: list[Observer] = []
        self.log = get_orchestration_logger("snapshot-store")

    # ==================== Read-only view ====================

    def state(self) -> StoreState:
        return self._state

    @property
    def snapshot(self) -> Snapshot | None:
        return self._state.snapshot

    @property
    def error_message(self) -> str | None:
        return self._state.error_message

    @property
    def is_fetching(self) -> bool:
        return self._state.is_fetching

    @property
    def last_successful_fetch(self) -> datetime | None:
        return self._state.last_successful_fetch

    @property
    def is_stale(self) -> bool:
        return self._state.is_stale

    @property
    def refresh_interval(self) -> RefreshInterval:
        return self._state.refresh_interval

    # ==================== Subscription ====================

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register an observer.

        Returns:
            Callable that removes the observer
        """
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self, changed: frozenset[str]) -> None:
        event = StoreEvent(changed=changed, state=self._state)
        for observer in list(self._observers):
            try:
                observer(event)
            except Exception:
                self.log.exception("observer_failed", observer=repr(observer))

    def _update(self, **changes) -> frozenset[str]:
        previous = self._state
        self._state = replace(previous, **changes)
        changed = frozenset(
            f.name
            for f in fields(StoreState)
            if getattr(previous, f.name) != getattr(self._state, f.name)
        )
        if changed:
            self._notify(changed)
        return changed

    # ==================== Mutations ====================

    def begin_fetch(self) -> None:
        """Enter the fetching state and clear any previous error."""
        self._update(is_fetching=True, error_message=None)

    def publish(self, snapshot: Snapshot, at: datetime) -> None:
        """
        Replace the current snapshot after a successful cycle.

        Raises:
            ValueError: If the snapshot carries no usable data
        """
        if not snapshot.has_data:
            raise ValueError("Refusing to publish a snapshot without data")
        self._update(
            snapshot=snapshot,
            last_successful_fetch=at,
            error_message=None,
            is_fetching=False,
            is_stale=False,
        )

    def fail(self, message: str) -> None:
        """Record a failed cycle; the previous snapshot stays visible but is stale."""
        self._update(error_message=message, is_fetching=False, is_stale=True)

    def end_fetch(self) -> None:
        """Leave the fetching state without an outcome (cancelled cycle)."""
        self._update(is_fetching=False)

    def set_stale(self, is_stale: bool) -> None:
        self._update(is_stale=is_stale)

    def set_refresh_interval(self, interval: RefreshInterval) -> bool:
        """Returns True if the interval actually changed."""
        return bool(self._update(refresh_interval=interval))
