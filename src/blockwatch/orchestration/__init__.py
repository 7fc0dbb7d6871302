"""
Orchestration layer: turns category fetches into published snapshots.

Components (leaves first):
- SnapshotAggregator: concurrent fan-out + carry-forward merge
- RetryController: bounded retry with backoff
- SnapshotStore: observable state
- StalenessEvaluator: derived staleness flag
- RefreshScheduler: timer, IDLE/FETCHING guard, publication
"""

from .aggregator import SnapshotAggregator  # noqa: F401
from .ports import SchedulerState  # noqa: F401
from .retry import RetryController  # noqa: F401
from .scheduler import RefreshScheduler  # noqa: F401
from .staleness import StalenessEvaluator, is_stale, staleness_threshold  # noqa: F401
from .store import SnapshotStore, StoreEvent, StoreState  # noqa: F401

__all__ = [
    "SnapshotAggregator",
    "SchedulerState",
    "RetryController",
    "RefreshScheduler",
    "StalenessEvaluator",
    "is_stale",
    "staleness_threshold",
    "SnapshotStore",
    "StoreEvent",
    "StoreState",
]
