"""
Dependency injection container for blockwatch.

Wires together:
- HTTP client (aiohttp wrapper)
- Provider clients (mempool.space, CoinGecko)
- Upstream facade (category fallback chains)
- Snapshot aggregator, retry controller
- Snapshot store, staleness evaluator, refresh scheduler
"""

import asyncio

from blockwatch.config.state import ConfigState
from blockwatch.config.value_objects import (
    EndpointConfig,
    HttpClientConfig,
    RetryPolicy,
    SchedulerConfig,
    endpoint_config_from_state,
    http_config_from_state,
    retry_policy_from_state,
    scheduler_config_from_state,
)
from blockwatch.infrastructure.impls.system import SystemClock
from blockwatch.infrastructure.observability import get_service_logger
from blockwatch.infrastructure.ports.system import IClock
from blockwatch.ingestion.adapters.coingecko_plugin import CoinGeckoClient
from blockwatch.ingestion.adapters.mempool_plugin import MempoolClient
from blockwatch.ingestion.connectors.aiohttp_client import AiohttpClient
from blockwatch.ingestion.ports.http import IHttpClient
from blockwatch.ingestion.upstream import UpstreamClient
from blockwatch.orchestration.aggregator import SnapshotAggregator
from blockwatch.orchestration.ports import Sleeper
from blockwatch.orchestration.retry import RetryController
from blockwatch.orchestration.scheduler import RefreshScheduler
from blockwatch.orchestration.staleness import StalenessEvaluator
from blockwatch.orchestration.store import SnapshotStore
from blockwatch.shared.models import RefreshInterval


class BlockwatchDependencyContainer:
    """
    Single place where all concrete implementations are chosen.

    Usage:
        container = BlockwatchDependencyContainer.from_config(state)
        scheduler = container.create_scheduler()
    """

    def __init__(
        self,
        http_config: HttpClientConfig | None = None,
        endpoint_config: EndpointConfig | None = None,
        retry_policy: RetryPolicy | None = None,
        scheduler_config: SchedulerConfig | None = None,
        refresh_interval: RefreshInterval = RefreshInterval.TEN_MINUTES,
        http_client: IHttpClient | None = None,
        clock: IClock | None = None,
        sleep: Sleeper = asyncio.sleep,
    ):
        """
        Args:
            http_client: Override the transport (tests pass a fake)
            clock: Override the time source
            sleep: Override sleeping for retry backoff, timer and ticker
        """
        self.http_config = http_config or HttpClientConfig()
        self.endpoint_config = endpoint_config or EndpointConfig()
        self.retry_policy = retry_policy or RetryPolicy()
        self.scheduler_config = scheduler_config or SchedulerConfig()
        self.refresh_interval = refresh_interval
        self.clock = clock or SystemClock()
        self.sleep = sleep
        self._http_client = http_client
        self.log = get_service_logger("dependency-container")

    @classmethod
    def from_config(cls, state: ConfigState, **overrides) -> "BlockwatchDependencyContainer":
        return cls(
            http_config=http_config_from_state(state),
            endpoint_config=endpoint_config_from_state(state),
            retry_policy=retry_policy_from_state(state),
            scheduler_config=scheduler_config_from_state(state),
            refresh_interval=RefreshInterval.from_minutes(
                state.scheduler.refresh_interval_minutes
            ),
            **overrides,
        )

    # ==================== HTTP Layer ====================

    @property
    def http_client(self) -> IHttpClient:
        """Shared transport, created on first use."""
        if self._http_client is None:
            self._http_client = AiohttpClient(config=self.http_config)
        return self._http_client

    # ==================== Ingestion ====================

    def create_mempool_client(self) -> MempoolClient:
        return MempoolClient(self.http_client, self.endpoint_config.mempool_base_url)

    def create_coingecko_client(self) -> CoinGeckoClient:
        return CoinGeckoClient(
            self.http_client,
            self.endpoint_config.coingecko_base_url,
            coin_id=self.endpoint_config.coin_id,
            vs_currency=self.endpoint_config.vs_currency,
        )

    def create_upstream_client(self) -> UpstreamClient:
        return UpstreamClient(
            mempool=self.create_mempool_client(),
            coingecko=self.create_coingecko_client(),
        )

    # ==================== Orchestration ====================

    def create_aggregator(self) -> SnapshotAggregator:
        return SnapshotAggregator(
            self.create_upstream_client(),
            clock=self.clock,
            carry_forward_max_cycles=self.scheduler_config.carry_forward_max_cycles,
        )

    def create_retry_controller(self) -> RetryController:
        return RetryController(
            self.create_aggregator(), policy=self.retry_policy, sleep=self.sleep
        )

    def create_store(self) -> SnapshotStore:
        return SnapshotStore(refresh_interval=self.refresh_interval)

    def create_staleness_evaluator(self, store: SnapshotStore) -> StalenessEvaluator:
        return StalenessEvaluator(
            store, clock=self.clock, config=self.scheduler_config, sleep=self.sleep
        )

    def create_scheduler(self, store: SnapshotStore | None = None) -> RefreshScheduler:
        store = store or self.create_store()
        return RefreshScheduler(
            store=store,
            fetcher=self.create_retry_controller(),
            staleness=self.create_staleness_evaluator(store),
            clock=self.clock,
            config=self.scheduler_config,
            sleep=self.sleep,
        )

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.close()
