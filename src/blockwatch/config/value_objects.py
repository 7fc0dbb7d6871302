"""Configuration value objects for dependency injection.

Instead of injecting the global ConfigState into each component, inject
specific frozen dataclasses. Enables:
- Easy testing with different configurations
- Clear constructor contracts
- Validation at composition root
"""

from dataclasses import dataclass

from blockwatch.config.state import ConfigState


@dataclass(frozen=True)
class HttpClientConfig:
    """Configuration for HTTP client."""

    timeout: float = 20.0
    connect_timeout: float = 15.0
    user_agent: str = "blockwatch/0.1"


@dataclass(frozen=True)
class EndpointConfig:
    """Upstream hosts. Exact hosts are configuration, not contract."""

    mempool_base_url: str = "https://mempool.space/api"
    coingecko_base_url: str = "https://api.coingecko.com/api/v3"
    coin_id: str = "bitcoin"
    vs_currency: str = "usd"


@dataclass(frozen=True)
class RetryPolicy:
    """Delays in seconds before each snapshot attempt; len(delays) = attempts."""

    delays: tuple[float, ...] = (0.0, 1.0, 3.0)

    @property
    def max_attempts(self) -> int:
        return len(self.delays)


@dataclass(frozen=True)
class SchedulerConfig:
    """Refresh timer and staleness evaluation settings."""

    staleness_tick_seconds: float = 30.0
    staleness_floor_seconds: float = 180.0
    staleness_factor: float = 1.5
    carry_forward_max_cycles: int | None = None
    error_message: str = "Unable to load Bitcoin data."


def http_config_from_state(state: ConfigState) -> HttpClientConfig:
    return HttpClientConfig(
        timeout=state.http.total_timeout,
        connect_timeout=state.http.connect_timeout,
        user_agent=state.http.user_agent,
    )


def endpoint_config_from_state(state: ConfigState) -> EndpointConfig:
    return EndpointConfig(
        mempool_base_url=state.mempool.base_url,
        coingecko_base_url=state.coingecko.base_url,
        coin_id=state.coingecko.coin_id,
        vs_currency=state.coingecko.vs_currency,
    )


def retry_policy_from_state(state: ConfigState) -> RetryPolicy:
    return RetryPolicy(delays=tuple(state.retry.delays))


def scheduler_config_from_state(state: ConfigState) -> SchedulerConfig:
    return SchedulerConfig(
        staleness_tick_seconds=state.scheduler.staleness_tick_seconds,
        staleness_floor_seconds=state.scheduler.staleness_floor_seconds,
        staleness_factor=state.scheduler.staleness_factor,
        carry_forward_max_cycles=state.scheduler.carry_forward_max_cycles,
    )
