"""Configuration models and loader."""

from .state import (  # noqa: F401
    CoinGeckoConfig,
    ConfigLoader,
    ConfigState,
    HttpConfig,
    LoggingConfig,
    MempoolConfig,
    RetryConfig,
    SchedulerSettings,
    get_config,
)

__all__ = [
    "CoinGeckoConfig",
    "ConfigLoader",
    "ConfigState",
    "HttpConfig",
    "LoggingConfig",
    "MempoolConfig",
    "RetryConfig",
    "SchedulerSettings",
    "get_config",
]
