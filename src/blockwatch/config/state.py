"""
Unified configuration state management.

This module provides a single source of truth for all application configuration,
combining YAML files with environment overrides, type validation,
and sensible defaults.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)


# =============================================================================
# PYDANTIC MODELS - Type-Safe Configuration
# =============================================================================


class MempoolConfig(BaseModel):
    """mempool.space API configuration (blocks, mempool, fees, difficulty, price)."""

    base_url: str = Field(default="https://mempool.space/api")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class CoinGeckoConfig(BaseModel):
    """CoinGecko API configuration (rich price provider)."""

    base_url: str = Field(default="https://api.coingecko.com/api/v3")
    coin_id: str = Field(default="bitcoin")
    vs_currency: str = Field(default="usd")

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")


class HttpConfig(BaseModel):
    """Per-request timeouts in seconds."""

    connect_timeout: float = Field(default=15.0, gt=0)
    total_timeout: float = Field(default=20.0, gt=0)
    user_agent: str = Field(default="blockwatch/0.1")


class RetryConfig(BaseModel):
    """Delays (seconds) applied before each snapshot attempt."""

    delays: list[float] = Field(default_factory=lambda: [0.0, 1.0, 3.0])

    @field_validator("delays")
    @classmethod
    def validate_delays(cls, v: list[float]) -> list[float]:
        if not v:
            raise ValueError("At least one retry attempt is required")
        if any(delay < 0 for delay in v):
            raise ValueError("Retry delays must be non-negative")
        return v


class SchedulerSettings(BaseModel):
    """Refresh cadence and staleness policy."""

    refresh_interval_minutes: int = Field(default=10)
    staleness_tick_seconds: float = Field(default=30.0, gt=0)
    staleness_floor_seconds: float = Field(default=180.0, ge=0)
    staleness_factor: float = Field(default=1.5, gt=0)
    carry_forward_max_cycles: int | None = Field(default=None, ge=1)

    @field_validator("refresh_interval_minutes")
    @classmethod
    def validate_interval(cls, v: int) -> int:
        if v not in (0, 5, 10, 15):
            raise ValueError("refresh_interval_minutes must be one of 0, 5, 10, 15")
        return v


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")
    json_logs: bool = Field(default=True)


class ConfigState(BaseModel):
    """
    Root configuration state - single source of truth for all app config.
    """

    mempool: MempoolConfig = Field(default_factory=MempoolConfig)
    coingecko: CoinGeckoConfig = Field(default_factory=CoinGeckoConfig)
    http: HttpConfig = Field(default_factory=HttpConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    scheduler: SchedulerSettings = Field(default_factory=SchedulerSettings)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    # Environment metadata
    env: str = Field(default="dev")
    config_dir: str = Field(default="./config")


# =============================================================================
# CONFIG LOADER - Clean, Validated Loading
# =============================================================================


class ConfigLoader:
    """
    Load and validate configuration from YAML files.

    Merges:
      1. Defaults (ConfigState field defaults)
      2. blockwatch.yaml from config_dir
      3. env/<env>.yaml
      4. Environment variable overrides
    """

    def __init__(self, config_dir: str = "./config"):
        self.config_dir = Path(config_dir)
        self._yaml_cache: dict[Path, Any] = {}
        self.env = os.getenv("BLOCKWATCH_ENV", "dev")

    def _load_yaml(self, path: Path) -> dict[str, Any]:
        """Load YAML file with caching."""
        if path in self._yaml_cache:
            return self._yaml_cache[path]

        if not path.exists():
            logger.debug(f"Config file not found (using defaults): {path}")
            return {}

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        self._yaml_cache[path] = data
        logger.debug(f"Loaded config: {path}")
        return data

    def _apply_env_overrides(self, config: dict[str, Any]) -> dict[str, Any]:
        """Apply environment variable overrides to config."""
        if mempool_url := os.getenv("BLOCKWATCH_MEMPOOL_URL"):
            config.setdefault("mempool", {})["base_url"] = mempool_url

        if coingecko_url := os.getenv("BLOCKWATCH_COINGECKO_URL"):
            config.setdefault("coingecko", {})["base_url"] = coingecko_url

        if minutes := os.getenv("BLOCKWATCH_REFRESH_MINUTES"):
            config.setdefault("scheduler", {})["refresh_interval_minutes"] = int(
                minutes
            )

        if log_level := os.getenv("LOG_LEVEL"):
            config.setdefault("logging", {})["level"] = log_level

        return config

    def _merge_dicts(self, base: dict, override: dict) -> dict:
        """Deep merge override into base dict."""
        result = base.copy()
        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_dicts(result[key], value)
            else:
                result[key] = value
        return result

    def load(self) -> ConfigState:
        """
        Load complete configuration state.

        Returns:
            ConfigState: Validated configuration object

        Raises:
            pydantic.ValidationError: If configuration is invalid
            ValueError: If a YAML file or env override is malformed
        """
        logger.info(f"Loading configuration from {self.config_dir} (env: {self.env})")

        config: dict[str, Any] = {}
        config = self._merge_dicts(
            config, self._load_yaml(self.config_dir / "blockwatch.yaml")
        )

        env_config = self._load_yaml(self.config_dir / "env" / f"{self.env}.yaml")
        config = self._merge_dicts(config, env_config)

        config = self._apply_env_overrides(config)

        state = ConfigState(env=self.env, config_dir=str(self.config_dir), **config)
        logger.info(
            f"Configuration loaded: refresh={state.scheduler.refresh_interval_minutes}m, "
            f"mempool={state.mempool.base_url}, coingecko={state.coingecko.base_url}"
        )
        return state


# =============================================================================
# GLOBAL INSTANCE
# =============================================================================


def get_config(config_dir: str | None = None) -> ConfigState:
    """
    Load and return the configuration state.

    Args:
        config_dir: Override config directory. Defaults to $BLOCKWATCH_CONFIG_DIR or ./config

    Returns:
        ConfigState: Validated configuration object
    """
    if config_dir is None:
        config_dir = os.getenv("BLOCKWATCH_CONFIG_DIR", "./config")
        if not Path(config_dir).exists():
            logger.warning(f"Config directory not found at {config_dir}, using defaults")

    return ConfigLoader(config_dir=config_dir).load()
