"""Tests for YAML + environment configuration loading."""

import pytest
import yaml
from pydantic import ValidationError

from blockwatch.config.state import ConfigLoader, ConfigState, SchedulerSettings
from blockwatch.config.value_objects import (
    SchedulerConfig,
    endpoint_config_from_state,
    http_config_from_state,
    retry_policy_from_state,
    scheduler_config_from_state,
)
from blockwatch.exceptions import ConfigurationError
from blockwatch.infrastructure.config.settings import load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "BLOCKWATCH_ENV",
        "BLOCKWATCH_CONFIG_DIR",
        "BLOCKWATCH_REFRESH_MINUTES",
        "BLOCKWATCH_MEMPOOL_URL",
        "BLOCKWATCH_COINGECKO_URL",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


def write_yaml(path, data):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(yaml.safe_dump(data), encoding="utf-8")


class TestDefaults:
    def test_missing_directory_gives_defaults(self, tmp_path):
        state = ConfigLoader(str(tmp_path / "nowhere")).load()
        assert state.scheduler.refresh_interval_minutes == 10
        assert state.retry.delays == [0.0, 1.0, 3.0]
        assert state.http.connect_timeout == 15.0
        assert state.http.total_timeout == 20.0
        assert state.scheduler.carry_forward_max_cycles is None

    def test_value_objects(self):
        state = ConfigState()
        assert retry_policy_from_state(state).delays == (0.0, 1.0, 3.0)
        assert http_config_from_state(state).timeout == 20.0
        assert endpoint_config_from_state(state).mempool_base_url == "https://mempool.space/api"
        assert scheduler_config_from_state(state).staleness_tick_seconds == 30.0

    def test_scheduler_section_and_value_object_are_distinct(self):
        state = ConfigState()
        assert isinstance(state.scheduler, SchedulerSettings)
        assert isinstance(scheduler_config_from_state(state), SchedulerConfig)


class TestLayering:
    def test_env_file_merges_over_base(self, tmp_path, monkeypatch):
        write_yaml(
            tmp_path / "blockwatch.yaml",
            {"scheduler": {"refresh_interval_minutes": 5, "staleness_floor_seconds": 120}},
        )
        write_yaml(tmp_path / "env" / "prod.yaml", {"scheduler": {"refresh_interval_minutes": 15}})
        monkeypatch.setenv("BLOCKWATCH_ENV", "prod")

        state = ConfigLoader(str(tmp_path)).load()

        assert state.env == "prod"
        assert state.scheduler.refresh_interval_minutes == 15
        assert state.scheduler.staleness_floor_seconds == 120.0

    def test_environment_variables_win(self, tmp_path, monkeypatch):
        write_yaml(tmp_path / "blockwatch.yaml", {"mempool": {"base_url": "https://a.test/api"}})
        monkeypatch.setenv("BLOCKWATCH_MEMPOOL_URL", "https://b.test/api/")
        monkeypatch.setenv("BLOCKWATCH_REFRESH_MINUTES", "0")
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")

        state = ConfigLoader(str(tmp_path)).load()

        assert state.mempool.base_url == "https://b.test/api"
        assert state.scheduler.refresh_interval_minutes == 0
        assert state.logging.level == "DEBUG"


class TestValidation:
    def test_unsupported_interval(self):
        with pytest.raises(ValidationError):
            ConfigState(scheduler={"refresh_interval_minutes": 7})

    def test_negative_retry_delay(self):
        with pytest.raises(ValidationError):
            ConfigState(retry={"delays": [0, -1]})

    def test_empty_retry_schedule(self):
        with pytest.raises(ValidationError):
            ConfigState(retry={"delays": []})

    def test_load_settings_wraps_errors(self, tmp_path):
        write_yaml(tmp_path / "blockwatch.yaml", {"scheduler": {"refresh_interval_minutes": 3}})
        with pytest.raises(ConfigurationError):
            load_settings(str(tmp_path))

    def test_load_settings_rejects_non_mapping(self, tmp_path):
        (tmp_path / "blockwatch.yaml").write_text("- just\n- a list\n", encoding="utf-8")
        with pytest.raises(ConfigurationError):
            load_settings(str(tmp_path))

    def test_load_settings(self, tmp_path):
        write_yaml(tmp_path / "blockwatch.yaml", {"coingecko": {"vs_currency": "eur"}})
        assert load_settings(str(tmp_path)).coingecko.vs_currency == "eur"
