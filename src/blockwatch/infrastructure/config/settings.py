"""
Settings bridge for blockwatch.

Loads the configuration once and exposes it to components that are not
handed a ConfigState explicitly (CLI defaults, the dependency container).

Usage:
    from blockwatch.infrastructure.config.settings import load_settings
"""

import logging

from pydantic import ValidationError

from blockwatch.config.state import ConfigState, get_config
from blockwatch.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_settings: ConfigState | None = None


def load_settings(config_dir: str | None = None, reload: bool = False) -> ConfigState:
    """
    Return the process-wide ConfigState, loading it on first use.

    Raises:
        ConfigurationError: If the YAML files or env overrides are invalid
    """
    global _settings
    if _settings is not None and not reload and config_dir is None:
        return _settings

    try:
        _settings = get_config(config_dir)
    except (ValidationError, ValueError, OSError) as e:
        logger.error(f"Failed to initialize configuration: {e}")
        raise ConfigurationError(f"Invalid blockwatch configuration: {e}") from e
    return _settings
