"""
blockwatch Exception Hierarchy

Upstream failures never surface as exceptions (they degrade to absent
fields); these types cover configuration and caller errors only.
"""


class BlockwatchError(Exception):
    """Base exception for all blockwatch errors."""

    pass


class ConfigurationError(BlockwatchError):
    """Configuration could not be loaded or failed validation."""

    pass


class InvalidRefreshInterval(BlockwatchError, ValueError):
    """Refresh interval outside the supported set (0, 5, 10, 15 minutes)."""

    pass
