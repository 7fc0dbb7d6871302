"""Process-wide settings access."""

from .settings import load_settings  # noqa: F401

__all__ = ["load_settings"]
