"""Default implementations of infrastructure abstractions."""

from .system import SystemClock  # noqa: F401

__all__ = [
    "SystemClock",
]
