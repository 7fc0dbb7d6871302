"""mempool.space plugin."""

from .client import MempoolClient  # noqa: F401

__all__ = ["MempoolClient"]
