"""CoinGecko plugin."""

from .client import CoinGeckoClient  # noqa: F401

__all__ = ["CoinGeckoClient"]
