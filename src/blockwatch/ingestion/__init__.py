"""
Ingestion layer: pulls each data category from public Bitcoin APIs.

Modules:
- ports: HTTP client abstraction
- connectors: aiohttp implementation
- adapters: provider plugins (mempool.space, CoinGecko)
- decoding: candidate-key probing for drifting payload schemas
- upstream: category-level facade with provider fallback chains
"""
