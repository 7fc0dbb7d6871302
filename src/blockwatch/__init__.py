"""
blockwatch: merged Bitcoin network snapshots from public APIs.

Modules:
- ingestion: upstream HTTP clients, decoding and provider fallback
- orchestration: aggregation, retry, scheduling, staleness, store
- shared: snapshot models and enums
- infrastructure: config access, logging, clock
"""

__version__ = "0.1.0"
