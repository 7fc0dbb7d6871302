"""
Observability for blockwatch: structured logging with layer context so
upstream failures, retries and staleness transitions can be traced per
component.
"""

from .logging import (
    get_infrastructure_logger,
    get_ingestion_logger,
    get_logger,
    get_orchestration_logger,
    get_service_logger,
    setup_logging,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "get_infrastructure_logger",
    "get_ingestion_logger",
    "get_orchestration_logger",
    "get_service_logger",
]
