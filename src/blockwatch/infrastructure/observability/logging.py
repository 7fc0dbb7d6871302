"""
Structured logging infrastructure for blockwatch.
Provides consistent, machine-readable logs across all layers.

Log Structure:
    {
        "app": "blockwatch",           # Application identifier
        "layer": "ingestion",          # Architectural layer
        "component": "mempool-client", # Specific component
        "module": "...",               # Python module (optional)
        "provider": "mempool",         # Upstream context
        "event": "upstream_request_failed",
        ...
    }

Architectural Layers:
    - infrastructure: Cross-cutting (config, clock)
    - ingestion: Upstream HTTP clients and decoding
    - orchestration: Aggregation, retry, scheduling, staleness
    - service: Composition root and outward interface
"""

import logging
import sys
from typing import Any, Literal

import structlog
from structlog.types import EventDict

Layer = Literal["infrastructure", "ingestion", "orchestration", "service"]

APP_NAME = "blockwatch"


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add the application identifier to every log entry."""
    event_dict["app"] = APP_NAME
    return event_dict


def add_severity_level(
    logger: Any, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Add severity level for cloud logging compatibility.
    Maps Python log levels to standard severity levels.
    """
    level = event_dict.get("level")
    if level:
        severity_map = {
            "debug": "DEBUG",
            "info": "INFO",
            "warning": "WARNING",
            "error": "ERROR",
            "critical": "CRITICAL",
        }
        event_dict["severity"] = severity_map.get(level, "INFO")
    return event_dict


def setup_logging(
    level: str = "INFO",
    json_logs: bool = True,
    include_timestamp: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: If True, output JSON. If False, use human-readable format (dev mode).
        include_timestamp: Whether to include ISO timestamps in logs

    Usage:
        >>> from blockwatch.infrastructure.observability import setup_logging
        >>> setup_logging(level="DEBUG", json_logs=False)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    processors = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        add_severity_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.insert(0, structlog.processors.TimeStamper(fmt="iso"))

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            )
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    name: str | None = None,
    layer: Layer | None = None,
    component: str | None = None,
    **initial_context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a configured logger instance with architectural context.

    Args:
        name: Logger name (typically __name__ of the calling module)
        layer: Architectural layer (infrastructure, ingestion, orchestration, service)
        component: Specific component within the layer
        **initial_context: Additional context key-value pairs to bind to logger

    Usage:
        >>> log = get_logger(__name__, layer="ingestion", component="mempool-client")
        >>> log.info("upstream_request_ok", status=200)
    """
    logger = structlog.get_logger(name)

    context = {}
    if layer:
        context["layer"] = layer
    if component:
        context["component"] = component
    if name:
        context["module"] = name
    context.update(initial_context)

    if context:
        logger = logger.bind(**context)

    return logger


# ============================================================================
# Layer-Specific Logger Factories
# ============================================================================


def get_infrastructure_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for the infrastructure layer (config, clock).

    Usage:
        >>> log = get_infrastructure_logger("config-loader")
        >>> log.info("config_loaded", env="dev")
    """
    return get_logger(
        "infrastructure",
        layer="infrastructure",
        component=component,
        **context,
    )


def get_ingestion_logger(
    component: str,
    provider: str | None = None,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for the ingestion layer (upstream clients).

    Args:
        component: Component name (e.g., "mempool-client", "coingecko-client")
        provider: Upstream provider name - optional
        **context: Additional context

    Usage:
        >>> log = get_ingestion_logger("mempool-client", provider="mempool")
        >>> log.debug("upstream_request_ok", url="https://mempool.space/api/mempool")
    """
    ctx = {}
    if provider:
        ctx["provider"] = provider
    ctx.update(context)

    return get_logger(
        "ingestion",
        layer="ingestion",
        component=component,
        **ctx,
    )


def get_orchestration_logger(
    component: str,
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """
    Get a logger for the orchestration layer (aggregator, retry, scheduler).

    Usage:
        >>> log = get_orchestration_logger("refresh-scheduler")
        >>> log.info("timer_armed", interval_seconds=600)
    """
    return get_logger(
        "orchestration",
        layer="orchestration",
        component=component,
        **context,
    )


def get_service_logger(
    component: str = "blockwatch-service",
    **context: Any,
) -> structlog.stdlib.BoundLogger:
    """Get a logger for the service layer (composition root, CLI)."""
    return get_logger(
        "service",
        layer="service",
        component=component,
        **context,
    )
