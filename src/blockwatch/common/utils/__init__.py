"""Pure helper functions shared across layers."""

from .bitcoin import (  # noqa: F401
    average_block_time_seconds,
    block_subsidy,
    days_until_retarget,
    format_fee_span,
    sats_per_unit,
)
from .date_utils import (  # noqa: F401
    format_time_ago,
    from_unix_ms,
    from_unix_seconds,
    parse_iso_datetime,
    seconds_since,
    utc_now,
)

__all__ = [
    "average_block_time_seconds",
    "block_subsidy",
    "days_until_retarget",
    "format_fee_span",
    "sats_per_unit",
    "format_time_ago",
    "from_unix_ms",
    "from_unix_seconds",
    "parse_iso_datetime",
    "seconds_since",
    "utc_now",
]
