"""Default implementations of infrastructure abstractions."""

import time
from datetime import datetime

from blockwatch.common.utils.date_utils import utc_now
from blockwatch.infrastructure.ports.system import IClock


class SystemClock(IClock):
    """Default implementation using system time."""

    def utcnow(self) -> datetime:
        return utc_now()

    def monotonic(self) -> float:
        return time.monotonic()
