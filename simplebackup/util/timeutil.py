"""Utility functions for time operations."""

import time
from datetime import datetime, timezone
from typing import Optional

LOG_TIMESTAMP_FORMAT = "%Y-%m-%dT%H%M%S"


def now_iso() -> str:
    """Get current timestamp in ISO 8601 format."""
    return datetime.now(timezone.utc).isoformat()


def log_timestamp(moment: Optional[datetime] = None) -> str:
    """Format a local timestamp for run log lines, e.g. ``2024-03-01T142501``."""
    if moment is None:
        moment = datetime.now()
    return moment.strftime(LOG_TIMESTAMP_FORMAT)


def format_duration(seconds: float) -> str:
    """Format duration in human readable format."""
    if seconds < 60:
        return f"{seconds:.1f}s"
    elif seconds < 3600:
        minutes = seconds / 60
        return f"{minutes:.1f}m"
    else:
        hours = seconds / 3600
        return f"{hours:.1f}h"


class Stopwatch:
    """Measures elapsed wall time from creation."""

    def __init__(self) -> None:
        self._started = time.monotonic()

    @property
    def elapsed(self) -> float:
        """Seconds since the stopwatch was started."""
        return time.monotonic() - self._started

    def __str__(self) -> str:
        return format_duration(self.elapsed)
