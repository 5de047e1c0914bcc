"""Utility module initialization."""

from .compression import Compression, FramedSink, decorate_sink
from .logging import get_logger, resolve_level, setup_logging
from .paths import ensure_directory, format_size, is_writable_directory, sanitize
from .timeutil import Stopwatch, format_duration, log_timestamp, now_iso

__all__ = [
    # compression
    "Compression",
    "FramedSink",
    "decorate_sink",
    # logging
    "get_logger",
    "resolve_level",
    "setup_logging",
    # paths
    "ensure_directory",
    "format_size",
    "is_writable_directory",
    "sanitize",
    # timeutil
    "Stopwatch",
    "format_duration",
    "log_timestamp",
    "now_iso",
]
