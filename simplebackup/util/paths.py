"""Utility functions for path operations."""

import os
import re
from pathlib import Path

# Characters that never make it into a file or directory name
INVALID_FILENAME_PATTERN = re.compile(r'[\\/:*?"<>|\s]')


def sanitize(name: str) -> str:
    """Strip path separators, reserved characters and whitespace, then lower-case."""
    return INVALID_FILENAME_PATTERN.sub("", name).lower()


def ensure_directory(path: Path) -> Path:
    """Ensure directory exists, creating it if necessary."""
    path.mkdir(parents=True, exist_ok=True)
    return path


def is_writable_directory(path: Path) -> bool:
    """Check that a path exists, is a directory and can be written to."""
    return path.exists() and path.is_dir() and os.access(path, os.W_OK)


def format_size(size_bytes: int) -> str:
    """Format file size in human readable format."""
    if size_bytes == 0:
        return "0 B"

    size_names = ["B", "KB", "MB", "GB", "TB"]
    i = 0
    while size_bytes >= 1024.0 and i < len(size_names) - 1:
        size_bytes /= 1024.0
        i += 1

    return f"{size_bytes:.1f} {size_names[i]}"
