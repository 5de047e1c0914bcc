"""Deterministic export file naming."""

import re
from pathlib import Path
from urllib.parse import quote_plus

from ..util.compression import Compression
from ..util.paths import sanitize

ROOT_PATH = "/"
EXPORT_EXTENSION = ".xml"

_REPEATED_SEPARATORS = re.compile(r"/{2,}")
_LAST_SEGMENT = re.compile(r"/[^/]+$")


def build_filename(workspace: str, node_path: str) -> str:
    """Name of the serialized export for a node, e.g. ``website.about.xml``.

    The workspace name comes first. Any node path other than the root follows
    with separators turned into dots, URL-encoded, lower-cased and sanitized.
    """
    filename = sanitize(workspace.lower())

    if node_path != ROOT_PATH:
        cleaned = _REPEATED_SEPARATORS.sub("/", node_path).replace("/", ".")
        cleaned = quote_plus(cleaned, safe="*").replace("~", "%7E")
        filename += sanitize(cleaned.lower())

    return filename + EXPORT_EXTENSION


def build_filesystem_filename(filename: str, compression: Compression) -> str:
    """Append the compression suffix (``.zip``, ``.gz`` or nothing)."""
    return filename + Compression(compression).extension


def build_destination_path(base_path: Path, workspace: str, filesystem_filename: str) -> Path:
    return Path(base_path) / sanitize(workspace) / filesystem_filename


def descriptor_node_path(node_path: str) -> str:
    """Parent path a node gets restored under: ``/a/b`` -> ``/a/``, ``/a`` -> ``/``."""
    return _LAST_SEGMENT.sub("/", node_path, count=1)
