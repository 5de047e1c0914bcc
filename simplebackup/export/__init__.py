"""Export module initialization."""

from .sysview import NamespaceFilter, SystemViewExporter, create_content_handler

__all__ = [
    "NamespaceFilter",
    "SystemViewExporter",
    "create_content_handler",
]
