"""Backup module initialization."""

from .descriptor import (
    DESCRIPTOR_FILENAME,
    LOG_FILENAME,
    BackupDescriptor,
    DescriptorItem,
    load_descriptor,
)
from .errors import (
    BackupError,
    ConfigurationError,
    ExportIOError,
    RepositoryError,
    SerializationError,
)
from .executor import BackupExecutor, validate_backup_path
from .job import BackupJobDefinition
from .naming import (
    build_destination_path,
    build_filename,
    build_filesystem_filename,
    descriptor_node_path,
)
from .selector import select_export_units
from .writer import ExportUnitWriter

__all__ = [
    # descriptor
    "DESCRIPTOR_FILENAME",
    "LOG_FILENAME",
    "BackupDescriptor",
    "DescriptorItem",
    "load_descriptor",
    # errors
    "BackupError",
    "ConfigurationError",
    "ExportIOError",
    "RepositoryError",
    "SerializationError",
    # executor
    "BackupExecutor",
    "validate_backup_path",
    # job
    "BackupJobDefinition",
    # naming
    "build_destination_path",
    "build_filename",
    "build_filesystem_filename",
    "descriptor_node_path",
    # selector
    "select_export_units",
    # writer
    "ExportUnitWriter",
]
