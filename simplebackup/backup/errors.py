"""Backup failure types.

Every failure aborts the whole run. The subclass tells the caller which
layer failed; ``workspace`` and ``path`` carry where it happened.
"""

import typing as t


class BackupError(Exception):
    """Base error for a failed backup run."""

    def __init__(self, message: str, workspace: t.Optional[str] = None, path: t.Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.workspace = workspace
        self.path = path

    def __str__(self) -> str:
        parts = [self.message]
        if self.workspace:
            parts.append(f"workspace: {self.workspace}")
        if self.path:
            parts.append(f"path: {self.path}")
        return " | ".join(parts)


class ConfigurationError(BackupError):
    """Invalid destination directory or a missing repository root."""
    pass


class RepositoryError(BackupError):
    """The tree store failed while reading content."""
    pass


class ExportIOError(BackupError):
    """A destination file or directory could not be created or written."""
    pass


class SerializationError(BackupError):
    """Serializing a node into its export file failed."""
    pass
