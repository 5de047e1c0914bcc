"""Backup descriptor: the manifest and run log of one backup."""

from pathlib import Path
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field
from ruamel.yaml import YAML

from .errors import ExportIOError
from ..util.logging import get_logger
from ..util.timeutil import now_iso

logger = get_logger(__name__)

DESCRIPTOR_FILENAME = "backup.yaml"
LOG_FILENAME = "backup.log"


class DescriptorItem(BaseModel):
    """One export file of a workspace."""

    node_path: str = Field(description="Parent path the exported node is restored under")
    file: str = Field(description="Export file path relative to the backup base directory")


class BackupDescriptor(BaseModel):
    """Manifest of a backup run plus its timestamped log."""

    version: int = Field(default=1, description="Descriptor format version")
    created_at: str = Field(default_factory=now_iso, description="Run start timestamp")

    workspaces: Dict[str, List[DescriptorItem]] = Field(
        default_factory=dict, description="Export files per workspace, in export order"
    )
    completed_workspaces: List[str] = Field(
        default_factory=list, description="Workspaces whose export finished"
    )
    messages: List[str] = Field(default_factory=list, description="Run log lines")

    class Config:
        """Pydantic configuration."""
        validate_assignment = True

    def add_workspace_item(self, workspace: str, node_path: str, file: Union[str, Path]) -> None:
        """Record an export file for a workspace."""
        if isinstance(file, Path):
            file = file.as_posix()
        self.workspaces.setdefault(workspace, []).append(DescriptorItem(node_path=node_path, file=file))

    def add_workspace(self, workspace: str) -> None:
        """Mark a workspace as fully exported."""
        if workspace not in self.completed_workspaces:
            self.completed_workspaces.append(workspace)

    def items(self, workspace: str) -> List[DescriptorItem]:
        return list(self.workspaces.get(workspace, []))

    def log(self, message: str, destination: Path) -> None:
        """Append a log line and rewrite the log file under ``destination``."""
        self.messages.append(message)

        log_path = Path(destination) / LOG_FILENAME
        try:
            with open(log_path, "w", encoding="utf-8") as f:
                f.write("\n".join(self.messages) + "\n")
        except OSError as e:
            raise ExportIOError(f"Cannot write backup log {log_path}", path=str(log_path)) from e

    def serialize(self, destination: Path) -> Path:
        """Write the manifest under ``destination`` and return its path."""
        descriptor_path = Path(destination) / DESCRIPTOR_FILENAME

        yaml = YAML()
        yaml.default_flow_style = False
        yaml.width = 120

        try:
            with open(descriptor_path, "w", encoding="utf-8") as f:
                yaml.dump(self.model_dump(mode="json"), f)
        except OSError as e:
            raise ExportIOError(
                f"Cannot write backup descriptor {descriptor_path}", path=str(descriptor_path)
            ) from e

        logger.debug(f"Saved backup descriptor to {descriptor_path}")
        return descriptor_path


def load_descriptor(destination: Path) -> Optional[BackupDescriptor]:
    """Load the manifest of a finished backup, or None if the run never completed."""
    descriptor_path = Path(destination) / DESCRIPTOR_FILENAME
    if not descriptor_path.exists():
        return None

    yaml = YAML(typ="safe")
    with open(descriptor_path, "r", encoding="utf-8") as f:
        data = yaml.load(f) or {}

    descriptor = BackupDescriptor(**data)
    logger.debug(f"Loaded backup descriptor from {descriptor_path}")
    return descriptor
