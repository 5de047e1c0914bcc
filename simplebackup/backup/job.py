"""Per-workspace backup job definitions."""

from dataclasses import dataclass
from pathlib import Path

from ..config import WorkspaceConfig
from ..util.compression import Compression
from ..util.paths import sanitize


@dataclass(frozen=True)
class BackupJobDefinition:
    """What to back up for one workspace, and where to put it."""

    destination: Path
    workspace: str
    root_path: str
    split: bool
    compression: Compression

    @classmethod
    def from_config(cls, config: WorkspaceConfig, base_path: Path) -> "BackupJobDefinition":
        return cls(
            destination=Path(base_path) / sanitize(config.workspace),
            workspace=config.workspace,
            root_path=config.path,
            split=config.split,
            compression=config.effective_compression,
        )
