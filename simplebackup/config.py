"""Configuration management for SimpleBackup."""

from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator
from ruamel.yaml import YAML

from .util.compression import Compression
from .util.logging import resolve_level


class WorkspaceConfig(BaseModel):
    """Backup settings of one workspace."""

    workspace: str = Field(description="Workspace name in the tree store")
    path: str = Field(default="/", description="Root path exported from the workspace")
    split: bool = Field(default=False, description="Export splittable children of the root into their own files")
    compress: bool = Field(default=False, description="Compress export files")
    compression: Compression = Field(default=Compression.ZIP, description="Compression used when compress is set")

    @field_validator("workspace")
    @classmethod
    def _workspace_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("workspace must not be empty")
        return value

    @field_validator("path")
    @classmethod
    def _path_is_absolute(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"path must be absolute: {value}")
        return value

    @property
    def effective_compression(self) -> Compression:
        if not self.compress:
            return Compression.NONE
        return self.compression


class StoreConfig(BaseModel):
    """Configuration of the content tree store."""

    tree_file: Optional[Path] = Field(default=None, description="YAML tree file backing the embedded store")


class BackupConfig(BaseModel):
    """Main configuration for SimpleBackup."""

    base_path: Path = Field(
        default_factory=lambda: Path.home() / ".local/share/simplebackup/backups",
        description="Directory receiving the backup"
    )
    workspaces: List[WorkspaceConfig] = Field(default_factory=list, description="Workspaces to back up")
    store: StoreConfig = Field(default_factory=StoreConfig)

    # Runtime settings
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[Path] = Field(default=None, description="Detailed process log file")

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        resolve_level(value)
        return value.strip().upper()

    class Config:
        """Pydantic configuration."""

        validate_assignment = True


def default_config_path() -> Path:
    return Path.home() / ".config/simplebackup/config.yaml"


def load_config(config_path: Optional[Path] = None) -> BackupConfig:
    """Load configuration from a YAML file."""

    if config_path is None:
        config_path = default_config_path()

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file {config_path} does not exist")

    yaml = YAML(typ="safe")
    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.load(f) or {}

    config = BackupConfig(**data)

    # Relative paths are relative to the configuration file
    if not config.base_path.is_absolute():
        config.base_path = config_path.parent / config.base_path
    if config.store.tree_file and not config.store.tree_file.is_absolute():
        config.store.tree_file = config_path.parent / config.store.tree_file

    return config


def save_config(config: BackupConfig, config_path: Optional[Path] = None) -> Path:
    """Save configuration to file."""

    if config_path is None:
        config_path = default_config_path()

    # Ensure directory exists
    config_path.parent.mkdir(parents=True, exist_ok=True)

    yaml = YAML()
    yaml.default_flow_style = False

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config.model_dump(mode="json"), f)

    return config_path
