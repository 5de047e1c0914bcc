"""Backup execution engine."""

import typing as t
from pathlib import Path

from .descriptor import BackupDescriptor
from .errors import BackupError, ConfigurationError, ExportIOError
from .job import BackupJobDefinition
from .naming import build_destination_path, build_filename, build_filesystem_filename, descriptor_node_path
from .selector import select_export_units
from .writer import ExportUnitWriter
from ..config import WorkspaceConfig
from ..store.base import TreeStore
from ..util.logging import get_logger
from ..util.paths import ensure_directory, is_writable_directory
from ..util.timeutil import Stopwatch, log_timestamp

logger = get_logger(__name__)

# Called with (workspace, node_path, current, total) after each exported node
ProgressCallback = t.Callable[[str, str, int, int], None]


def validate_backup_path(base_path: Path) -> None:
    """Require an existing, writable base directory.

    Raises:
        ConfigurationError: If ``base_path`` is missing, not a directory or read-only
    """
    if not is_writable_directory(base_path):
        logger.error(f"Cannot backup repository into invalid base path '{base_path}'")
        raise ConfigurationError(
            f"Cannot backup repository into nonexistent or non-writable base path {base_path}",
            path=str(base_path),
        )


class BackupExecutor:
    """Executes backup operations."""

    def __init__(
        self,
        configurations: t.List[WorkspaceConfig],
        base_path: Path,
        store: TreeStore,
        writer: t.Optional[ExportUnitWriter] = None,
        progress_callback: t.Optional[ProgressCallback] = None,
    ) -> None:
        """Initialize backup executor.

        Args:
            configurations: Workspaces to back up, in order
            base_path: Existing directory receiving the backup
            store: Tree store holding the workspaces
            writer: Export unit writer (defaults to a system view writer on ``store``)
            progress_callback: Optional callback for progress updates
        """
        self.configurations = configurations
        self.base_path = Path(base_path)
        self.store = store
        self.writer = writer or ExportUnitWriter(store)
        self.progress_callback = progress_callback
        self.descriptor = BackupDescriptor()

    def build_job_definitions(self) -> t.List[BackupJobDefinition]:
        return [BackupJobDefinition.from_config(c, self.base_path) for c in self.configurations]

    def run(self) -> BackupDescriptor:
        """Back up every configured workspace and write the descriptor.

        The base path is validated before anything is written. Any failure
        aborts the run: files exported so far stay on disk and the log file
        shows how far it got, but no descriptor is written.

        Returns:
            The descriptor of the finished run

        Raises:
            BackupError: On the first failure
        """
        validate_backup_path(self.base_path)
        job_definitions = self.build_job_definitions()

        total_watch = Stopwatch()
        self._log(f"Starting Backup into {self.base_path}")

        try:
            for job in job_definitions:
                self._backup_workspace(job)

            self._log(f"Writing backup jobfile to {self.base_path}")
            self.descriptor.serialize(self.base_path)
        except BackupError:
            self._log(f"Backup aborted after {total_watch}")
            raise

        self._log(f"Finished Backup in {total_watch}")
        return self.descriptor

    def _backup_workspace(self, job: BackupJobDefinition) -> None:
        job_watch = Stopwatch()
        workspace = job.workspace
        self._log(f"Starting backup of workspace {workspace}")

        try:
            try:
                ensure_directory(job.destination)
            except OSError as e:
                raise ExportIOError(
                    f"Cannot create workspace backup directory {job.destination}",
                    workspace=workspace,
                    path=str(job.destination),
                ) from e

            nodes_to_backup = select_export_units(self.store, job)
            for index, node_path in enumerate(nodes_to_backup, start=1):
                self._backup_node(job, node_path, nodes_to_backup)
                if self.progress_callback:
                    self.progress_callback(workspace, node_path, index, len(nodes_to_backup))
        except BackupError:
            self._log(f"Failed backup of workspace {workspace} after {job_watch}")
            raise

        self.descriptor.add_workspace(workspace)
        self._log(f"Finished backup of workspace {workspace} in {job_watch}")

    def _backup_node(self, job: BackupJobDefinition, node_path: str, nodes_to_backup: t.List[str]) -> None:
        node_watch = Stopwatch()
        workspace = job.workspace
        self._log(f"Starting backup of node {node_path} in workspace {workspace}")

        filename = build_filename(workspace, node_path)
        filesystem_filename = build_filesystem_filename(filename, job.compression)
        destination = build_destination_path(self.base_path, workspace, filesystem_filename)

        # Split-off children are left out of the root export
        if node_path == job.root_path:
            excluded_paths = [n for n in nodes_to_backup if n != node_path]
        else:
            excluded_paths = []

        try:
            self.writer.write(workspace, node_path, excluded_paths, filename, destination, job.compression)
        except BackupError:
            self._log(f"Failed backup of node {node_path} in workspace {workspace} after {node_watch}")
            raise

        relative_path = destination.relative_to(self.base_path)
        self.descriptor.add_workspace_item(workspace, descriptor_node_path(node_path), relative_path)
        self._log(f"Finished backup of node {node_path} in workspace {workspace} in {node_watch}")

    def _log(self, message: str) -> None:
        logger.info(message)
        self.descriptor.log(f"{log_timestamp()}: {message}", self.base_path)
