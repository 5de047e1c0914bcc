"""Writes one export unit into one file."""

import typing as t
from contextlib import ExitStack, closing
from pathlib import Path

from .errors import BackupError, ConfigurationError, ExportIOError, RepositoryError, SerializationError
from ..export.sysview import SystemViewExporter, create_content_handler
from ..store.base import PathNotFoundError, StoreError, TreeStore, session_scope
from ..store.filters import ExcludeNodePathsAndSystemNodesFilter
from ..util.compression import Compression, decorate_sink
from ..util.logging import get_logger

logger = get_logger(__name__)


class ExportUnitWriter:
    """Streams the serialized form of a node into a (compressed) file."""

    def __init__(self, store: TreeStore, exporter_factory: t.Callable = SystemViewExporter) -> None:
        """Initialize export unit writer.

        Args:
            store: Tree store the nodes are read from
            exporter_factory: Called as ``exporter_factory(session, content_handler)``;
                the result's ``export(node)`` writes the node
        """
        self.store = store
        self.exporter_factory = exporter_factory

    def write(
        self,
        workspace: str,
        node_path: str,
        excluded_paths: t.Iterable[str],
        filename: str,
        destination: Path,
        compression: Compression,
    ) -> None:
        """Export ``node_path`` of ``workspace`` into ``destination``.

        Subtrees at ``excluded_paths`` and system nodes are left out.
        ``filename`` names the archive entry when compressing with ZIP.
        The file, its compression frame and the store session are released
        in reverse order on every exit path.

        Raises:
            ConfigurationError: If ``node_path`` does not exist
            RepositoryError: If the store fails
            ExportIOError: If ``destination`` cannot be opened for writing
            SerializationError: If anything else fails during the export
        """
        logger.debug(f"Backing up node {node_path} in workspace {workspace} to {destination}")

        try:
            with ExitStack() as stack:
                try:
                    raw = stack.enter_context(open(destination, "wb"))
                except OSError as e:
                    raise ExportIOError(
                        f"Cannot open file '{destination}' for writing during backup",
                        workspace=workspace,
                        path=str(destination),
                    ) from e

                sink = stack.enter_context(closing(decorate_sink(raw, filename, compression)))
                session = stack.enter_context(session_scope(self.store, workspace))

                node_filter = ExcludeNodePathsAndSystemNodesFilter(excluded_paths)
                node = node_filter.wrap_node(session.get_node(node_path))

                exporter = self.exporter_factory(session, create_content_handler(sink))
                exporter.export(node)
        except BackupError:
            raise
        except PathNotFoundError as e:
            raise ConfigurationError(
                f"Path {node_path} was not found for export", workspace=workspace, path=node_path
            ) from e
        except StoreError as e:
            raise RepositoryError(
                f"A repository exception occurred: {e}", workspace=workspace, path=node_path
            ) from e
        except Exception as e:
            raise SerializationError(
                f"An exception occurred during export: {e}", workspace=workspace, path=node_path
            ) from e
