"""Selection of the nodes exported into their own files."""

import typing as t

from .errors import ConfigurationError
from .job import BackupJobDefinition
from ..store.base import SPLITTABLE_NODE_TYPES, TreeStore, session_scope
from ..util.logging import get_logger

logger = get_logger(__name__)


def select_export_units(store: TreeStore, job: BackupJobDefinition) -> t.List[str]:
    """List the node paths that each get their own export file.

    The root path always comes first. For split jobs every direct child of the
    root with a splittable primary type follows, in store order.

    Raises:
        ConfigurationError: If the root cannot be looked up
    """
    units = [job.root_path]

    try:
        with session_scope(store, job.workspace) as session:
            root = session.get_node(job.root_path)
            if job.split:
                for child in root.get_nodes():
                    if child.primary_type in SPLITTABLE_NODE_TYPES:
                        units.append(child.path)
    except Exception as e:
        raise ConfigurationError(
            f"Cannot select nodes to export below {job.root_path}: {e}",
            workspace=job.workspace,
            path=job.root_path,
        ) from e

    logger.debug(f"Selected {len(units)} export units in workspace {job.workspace}")
    return units
