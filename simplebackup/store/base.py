"""Content tree store abstractions."""

import typing as t
from abc import ABC, abstractmethod
from contextlib import contextmanager

from ..util.logging import get_logger

logger = get_logger(__name__)

# Primary node types
FOLDER_TYPE = "mgnl:folder"
CONTENT_TYPE = "mgnl:content"
PAGE_TYPE = "mgnl:page"
ROOT_TYPE = "rep:root"
UNSTRUCTURED_TYPE = "nt:unstructured"

SPLITTABLE_NODE_TYPES = (FOLDER_TYPE, CONTENT_TYPE, PAGE_TYPE)

DEFAULT_NAMESPACES = {
    "jcr": "http://www.jcp.org/jcr/1.0",
    "nt": "http://www.jcp.org/jcr/nt/1.0",
    "mix": "http://www.jcp.org/jcr/mix/1.0",
    "sv": "http://www.jcp.org/jcr/sv/1.0",
    "xsi": "http://www.w3.org/2001/XMLSchema-instance",
    "rep": "internal",
    "mgnl": "http://www.magnolia.info/jcr/mgnl",
}


class StoreError(Exception):
    """Tree store operation error."""

    def __init__(self, message: str, workspace: t.Optional[str] = None, path: t.Optional[str] = None):
        super().__init__(message)
        self.workspace = workspace
        self.path = path


class PathNotFoundError(StoreError):
    """No node exists at the requested path."""
    pass


class Node(ABC):
    """A node in a workspace tree."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Node name, empty for the root node."""

    @property
    @abstractmethod
    def path(self) -> str:
        """Absolute node path."""

    @property
    @abstractmethod
    def primary_type(self) -> str:
        """Primary node type identifier, e.g. ``mgnl:page``."""

    @abstractmethod
    def get_nodes(self) -> t.Iterable["Node"]:
        """Iterate child nodes in store order."""

    @abstractmethod
    def get_properties(self) -> t.Dict[str, t.Any]:
        """Return node properties in store order, without ``jcr:primaryType``."""


class Session(ABC):
    """A login to one workspace of a tree store."""

    def __init__(self, workspace: str) -> None:
        self.workspace = workspace

    @abstractmethod
    def get_node(self, path: str) -> Node:
        """Resolve an absolute path.

        Raises:
            PathNotFoundError: If no node exists at ``path``
            StoreError: If the lookup fails for any other reason
        """

    def namespaces(self) -> t.Dict[str, str]:
        """Namespace prefix to URI mappings registered in the store."""
        return dict(DEFAULT_NAMESPACES)

    @abstractmethod
    def logout(self) -> None:
        """Release the session."""


class TreeStore(ABC):
    """A content tree store holding named workspaces."""

    @abstractmethod
    def login(self, workspace: str) -> Session:
        """Open a session on a workspace.

        Raises:
            StoreError: If the workspace is unknown or the store is unreachable
        """


@contextmanager
def session_scope(store: TreeStore, workspace: str) -> t.Iterator[Session]:
    """Acquire a session for the duration of a block and always release it."""
    session = store.login(workspace)
    logger.debug(f"Opened session on workspace {workspace}")
    try:
        yield session
    finally:
        session.logout()
        logger.debug(f"Released session on workspace {workspace}")
