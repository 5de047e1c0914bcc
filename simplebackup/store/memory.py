"""In-memory tree store, optionally loaded from a YAML tree file."""

import typing as t
from pathlib import Path

from ruamel.yaml import YAML

from .base import (
    DEFAULT_NAMESPACES,
    ROOT_TYPE,
    UNSTRUCTURED_TYPE,
    Node,
    PathNotFoundError,
    Session,
    StoreError,
    TreeStore,
)
from ..util.logging import get_logger

logger = get_logger(__name__)


class MemoryNode(Node):
    """A mutable node held in memory."""

    def __init__(
        self,
        name: str = "",
        primary_type: str = ROOT_TYPE,
        properties: t.Optional[t.Dict[str, t.Any]] = None,
        parent: t.Optional["MemoryNode"] = None,
    ) -> None:
        self._name = name
        self._primary_type = primary_type
        self._properties = dict(properties or {})
        self._children: t.Dict[str, "MemoryNode"] = {}
        self.parent = parent

    @property
    def name(self) -> str:
        return self._name

    @property
    def path(self) -> str:
        if self.parent is None:
            return "/"
        parent_path = self.parent.path
        if parent_path == "/":
            return "/" + self._name
        return parent_path + "/" + self._name

    @property
    def primary_type(self) -> str:
        return self._primary_type

    def get_nodes(self) -> t.Iterable["MemoryNode"]:
        return list(self._children.values())

    def get_properties(self) -> t.Dict[str, t.Any]:
        return dict(self._properties)

    def set_property(self, name: str, value: t.Any) -> None:
        self._properties[name] = value

    def get_child(self, name: str) -> t.Optional["MemoryNode"]:
        return self._children.get(name)

    def add_node(self, name: str, primary_type: str = UNSTRUCTURED_TYPE, **properties: t.Any) -> "MemoryNode":
        """Append a child node and return it."""
        if not name or "/" in name:
            raise ValueError(f"Invalid node name: {name!r}")
        if name in self._children:
            raise ValueError(f"Node {name} already exists under {self.path}")
        child = MemoryNode(name, primary_type, properties, parent=self)
        self._children[name] = child
        return child

    def __repr__(self) -> str:
        return f"MemoryNode({self.path!r}, {self._primary_type!r})"


class MemorySession(Session):
    """Session on one workspace of a MemoryTreeStore."""

    def __init__(self, store: "MemoryTreeStore", workspace: str, root: MemoryNode) -> None:
        super().__init__(workspace)
        self._store = store
        self._root = root
        self.live = True

    def get_node(self, path: str) -> MemoryNode:
        if not self.live:
            raise StoreError("Session is closed", workspace=self.workspace, path=path)
        if not path.startswith("/"):
            raise StoreError(f"Not an absolute path: {path}", workspace=self.workspace, path=path)

        node = self._root
        for segment in [s for s in path.split("/") if s]:
            node = node.get_child(segment)
            if node is None:
                raise PathNotFoundError(
                    f"Path {path} not found in workspace {self.workspace}",
                    workspace=self.workspace,
                    path=path,
                )
        return node

    def namespaces(self) -> t.Dict[str, str]:
        return dict(self._store.namespace_registry)

    def logout(self) -> None:
        if self.live:
            self.live = False
            self._store.open_sessions -= 1


class MemoryTreeStore(TreeStore):
    """Tree store keeping every workspace as an in-memory node tree."""

    def __init__(
        self,
        workspaces: t.Optional[t.Dict[str, MemoryNode]] = None,
        namespaces: t.Optional[t.Dict[str, str]] = None,
    ) -> None:
        self.workspaces: t.Dict[str, MemoryNode] = dict(workspaces or {})
        self.namespace_registry = dict(namespaces or DEFAULT_NAMESPACES)
        self.open_sessions = 0

    def add_workspace(self, workspace: str) -> MemoryNode:
        """Create an empty workspace and return its root node."""
        root = MemoryNode()
        self.workspaces[workspace] = root
        return root

    def login(self, workspace: str) -> MemorySession:
        root = self.workspaces.get(workspace)
        if root is None:
            raise StoreError(f"Workspace {workspace} does not exist", workspace=workspace)
        self.open_sessions += 1
        return MemorySession(self, workspace, root)

    @classmethod
    def from_dict(cls, data: t.Dict[str, t.Any]) -> "MemoryTreeStore":
        """Build a store from ``{workspace: {primaryType, properties, children}}``."""
        store = cls()
        for workspace, spec in (data or {}).items():
            root = store.add_workspace(str(workspace))
            _populate(root, spec or {})
        return store


def _populate(node: MemoryNode, spec: t.Dict[str, t.Any]) -> None:
    for key, value in (spec.get("properties") or {}).items():
        node.set_property(str(key), value)
    for name, child_spec in (spec.get("children") or {}).items():
        child_spec = child_spec or {}
        child = node.add_node(
            str(name),
            child_spec.get("primaryType", UNSTRUCTURED_TYPE),
        )
        _populate(child, child_spec)


def load_tree_store(tree_file: Path) -> MemoryTreeStore:
    """Load a MemoryTreeStore from a YAML tree file."""
    if not tree_file.exists():
        raise StoreError(f"Tree file {tree_file} does not exist")

    yaml = YAML(typ="safe")
    with open(tree_file, "r", encoding="utf-8") as f:
        data = yaml.load(f) or {}

    store = MemoryTreeStore.from_dict(data)
    logger.debug(f"Loaded {len(store.workspaces)} workspaces from {tree_file}")
    return store
