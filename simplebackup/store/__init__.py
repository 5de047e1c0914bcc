"""Store module initialization."""

from .base import (
    CONTENT_TYPE,
    FOLDER_TYPE,
    PAGE_TYPE,
    SPLITTABLE_NODE_TYPES,
    Node,
    PathNotFoundError,
    Session,
    StoreError,
    TreeStore,
    session_scope,
)
from .filters import SYSTEM_NODE_NAMES, ExcludeNodePathsAndSystemNodesFilter, FilteredNode
from .memory import MemoryNode, MemorySession, MemoryTreeStore, load_tree_store

__all__ = [
    # base
    "CONTENT_TYPE",
    "FOLDER_TYPE",
    "PAGE_TYPE",
    "SPLITTABLE_NODE_TYPES",
    "Node",
    "PathNotFoundError",
    "Session",
    "StoreError",
    "TreeStore",
    "session_scope",
    # filters
    "SYSTEM_NODE_NAMES",
    "ExcludeNodePathsAndSystemNodesFilter",
    "FilteredNode",
    # memory
    "MemoryNode",
    "MemorySession",
    "MemoryTreeStore",
    "load_tree_store",
]
