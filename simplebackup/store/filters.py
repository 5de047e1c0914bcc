"""Node decoration filters applied before export."""

import typing as t

from .base import Node

# Store-internal nodes that never belong in a backup
SYSTEM_NODE_NAMES = frozenset({"jcr:system", "rep:policy", "rep:repoPolicy"})


class FilteredNode(Node):
    """View of a node whose child enumeration goes through a filter."""

    def __init__(self, node: Node, node_filter: "ExcludeNodePathsAndSystemNodesFilter") -> None:
        self._node = node
        self._filter = node_filter

    @property
    def name(self) -> str:
        return self._node.name

    @property
    def path(self) -> str:
        return self._node.path

    @property
    def primary_type(self) -> str:
        return self._node.primary_type

    def get_nodes(self) -> t.Iterator[Node]:
        for child in self._node.get_nodes():
            if self._filter.accepts(child):
                yield FilteredNode(child, self._filter)

    def get_properties(self) -> t.Dict[str, t.Any]:
        return self._node.get_properties()

    def unwrap(self) -> Node:
        return self._node


class ExcludeNodePathsAndSystemNodesFilter:
    """Hides excluded subtrees and store-internal system nodes.

    A child whose path is in ``excluded_paths`` is skipped together with its
    whole subtree. Children named in ``SYSTEM_NODE_NAMES`` are always skipped.
    """

    def __init__(self, excluded_paths: t.Iterable[str] = ()) -> None:
        self.excluded_paths = frozenset(excluded_paths)

    def accepts(self, node: Node) -> bool:
        if node.name in SYSTEM_NODE_NAMES:
            return False
        return node.path not in self.excluded_paths

    def wrap_node(self, node: Node) -> FilteredNode:
        return FilteredNode(node, self)
