"""Tree navigation over a finding aid: children, ancestors, lookup by unit id."""

from dataclasses import dataclass

from archival_access.errors import NodeNotFoundError
from archival_access.models.archival import ArchivalNode

ROOT_HANDLE = 0


@dataclass(frozen=True)
class ArchivalTree:
    """A finding aid stored as an arena of nodes.

    Handles are indices into ``nodes``. The root description node is always at
    ``ROOT_HANDLE``; parent links are handles, never object references.
    """

    collection_id: str
    nodes: tuple[ArchivalNode, ...]

    def __post_init__(self) -> None:
        if not self.nodes:
            msg = f"Tree {self.collection_id!r} has no root node"
            raise ValueError(msg)

    @property
    def root(self) -> ArchivalNode:
        return self.nodes[ROOT_HANDLE]

    def node(self, handle: int) -> ArchivalNode:
        return self.nodes[handle]


def get_children(tree: ArchivalTree, handle: int) -> tuple[ArchivalNode, ...]:
    """Get direct children of a node, in document order."""
    return tuple(tree.nodes[h] for h in tree.nodes[handle].children)


def get_distinct_parent(tree: ArchivalTree, handle: int) -> ArchivalNode | None:
    """Get the parent of a node if it sits at a different structural level.

    Returns None at the root, and when the parent shares the node's level
    (a synonymous wrapper level, where climbing stops).
    """
    node = tree.nodes[handle]
    if node.parent is None:
        return None
    parent = tree.nodes[node.parent]
    if parent.level == node.level:
        return None
    return parent


def get_ancestors(tree: ArchivalTree, handle: int) -> tuple[ArchivalNode, ...]:
    """Get all ancestors of a node.

    Returns ancestors in order from root to immediate parent (excludes the node itself).
    """
    chain: list[ArchivalNode] = []
    parent = tree.nodes[handle].parent
    while parent is not None:
        node = tree.nodes[parent]
        chain.append(node)
        parent = node.parent
    chain.reverse()
    return tuple(chain)


def is_within(tree: ArchivalTree, handle: int, ancestor_handle: int) -> bool:
    """True if ``handle`` is ``ancestor_handle`` or lies in its subtree."""
    current: int | None = handle
    while current is not None:
        if current == ancestor_handle:
            return True
        current = tree.nodes[current].parent
    return False


def find_by_unit_id(tree: ArchivalTree, unit_id: str) -> ArchivalNode:
    """Find the first node, in document order, with the given unit id.

    Raises:
        NodeNotFoundError: If no node carries that unit id.
    """
    wanted = unit_id.strip()
    if wanted:
        # Handles are assigned in pre-order, so arena order is document order.
        for node in tree.nodes:
            if node.unit_id is not None and node.unit_id.strip() == wanted:
                return node
    raise NodeNotFoundError(wanted, tree.collection_id)
