"""Derive static access classifications from finding-aid restriction notes."""

from archival_access.core.metadata.resolver import get_root_id, get_unit_id
from archival_access.core.tree.navigation import (
    ROOT_HANDLE,
    ArchivalTree,
    find_by_unit_id,
    get_ancestors,
)
from archival_access.errors import NodeNotFoundError
from archival_access.models.archival import RestrictionNote
from archival_access.models.item import Item, Restriction
from archival_access.protocols import TreeStoreProtocol

# Finding aids are written in English or Dutch.
_KEYWORDS: dict[str, Restriction] = {
    "closed": Restriction.CLOSED,
    "gesloten": Restriction.CLOSED,
    "restricted": Restriction.RESTRICTED,
    "beperkt": Restriction.RESTRICTED,
    "date": Restriction.DATE_GATED,
}


def to_restriction(value: str | None) -> Restriction:
    """Map a restriction statement to a classification; anything unknown is open."""
    if value is None:
        return Restriction.OPEN
    return _KEYWORDS.get(value.strip().lower(), Restriction.OPEN)


def _override_classification(note: RestrictionNote) -> Restriction:
    return to_restriction(note.scope or note.text)


def collection_restriction(tree: ArchivalTree) -> Restriction:
    """The classification declared for the whole collection."""
    note = tree.root.restriction
    return to_restriction(note.text) if note is not None else Restriction.OPEN


def classify_restriction(tree: ArchivalTree, unit_id: str) -> Restriction:
    """Classify a unit of a collection.

    Closed and restricted collections may carry subtree-scoped overrides: the
    nearest restriction note on the unit itself or on one of its (non-root)
    ancestors replaces the collection-level classification. Units missing from
    the tree get the collection-level classification.
    """
    base = collection_restriction(tree)
    if base not in (Restriction.CLOSED, Restriction.RESTRICTED):
        return base

    try:
        target = find_by_unit_id(tree, unit_id)
    except NodeNotFoundError:
        return base

    for node in (target, *reversed(get_ancestors(tree, target.handle))):
        if node.handle == ROOT_HANDLE:
            break
        if node.restriction is not None:
            return _override_classification(node.restriction)
    return base


class TreeRestrictionPolicy:
    """Classifies items by the finding aid of the collection they belong to."""

    def __init__(self, tree_store: TreeStoreProtocol) -> None:
        self._tree_store = tree_store

    def classify(self, item: Item) -> Restriction:
        identifier = item.collection_id or item.id
        tree = self._tree_store.get_tree(get_root_id(identifier))
        if tree is None:
            return Restriction.OPEN
        return classify_restriction(tree, get_unit_id(identifier))
