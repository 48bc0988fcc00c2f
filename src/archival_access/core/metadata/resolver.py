"""Resolve the root-to-target chain of metadata records for an archival unit."""

from archival_access.core.metadata.extract import extract_record
from archival_access.core.tree.navigation import (
    ROOT_HANDLE,
    ArchivalTree,
    find_by_unit_id,
    get_distinct_parent,
)
from archival_access.errors import NodeNotFoundError
from archival_access.models.archival import ArchivalNode, MetadataRecord


def get_root_id(identifier: str) -> str:
    """Return the collection segment of a composite identifier ("A.1.1" -> "A")."""
    return identifier.split(".")[0]


def get_unit_id(identifier: str) -> str:
    """Return the identifier without its collection segment ("A.1.1" -> "1.1")."""
    return ".".join(identifier.split(".")[1:])


def _climb(tree: ArchivalTree, target: ArchivalNode) -> list[ArchivalNode]:
    """Collect the target and its distinct-level ancestors below the root, root-most first."""
    chain = [target]
    current = target
    while True:
        parent = get_distinct_parent(tree, current.handle)
        if parent is None or parent.handle == ROOT_HANDLE:
            break
        chain.append(parent)
        current = parent
    chain.reverse()
    return chain


def resolve_metadata(target_identifier: str, tree: ArchivalTree) -> list[MetadataRecord]:
    """Resolve metadata for a unit and the levels enclosing it.

    The first record always describes the collection (the tree root). When the
    unit exists in the tree, the following records describe each enclosing level
    down to the unit itself, each inheriting from the one before.

    Args:
        target_identifier: Composite identifier, e.g. "ARCH01234.1.1".
        tree: The collection's finding aid.

    Returns:
        Records ordered root-first, ending with the most specific one.
    """
    root_record = extract_record(tree.root)

    try:
        target = find_by_unit_id(tree, get_unit_id(target_identifier))
    except NodeNotFoundError:
        return [root_record]

    if target.handle == ROOT_HANDLE:
        return [root_record]

    records = [root_record]
    for node in _climb(tree, target):
        records.append(extract_record(node, records[-1]))
    return records
