"""Parse the JSON rendition of a finding aid into an ArchivalTree."""

from collections import Counter
from typing import Any

from archival_access.core.tree.navigation import ArchivalTree
from archival_access.models.archival import ArchivalNode, Origination, RestrictionNote


def _strings(raw: dict[str, Any], plural: str, singular: str | None = None) -> tuple[str, ...]:
    values = raw.get(plural)
    if values is None and singular is not None:
        values = raw.get(singular)
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(str(v) for v in values)


def _originations(raw: dict[str, Any]) -> tuple[Origination, ...]:
    result: list[Origination] = []
    for entry in raw.get("originations", []):
        if isinstance(entry, str):
            result.append(Origination(name=entry))
        else:
            result.append(Origination(name=entry.get("name", ""), label=entry.get("label")))
    return tuple(result)


def _restriction(raw: dict[str, Any]) -> RestrictionNote | None:
    value = raw.get("restriction")
    if value is None:
        return None
    if isinstance(value, str):
        return RestrictionNote(text=value)
    return RestrictionNote(text=value.get("text"), scope=value.get("scope"))


def parse_tree_data(data: dict[str, Any]) -> ArchivalTree:
    """Parse a nested finding-aid dict into an arena-backed ArchivalTree.

    Args:
        data: ``{"collection_id": ..., "root": {...}}`` where every level may carry
            ``children`` (a list of levels, in document order).

    Returns:
        ArchivalTree with handles assigned in pre-order (root is handle 0).
    """
    root = data.get("root")
    if not isinstance(root, dict):
        msg = "Finding aid has no root level"
        raise ValueError(msg)
    collection_id = data.get("collection_id") or root.get("unit_id")
    if not collection_id:
        msg = "Finding aid has no collection_id"
        raise ValueError(msg)

    # Pre-order walk, children pushed in reverse so they pop in document order.
    flat: list[tuple[dict[str, Any], int | None, int]] = []
    child_handles: dict[int, list[int]] = {}
    todo: list[tuple[dict[str, Any], int | None, int]] = [(root, None, 0)]
    while todo:
        raw, parent, sibling_count = todo.pop()
        if not raw.get("level"):
            msg = f"Level without 'level' tag under handle {parent!r}"
            raise ValueError(msg)
        handle = len(flat)
        flat.append((raw, parent, sibling_count))
        if parent is not None:
            child_handles.setdefault(parent, []).append(handle)

        seen: Counter[str] = Counter()
        positioned: list[tuple[dict[str, Any], int | None, int]] = []
        for child in raw.get("children", []):
            level = child.get("level", "")
            positioned.append((child, handle, seen[level]))
            seen[level] += 1
        todo.extend(reversed(positioned))

    nodes = tuple(
        ArchivalNode(
            handle=handle,
            level=raw["level"],
            parent=parent,
            children=tuple(child_handles.get(handle, ())),
            preceding_sibling_count=sibling_count,
            unit_id=raw.get("unit_id"),
            titles=_strings(raw, "titles", "title"),
            genre_forms=_strings(raw, "genre_forms"),
            paragraphs=_strings(raw, "paragraphs"),
            extents=_strings(raw, "extents", "extent"),
            originations=_originations(raw),
            dates=_strings(raw, "dates"),
            restriction=_restriction(raw),
        )
        for handle, (raw, parent, sibling_count) in enumerate(flat)
    )
    return ArchivalTree(collection_id=collection_id, nodes=nodes)
