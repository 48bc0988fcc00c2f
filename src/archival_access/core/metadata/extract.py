"""Per-level field extraction for finding-aid metadata."""

import hashlib

from archival_access.models.archival import NO_TITLE, ArchivalNode, Author, MetadataRecord

CONTENT_SEPARATOR = "<br/>"
DEFAULT_AUTHOR_ROLE = "Author"

# Checked in order; the first rule matching a genre text classifies it.
_FORMAT_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (("article",), "article"),
    (("serial",), "serial"),
    (("book",), "book"),
    (("sound",), "sound"),
    (("visual", "photo", "poster", "drawing", "object"), "visual"),
    (("moving",), "moving-visual"),
)


def classify_format(text: str) -> str | None:
    """Classify a genre/form text, or None if no rule matches."""
    lowered = text.lower()
    for needles, fmt in _FORMAT_RULES:
        if any(needle in lowered for needle in needles):
            return fmt
    return None


def surrogate_unit_id(title: str) -> str:
    """Derive a stable stand-in identifier from a title.

    Titles equal after whitespace/case normalisation map to the same identifier.
    """
    normalized = " ".join(title.split()).lower()
    return hashlib.md5(normalized.encode("utf-8")).hexdigest()


def _first_trimmed(values: tuple[str, ...]) -> str | None:
    for value in values:
        if value.strip():
            return value.strip()
    return None


def extract_record(node: ArchivalNode, parent: MetadataRecord | None = None) -> MetadataRecord:
    """Extract the descriptive record of one level.

    Args:
        node: The level to describe.
        parent: The already-resolved record of the enclosing level, if any. Formats
            and the ancestor title are inherited from it; everything else is local.
    """
    formats = frozenset(fmt for fmt in map(classify_format, node.genre_forms) if fmt)
    if not formats and parent is not None:
        formats = parent.formats

    title = _first_trimmed(node.titles) or NO_TITLE

    explicit_id = node.unit_id.strip() if node.unit_id and node.unit_id.strip() else None

    content = None
    if node.paragraphs:
        content = CONTENT_SEPARATOR.join(p.strip() for p in node.paragraphs)

    authors = None
    if node.originations:
        authors = tuple(
            Author(role=o.label or DEFAULT_AUTHOR_ROLE, name=o.name.strip())
            for o in node.originations
        )

    return MetadataRecord(
        formats=formats,
        title=title,
        unit_id=explicit_id or surrogate_unit_id(title),
        unit_id_is_surrogate=explicit_id is None and parent is not None,
        order=node.preceding_sibling_count if node.parent is not None else None,
        content=content,
        extent=_first_trimmed(node.extents),
        authors=authors,
        dates=tuple(d.strip() for d in node.dates) if node.dates else None,
        ancestor_title=(parent.title or parent.ancestor_title) if parent is not None else None,
    )
