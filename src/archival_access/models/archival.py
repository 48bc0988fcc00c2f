"""Domain models for finding-aid trees and their resolved metadata."""

from dataclasses import dataclass

NO_TITLE = "No title"


@dataclass(frozen=True)
class Origination:
    """A creator statement as it appears in the finding aid."""

    name: str
    label: str | None = None


@dataclass(frozen=True)
class RestrictionNote:
    """An access-restriction annotation on a level of the finding aid.

    ``text`` is the free-text statement (e.g. "Closed", "Beperkt");
    ``scope`` is the declared type (e.g. "part" at collection level, or the
    classification of a subtree override such as "open").
    """

    text: str | None = None
    scope: str | None = None


@dataclass(frozen=True)
class ArchivalNode:
    """One level of a hierarchical finding aid, stored in an ArchivalTree arena."""

    handle: int
    level: str
    parent: int | None = None
    children: tuple[int, ...] = ()
    preceding_sibling_count: int = 0
    unit_id: str | None = None
    titles: tuple[str, ...] = ()
    genre_forms: tuple[str, ...] = ()
    paragraphs: tuple[str, ...] = ()
    extents: tuple[str, ...] = ()
    originations: tuple[Origination, ...] = ()
    dates: tuple[str, ...] = ()
    restriction: RestrictionNote | None = None


@dataclass(frozen=True)
class Author:
    """A resolved creator of an archival unit."""

    role: str
    name: str


@dataclass(frozen=True)
class MetadataRecord:
    """Descriptive metadata resolved for one level of a finding aid."""

    formats: frozenset[str] = frozenset()
    title: str = NO_TITLE
    unit_id: str | None = None
    unit_id_is_surrogate: bool = False
    order: int | None = None
    content: str | None = None
    extent: str | None = None
    authors: tuple[Author, ...] | None = None
    dates: tuple[str, ...] | None = None
    ancestor_title: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Serialize to a JSON-compatible dict, omitting unset optional fields."""
        data: dict[str, object] = {
            "formats": sorted(self.formats),
            "title": self.title,
            "unit_id_is_surrogate": self.unit_id_is_surrogate,
        }
        optional: dict[str, object] = {
            "unit_id": self.unit_id,
            "order": self.order,
            "content": self.content,
            "extent": self.extent,
            "authors": (
                [{"role": a.role, "name": a.name} for a in self.authors]
                if self.authors is not None
                else None
            ),
            "dates": list(self.dates) if self.dates is not None else None,
            "ancestor_title": self.ancestor_title,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data
