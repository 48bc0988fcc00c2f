"""Domain models for archival items and access decisions."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class Item:
    """An archival object as supplied by the item store."""

    id: str
    collection_id: str | None
    type: str = "metadata"
    label: str = ""
    parent_id: str | None = None
    order: int | None = None
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def has_payload(self) -> bool:
        """False for pure descriptive objects with nothing to disclose."""
        return self.collection_id is not None and self.type != "metadata"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Item":
        """Build an Item from an item store document, keeping unknown keys in ``extra``."""
        known = {"id", "collection_id", "type", "label", "parent_id", "order"}
        return cls(
            id=data["id"],
            collection_id=data.get("collection_id"),
            type=data.get("type") or "metadata",
            label=data.get("label") or "",
            parent_id=data.get("parent_id"),
            order=data.get("order"),
            extra={k: v for k, v in data.items() if k not in known},
        )


@dataclass(frozen=True)
class IdentityContext:
    """Who is asking: the requester's address and any credential tokens presented."""

    requester_ip: str = ""
    identities: tuple[str, ...] = ()


class Restriction(Enum):
    """Static access classification derived from the finding aid."""

    OPEN = "open"
    CLOSED = "closed"
    RESTRICTED = "restricted"
    DATE_GATED = "date"


class AccessState(Enum):
    OPEN = "open"
    CLOSED = "closed"
    TIERED = "tiered"


@dataclass(frozen=True)
class AccessDecision:
    """The outcome of an access evaluation.

    ``max_size`` is only set for tiered decisions: the resource may be disclosed
    at reduced fidelity, e.g. images no larger than ``max_size`` pixels.
    """

    state: AccessState
    max_size: int | None = None

    @classmethod
    def open(cls) -> "AccessDecision":
        return cls(AccessState.OPEN)

    @classmethod
    def closed(cls) -> "AccessDecision":
        return cls(AccessState.CLOSED)

    @classmethod
    def tiered(cls, max_size: int) -> "AccessDecision":
        return cls(AccessState.TIERED, max_size=max_size)
