"""Tests for item and metadata models."""

from archival_access.models.archival import Author, MetadataRecord
from archival_access.models.item import AccessDecision, AccessState, Item


def test_item_from_dict_keeps_unknown_fields() -> None:
    item = Item.from_dict(
        {"id": "x", "collection_id": "C.1", "type": "image", "niod": {"accessDate": "2030"}}
    )
    assert item.type == "image"
    assert item.label == ""
    assert item.extra == {"niod": {"accessDate": "2030"}}


def test_item_type_defaults_to_metadata() -> None:
    item = Item.from_dict({"id": "x", "collection_id": "C", "type": None})
    assert item.type == "metadata"
    assert not item.has_payload


def test_has_payload_needs_collection() -> None:
    assert Item(id="x", collection_id="C", type="image").has_payload
    assert not Item(id="x", collection_id=None, type="image").has_payload


def test_access_decision_constructors() -> None:
    assert AccessDecision.open().state is AccessState.OPEN
    assert AccessDecision.closed().max_size is None
    tiered = AccessDecision.tiered(450)
    assert (tiered.state, tiered.max_size) == (AccessState.TIERED, 450)


def test_metadata_record_to_dict() -> None:
    record = MetadataRecord(
        formats=frozenset({"visual", "book"}),
        title="Letter",
        unit_id="1.1",
        order=0,
        authors=(Author(role="Author", name="A"),),
        ancestor_title="Fonds",
    )
    assert record.to_dict() == {
        "formats": ["book", "visual"],
        "title": "Letter",
        "unit_id": "1.1",
        "unit_id_is_surrogate": False,
        "order": 0,
        "authors": [{"role": "Author", "name": "A"}],
        "ancestor_title": "Fonds",
    }
