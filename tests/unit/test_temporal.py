"""Tests for embargo date policies."""

from datetime import UTC, date, datetime, timedelta, timezone

import pytest

from archival_access.core.access.temporal import ConfiguredEmbargoes, RootItemEmbargo, parse_date
from archival_access.models.item import Item
from tests.unit.fakes import FakeItemStore


def test_parse_date_variants() -> None:
    assert parse_date("2030-01-01") == datetime(2030, 1, 1, tzinfo=UTC)
    assert parse_date(date(2030, 1, 1)) == datetime(2030, 1, 1, tzinfo=UTC)
    plus_two = timezone(timedelta(hours=2))
    assert parse_date("2030-01-01T10:00:00+02:00").tzinfo == plus_two


def test_parse_date_rejects_garbage() -> None:
    with pytest.raises(ValueError):
        parse_date("next tuesday")


def test_configured_embargo_by_collection() -> None:
    embargo = datetime(2030, 1, 1, tzinfo=UTC)
    policy = ConfiguredEmbargoes({"C": embargo})
    assert policy.embargo_date(Item(id="i", collection_id="C.1.2", type="image")) == embargo
    assert policy.embargo_date(Item(id="i", collection_id="D.1", type="image")) is None
    assert policy.embargo_date(Item(id="i", collection_id=None)) is None


def test_root_item_embargo() -> None:
    root = Item(id="C", collection_id="C", extra={"niod": {"accessDate": "2030-01-01"}})
    store = FakeItemStore([root])
    policy = RootItemEmbargo(store, namespace="niod")

    item = Item(id="i", collection_id="C.3", type="image")
    assert policy.embargo_date(item) == datetime(2030, 1, 1, tzinfo=UTC)
    assert ("get_root_item", "C") in store.calls


def test_root_item_embargo_missing_data() -> None:
    store = FakeItemStore(
        [
            Item(id="C", collection_id="C"),
            Item(id="D", collection_id="D", extra={"niod": "not a mapping"}),
        ]
    )
    policy = RootItemEmbargo(store, namespace="niod")
    assert policy.embargo_date(Item(id="i", collection_id="C.1", type="image")) is None
    assert policy.embargo_date(Item(id="i", collection_id="D.1", type="image")) is None
    assert policy.embargo_date(Item(id="i", collection_id="E.1", type="image")) is None


def test_root_item_embargo_ignores_unparseable_date() -> None:
    root = Item(id="C", collection_id="C", extra={"niod": {"accessDate": "soon"}})
    policy = RootItemEmbargo(FakeItemStore([root]), namespace="niod")
    assert policy.embargo_date(Item(id="i", collection_id="C.1", type="image")) is None


def test_parse_date_epoch_milliseconds() -> None:
    assert parse_date(1893456000000) == datetime(2030, 1, 1, tzinfo=UTC)
    assert parse_date(1893456000000.0) == datetime(2030, 1, 1, tzinfo=UTC)


@pytest.mark.parametrize("value", [True, ["2030-01-01"], 10**20])
def test_parse_date_rejects_other_values(value: object) -> None:
    with pytest.raises(ValueError):
        parse_date(value)  # type: ignore[arg-type]


def test_root_item_embargo_reads_item_store_document() -> None:
    root = Item.from_dict(
        {"id": "N", "collection_id": "N", "type": "root", "niod": {"accessDate": "2030-01-01"}}
    )
    policy = RootItemEmbargo(FakeItemStore([root]), namespace="niod")
    item = Item(id="i", collection_id="N.1", type="image")
    assert policy.embargo_date(item) == datetime(2030, 1, 1, tzinfo=UTC)


def test_root_item_embargo_epoch_milliseconds() -> None:
    root = Item(id="C", collection_id="C", extra={"niod": {"accessDate": 1893456000000}})
    policy = RootItemEmbargo(FakeItemStore([root]), namespace="niod")
    item = Item(id="i", collection_id="C.1", type="image")
    assert policy.embargo_date(item) == datetime(2030, 1, 1, tzinfo=UTC)


def test_root_item_embargo_ignores_unsupported_value() -> None:
    root = Item(id="C", collection_id="C", extra={"niod": {"accessDate": {"year": 2030}}})
    policy = RootItemEmbargo(FakeItemStore([root]), namespace="niod")
    assert policy.embargo_date(Item(id="i", collection_id="C.1", type="image")) is None
