"""Temporal access policies: embargo dates after which items open up."""

from collections.abc import Mapping
from datetime import UTC, date, datetime
from typing import Any

from loguru import logger

from archival_access.core.metadata.resolver import get_root_id
from archival_access.models.item import Item
from archival_access.protocols import ItemStoreProtocol


def parse_date(value: str | int | float | date | datetime) -> datetime:
    """Parse an embargo date into an aware datetime (naive values are UTC).

    Accepts ISO 8601 strings, dates, datetimes and epoch milliseconds.

    Raises:
        ValueError: If the value is none of those, or out of range.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            parsed = datetime.fromtimestamp(value / 1000, tz=UTC)
        except (OverflowError, OSError) as e:
            msg = f"Epoch milliseconds out of range: {value!r}"
            raise ValueError(msg) from e
    elif isinstance(value, str):
        parsed = datetime.fromisoformat(value.strip())
    else:
        msg = f"Unsupported date value: {value!r}"
        raise ValueError(msg)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class ConfiguredEmbargoes:
    """Embargo dates configured per collection."""

    def __init__(self, dates: Mapping[str, datetime]) -> None:
        self._dates = dict(dates)

    def embargo_date(self, item: Item) -> datetime | None:
        if item.collection_id is None:
            return None
        return self._dates.get(get_root_id(item.collection_id))


class RootItemEmbargo:
    """Embargo date recorded on the root item of the item's collection.

    The date lives in an institution namespace of the root item, e.g.
    ``{"niod": {"accessDate": "2030-01-01"}}``. Numeric values are epoch
    milliseconds, as Elasticsearch stores dates.
    """

    def __init__(
        self,
        item_store: ItemStoreProtocol,
        *,
        namespace: str,
        field: str = "accessDate",
    ) -> None:
        self._item_store = item_store
        self._namespace = namespace
        self._field = field

    def embargo_date(self, item: Item) -> datetime | None:
        if item.collection_id is None:
            return None

        root = self._item_store.get_root_item(get_root_id(item.collection_id))
        if root is None:
            return None

        section: Any = root.extra.get(self._namespace)
        value = section.get(self._field) if isinstance(section, Mapping) else None
        if value is None or value == "":
            return None

        try:
            return parse_date(value)
        except ValueError:
            logger.warning(
                "Ignoring unparseable {}.{} {!r} on root item {}",
                self._namespace, self._field, value, root.id,
            )
            return None
