"""Shared test fixtures."""

from datetime import UTC, datetime
from typing import Any

import pytest

from archival_access.config import Settings
from archival_access.core.tree.navigation import ArchivalTree
from archival_access.core.tree.reader import parse_tree_data
from archival_access.services.descriptor import ServiceContext
from tests.unit.fakes import FakeClock, FakeItemStore, FakeTaskQueue, FakeTreeStore

# Fonds A > Series 1 (no title) > Item 1.1 "Letter", plus a second series with
# a nested sub-series sharing its level.
FONDS_A: dict[str, Any] = {
    "collection_id": "A",
    "root": {
        "level": "collection",
        "unit_id": "A",
        "title": "Fonds A",
        "genre_forms": ["Books"],
        "paragraphs": ["  Papers of A.  ", "Second paragraph."],
        "originations": [{"label": "Creator", "name": " A. Person "}],
        "dates": [" 1900-1950 "],
        "children": [
            {
                "level": "series",
                "unit_id": "1",
                "children": [
                    {
                        "level": "file",
                        "unit_id": "1.1",
                        "title": "Letter",
                        "genre_forms": ["Photographs"],
                        "extent": " 2 pages ",
                    },
                    {"level": "file", "unit_id": "1.2", "title": "Postcard"},
                ],
            },
            {
                "level": "series",
                "unit_id": "2",
                "title": "Series 2",
                "children": [
                    {
                        "level": "series",
                        "unit_id": "2.1",
                        "title": "Sub-series",
                        "children": [
                            {"level": "file", "unit_id": "2.1.1", "title": "Minutes"},
                        ],
                    },
                ],
            },
        ],
    },
}

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def fonds_a() -> ArchivalTree:
    return parse_tree_data(FONDS_A)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def settings() -> Settings:
    return Settings(services=("default-access",))


@pytest.fixture
def context(settings: Settings, fonds_a: ArchivalTree, clock: FakeClock) -> ServiceContext:
    return ServiceContext(
        settings=settings,
        item_store=FakeItemStore(),
        tree_store=FakeTreeStore([fonds_a]),
        task_queue=FakeTaskQueue(),
        clock=clock,
    )
