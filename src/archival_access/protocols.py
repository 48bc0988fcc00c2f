"""Protocols for the collaborators the access core depends on."""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from archival_access.core.tree.navigation import ArchivalTree
from archival_access.models.item import Item

TaskHandler = Callable[[dict[str, Any]], object]


@runtime_checkable
class ClockProtocol(Protocol):
    """Source of the current time for embargo comparisons."""

    def now(self) -> datetime:
        """Return the current time as a timezone-aware datetime."""
        ...


@runtime_checkable
class ItemStoreProtocol(Protocol):
    """Read-only access to archival items."""

    def get_item(self, item_id: str) -> Item | None:
        """Fetch an item by identifier, or None if it does not exist."""
        ...

    def get_root_item(self, collection_id: str) -> Item | None:
        """Fetch the root item of a collection, or None if it does not exist."""
        ...


@runtime_checkable
class TreeStoreProtocol(Protocol):
    """Supplier of parsed finding-aid trees."""

    def get_tree(self, collection_id: str) -> ArchivalTree | None:
        """Return the tree for a collection, or None if there is none."""
        ...

    def list_collections(self) -> list[str]:
        """Return the identifiers of all collections with a tree."""
        ...


@runtime_checkable
class TaskQueueProtocol(Protocol):
    """Delivers (type, payload) tasks to subscribed handlers."""

    def subscribe(self, task_type: str, handler: TaskHandler) -> None:
        """Register a handler for all tasks of the given type."""
        ...

    def publish(self, task_type: str, payload: dict[str, Any]) -> None:
        """Enqueue a task."""
        ...

    def run_forever(self) -> None:
        """Deliver tasks to their handlers until stopped."""
        ...


@runtime_checkable
class SchedulerProtocol(Protocol):
    """Runs jobs on cron schedules."""

    def schedule(self, expression: str, job: Callable[[], object]) -> None:
        """Invoke ``job`` on every tick of ``expression``."""
        ...

    def run_forever(self) -> None:
        """Run due jobs until stopped."""
        ...
