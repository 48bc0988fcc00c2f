"""Background metadata jobs: per-collection resolution and periodic re-queueing."""

from collections.abc import Callable
from typing import Any

from loguru import logger

from archival_access.core.metadata.resolver import resolve_metadata
from archival_access.errors import ConfigurationError
from archival_access.models.archival import MetadataRecord
from archival_access.services.descriptor import ServiceContext

METADATA_TASK = "metadata"


def metadata_task_handler(
    context: ServiceContext,
) -> Callable[[dict[str, Any]], dict[str, list[MetadataRecord]]]:
    """Resolve metadata for the units named in a task.

    Payload: ``{"collection_id": "ARCH01234", "identifiers": ["ARCH01234.1", ...]}``.
    Without ``identifiers`` every unit of the finding aid is resolved.

    The records are returned, not stored: queue workers drop handler results,
    so on a worker the task checks that every unit resolves and logs the count.
    Storing the records belongs to the serving layer.
    """
    tree_store = context.tree_store

    def handle(payload: dict[str, Any]) -> dict[str, list[MetadataRecord]]:
        collection_id = payload.get("collection_id")
        if not collection_id:
            msg = f"Metadata task without collection_id: {payload!r}"
            raise ValueError(msg)

        tree = tree_store.get_tree(collection_id)
        if tree is None:
            logger.warning("No finding aid for collection {}", collection_id)
            return {}

        identifiers: list[str] = payload.get("identifiers") or [
            f"{collection_id}.{node.unit_id.strip()}"
            for node in tree.nodes[1:]
            if node.unit_id and node.unit_id.strip()
        ]
        resolved = {identifier: resolve_metadata(identifier, tree) for identifier in identifiers}
        logger.info("Resolved metadata of {} units in {}", len(resolved), collection_id)
        return resolved

    return handle


def enqueue_all_job(context: ServiceContext) -> Callable[[], int]:
    """Queue one metadata task per collection with a finding aid."""
    task_queue = context.task_queue
    if task_queue is None:
        msg = "Metadata jobs need a task queue"
        raise ConfigurationError(msg)
    tree_store = context.tree_store

    def job() -> int:
        collections = tree_store.list_collections()
        for collection_id in collections:
            task_queue.publish(METADATA_TASK, {"collection_id": collection_id})
        logger.info("Queued metadata tasks for {} collections", len(collections))
        return len(collections)

    return job
