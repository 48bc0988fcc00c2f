"""IISH descriptive metadata, resolved from EAD finding aids."""

from collections.abc import Callable

from loguru import logger

from archival_access.core.metadata.resolver import get_root_id, resolve_metadata
from archival_access.models.archival import MetadataRecord
from archival_access.services.descriptor import ServiceContext


def metadata_hook(context: ServiceContext) -> Callable[[str], list[MetadataRecord]]:
    tree_store = context.tree_store

    def get_metadata(identifier: str) -> list[MetadataRecord]:
        tree = tree_store.get_tree(get_root_id(identifier))
        if tree is None:
            logger.debug("No finding aid for {}", identifier)
            return []
        return resolve_metadata(identifier, tree)

    return get_metadata
