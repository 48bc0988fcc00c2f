"""Access policy, finding-aid metadata and service runtime for a digital archive."""

from archival_access.core.access.policy import AccessPolicyEngine
from archival_access.core.metadata.resolver import resolve_metadata
from archival_access.protocols import ItemStoreProtocol, TaskQueueProtocol, TreeStoreProtocol
from archival_access.services.runtime import HookRegistry, Runtime

__all__ = [
    "AccessPolicyEngine",
    "HookRegistry",
    "ItemStoreProtocol",
    "Runtime",
    "TaskQueueProtocol",
    "TreeStoreProtocol",
    "resolve_metadata",
]
