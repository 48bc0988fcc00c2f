"""Service descriptors: which mode a service runs in and which hooks it binds."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from archival_access.config import Settings
from archival_access.errors import ConfigurationError
from archival_access.protocols import (
    ClockProtocol,
    ItemStoreProtocol,
    TaskQueueProtocol,
    TreeStoreProtocol,
)


class RunAs(Enum):
    REQUEST_SERVER = "request-server"
    TASK_WORKER = "task-worker"
    BOOTSTRAP = "bootstrap"
    SCHEDULED = "scheduled"


class Capability(Enum):
    HAS_ACCESS = "has_access"
    GET_METADATA = "get_metadata"
    GET_AUTH_TEXTS = "get_auth_texts"
    TASK_HANDLER = "task_handler"


@dataclass(frozen=True)
class ServiceDescriptor:
    """A named service, its execution mode and its capability bindings.

    Each binding maps a capability to a ``"module:function"`` factory. The factory
    receives the ServiceContext and returns the hook:

    - ``has_access``: ``(item, identity) -> AccessDecision``
    - ``get_metadata``: ``(identifier) -> list[MetadataRecord]``
    - ``get_auth_texts``: ``(item) -> dict[str, dict[str, str]]``
    - ``task_handler``: ``(payload) -> object`` for task workers, ``() -> object``
      for bootstrap and scheduled services.
    """

    name: str
    run_as: RunAs
    bindings: Mapping[Capability, str] = field(default_factory=dict)
    cron: str | None = None
    task_type: str | None = None

    @property
    def implements(self) -> frozenset[Capability]:
        return frozenset(self.bindings)

    def validate(self) -> None:
        """Check that the fields required by the execution mode are present.

        Raises:
            ConfigurationError: If the descriptor is incomplete.
        """
        if self.run_as is RunAs.SCHEDULED and not self.cron:
            msg = f"Scheduled service {self.name!r} has no cron expression"
            raise ConfigurationError(msg)
        if self.run_as is RunAs.TASK_WORKER and not self.task_type:
            msg = f"Task worker {self.name!r} has no task type"
            raise ConfigurationError(msg)
        if self.run_as is not RunAs.REQUEST_SERVER and Capability.TASK_HANDLER not in self.bindings:
            msg = f"Service {self.name!r} runs as {self.run_as.value} but binds no task handler"
            raise ConfigurationError(msg)


@dataclass(frozen=True)
class ServiceContext:
    """Collaborators handed to every capability factory."""

    settings: Settings
    item_store: ItemStoreProtocol
    tree_store: TreeStoreProtocol
    task_queue: TaskQueueProtocol | None
    clock: ClockProtocol
