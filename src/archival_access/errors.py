"""Exception types for the archival access core."""


class ArchivalAccessError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(ArchivalAccessError):
    """Unknown or incomplete service configuration. Fatal at startup."""


class NodeNotFoundError(ArchivalAccessError):
    """A target identifier does not exist in a finding-aid tree."""

    def __init__(self, unit_id: str, collection_id: str | None = None) -> None:
        self.unit_id = unit_id
        self.collection_id = collection_id
        where = f" in {collection_id!r}" if collection_id else ""
        super().__init__(f"No node with unit id {unit_id!r}{where}")


class UnavailableError(ArchivalAccessError):
    """A collaborator (item store, tree store, task queue) failed to respond."""
