"""Finding-aid trees stored as JSON files, one per collection."""

import json
from pathlib import Path

from loguru import logger

from archival_access.core.tree.navigation import ArchivalTree
from archival_access.core.tree.reader import parse_tree_data
from archival_access.errors import UnavailableError

TREE_SUFFIX = ".json"


class FileTreeStore:
    """Reads ``<data_dir>/<collection_id>.json`` files."""

    def __init__(self, data_dir: str | Path) -> None:
        self.data_dir = Path(data_dir)

    def _path(self, collection_id: str) -> Path | None:
        if not collection_id or "/" in collection_id or "\\" in collection_id:
            return None
        if collection_id.startswith("."):
            return None
        return self.data_dir / f"{collection_id}{TREE_SUFFIX}"

    def get_tree(self, collection_id: str) -> ArchivalTree | None:
        path = self._path(collection_id)
        if path is None:
            return None

        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            msg = f"Cannot read finding aid {path}: {e}"
            raise UnavailableError(msg) from e

        try:
            tree = parse_tree_data(data)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            msg = f"Malformed finding aid {path}: {e}"
            raise UnavailableError(msg) from e

        logger.debug("Loaded finding aid {} ({} levels)", collection_id, len(tree.nodes))
        return tree

    def list_collections(self) -> list[str]:
        if not self.data_dir.is_dir():
            return []
        paths = self.data_dir.glob(f"*{TREE_SUFFIX}")
        return sorted(p.name.removesuffix(TREE_SUFFIX) for p in paths)
