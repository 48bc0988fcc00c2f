"""Read-only item store client for the Elasticsearch ``items`` index."""

from typing import Any
from urllib.parse import quote

import requests
from loguru import logger

from archival_access.errors import UnavailableError
from archival_access.models.item import Item


class ElasticItemStore:
    """Fetch items from Elasticsearch over its REST API."""

    def __init__(
        self,
        base_url: str,
        *,
        index: str = "items",
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.index = index
        self.timeout = timeout
        self.sess = session or requests.Session()

    def _request(self, method: str, path: str, **kwargs: Any) -> requests.Response | None:
        """Send a request; None for 404, UnavailableError for any other failure."""
        url = f"{self.base_url}/{self.index}/{path}"
        logger.debug("Item store request: {} {}", method, url)
        try:
            r = self.sess.request(method, url, timeout=self.timeout, **kwargs)
            if r.status_code == 404:
                return None
            r.raise_for_status()
        except requests.RequestException as e:
            msg = f"Item store request failed: {method} {url}: {e}"
            raise UnavailableError(msg) from e
        return r

    def get_item(self, item_id: str) -> Item | None:
        r = self._request("GET", f"_doc/{quote(item_id, safe='')}")
        if r is None:
            return None
        body: dict[str, Any] = r.json()
        if not body.get("found", True) or "_source" not in body:
            return None
        return Item.from_dict(body["_source"])

    def get_root_item(self, collection_id: str) -> Item | None:
        query = {
            "size": 1,
            "query": {
                "bool": {
                    "filter": [
                        {"term": {"id": collection_id}},
                        {"term": {"collection_id": collection_id}},
                    ]
                }
            },
        }
        r = self._request("POST", "_search", json=query)
        if r is None:
            return None
        hits = r.json().get("hits", {}).get("hits", [])
        if not hits:
            return None
        return Item.from_dict(hits[0]["_source"])
