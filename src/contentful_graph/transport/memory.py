import copy
from typing import Any

from contentful_graph.core.links import is_resource, link_key
from contentful_graph.errors import ContentfulException


def _content_type_id(node: dict[str, Any]) -> str | None:
    content_type = node["sys"].get("contentType") or {}
    return (content_type.get("sys") or {}).get("id")


class InMemoryContentSource:
    """A ``ContentSource`` over documents held in memory.

    Entries and assets are stored raw. Every fetch builds a fresh collection document whose
    ``includes`` carry every other stored resource, so links between stored resources resolve
    the same way they would against the Delivery API.
    """

    def __init__(
        self,
        entries: list[dict[str, Any]] | None = None,
        assets: list[dict[str, Any]] | None = None,
    ) -> None:
        self.entries: list[dict[str, Any]] = []
        self.assets: list[dict[str, Any]] = []
        self.sync_pages: list[dict[str, Any]] = []
        for entry in entries or []:
            self.add_entry(entry)
        for asset in assets or []:
            self.add_asset(asset)

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "InMemoryContentSource":
        """Seed from a collection response: its items and its ``includes``."""
        source = cls()
        includes = document.get("includes") or {}
        for node in [*(document.get("items") or []), *(includes.get("Entry") or []), *(includes.get("Asset") or [])]:
            if not is_resource(node):
                continue
            if node["sys"]["type"] == "Asset":
                source.add_asset(node)
            else:
                source.add_entry(node)
        return source

    def add_entry(self, entry: dict[str, Any]) -> None:
        self._store(self.entries, entry)

    def add_asset(self, asset: dict[str, Any]) -> None:
        self._store(self.assets, asset)

    @staticmethod
    def _store(bucket: list[dict[str, Any]], node: dict[str, Any]) -> None:
        key = link_key(node)
        for i, existing in enumerate(bucket):
            if link_key(existing) == key:
                bucket[i] = node
                return
        bucket.append(node)

    def _page(self, matches: list[dict[str, Any]], params: dict[str, str]) -> dict[str, Any]:
        skip = int(params.get("skip", 0))
        limit = int(params.get("limit", 100))
        items = matches[skip : skip + limit]
        returned = {link_key(node) for node in items}
        return copy.deepcopy(
            {
                "sys": {"type": "Array"},
                "skip": skip,
                "limit": limit,
                "total": len(matches),
                "items": items,
                "includes": {
                    "Entry": [e for e in self.entries if link_key(e) not in returned],
                    "Asset": [a for a in self.assets if link_key(a) not in returned],
                },
            }
        )

    async def fetch_entries(self, params: dict[str, str] | None = None) -> dict[str, Any]:
        params = params or {}
        matches = self.entries
        if "content_type" in params:
            matches = [e for e in matches if _content_type_id(e) == params["content_type"]]
        if "sys.id" in params:
            matches = [e for e in matches if e["sys"]["id"] == params["sys.id"]]
        return self._page(matches, params)

    async def fetch_assets(self, params: dict[str, str] | None = None) -> dict[str, Any]:
        params = params or {}
        matches = self.assets
        if "sys.id" in params:
            matches = [a for a in matches if a["sys"]["id"] == params["sys.id"]]
        return self._page(matches, params)

    async def fetch_asset(self, asset_id: str) -> dict[str, Any]:
        for asset in self.assets:
            if asset["sys"]["id"] == asset_id:
                return copy.deepcopy(asset)
        raise ContentfulException(
            404,
            "The requested resource or endpoint could not be found.",
            system_properties={"type": "Error", "id": "NotFound"},
        )

    async def fetch_sync(self, params: dict[str, str] | None = None) -> dict[str, Any]:
        """Serve queued ``sync_pages`` in order, or a single page of everything stored."""
        if self.sync_pages:
            return copy.deepcopy(self.sync_pages.pop(0))
        return copy.deepcopy(
            {
                "sys": {"type": "Array"},
                "items": [*self.entries, *self.assets],
                "nextSyncUrl": "https://cdn.contentful.com/sync?sync_token=memory",
            }
        )

    async def ping(self) -> bool:
        return True

    async def dispose(self) -> None:
        return None
