import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Any

from contentful_graph.config import ContentfulOptions
from contentful_graph.core.collection import build_collection, build_sync_result
from contentful_graph.core.materializer import Materializer
from contentful_graph.core.ports.content_source import ContentSource
from contentful_graph.core.ports.content_types import ContentTypeResolver
from contentful_graph.core.resolver import resolve_document
from contentful_graph.models import Asset, ContentfulCollection, SyncResult, SyncType

logger = logging.getLogger(__name__)


def _params(query: Mapping[str, Any] | None) -> dict[str, str]:
    params: dict[str, str] = {}
    for key, value in (query or {}).items():
        if value is None:
            continue
        if isinstance(value, bool):
            params[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple, set)):
            params[key] = ",".join(str(v) for v in value)
        else:
            params[key] = str(value)
    return params


class ContentfulClient:
    """Fetch, resolve and materialize content from one space environment.

    Every response is resolved on its own; identity is shared inside one returned collection,
    never across calls.
    """

    def __init__(
        self,
        source: ContentSource,
        options: ContentfulOptions,
        content_type_resolver: ContentTypeResolver | None = None,
    ) -> None:
        self._source = source
        self._options = options
        self._content_type_resolver = content_type_resolver

    @classmethod
    def from_options(
        cls,
        options: ContentfulOptions,
        content_type_resolver: ContentTypeResolver | None = None,
    ) -> "ContentfulClient":
        from contentful_graph.transport.http import HttpContentSource

        return cls(HttpContentSource(options), options, content_type_resolver)

    @property
    def options(self) -> ContentfulOptions:
        return self._options

    @property
    def source(self) -> ContentSource:
        return self._source

    async def get_entries(
        self,
        query: Mapping[str, Any] | None = None,
        item_type: Any = None,
        content_type_resolver: ContentTypeResolver | None = None,
    ) -> ContentfulCollection[Any]:
        document = await self._source.fetch_entries(_params(query))
        return build_collection(
            document,
            item_type,
            content_type_resolver or self._content_type_resolver,
            self._options.resolution_policy,
        )

    async def get_entries_by_type(
        self,
        content_type_id: str,
        query: Mapping[str, Any] | None = None,
        item_type: Any = None,
        content_type_resolver: ContentTypeResolver | None = None,
    ) -> ContentfulCollection[Any]:
        return await self.get_entries(
            {**(query or {}), "content_type": content_type_id}, item_type, content_type_resolver
        )

    async def get_entry(
        self,
        entry_id: str,
        item_type: Any = None,
        query: Mapping[str, Any] | None = None,
        content_type_resolver: ContentTypeResolver | None = None,
    ) -> Any | None:
        """Fetch one entry through the collection endpoint so its links come with ``includes``."""
        collection = await self.get_entries({**(query or {}), "sys.id": entry_id}, item_type, content_type_resolver)
        if not collection.items:
            logger.debug("Entry %s not found", entry_id)
            return None
        return collection.items[0]

    async def get_assets(self, query: Mapping[str, Any] | None = None) -> ContentfulCollection[Asset]:
        document = await self._source.fetch_assets(_params(query))
        return build_collection(document, Asset, policy=self._options.resolution_policy)

    async def get_asset(self, asset_id: str) -> Asset:
        node = await self._source.fetch_asset(asset_id)
        resolved = resolve_document({"items": [node]}, self._options.resolution_policy)
        result: Asset = Materializer().materialize(resolved.items[0], Asset)
        return result

    async def sync(
        self,
        sync_token: str | None = None,
        sync_type: SyncType = SyncType.ALL,
        content_type_id: str | None = None,
    ) -> SyncResult:
        """Run one sync page: an initial sync without a token, a delta sync with one."""
        if sync_token:
            params = {"sync_token": sync_token}
        else:
            params = {"initial": "true", "type": sync_type.value}
            if content_type_id:
                params["content_type"] = content_type_id
        document = await self._source.fetch_sync(params)
        return build_sync_result(document, self._options.resolution_policy)

    async def ping(self) -> bool:
        return await self._source.ping()

    async def dispose(self) -> None:
        await self._source.dispose()

    async def __aenter__(self) -> "ContentfulClient":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.dispose()
