from typing import Any

from contentful_graph.core.links import ResolutionPolicy, is_resource
from contentful_graph.core.materializer import Materializer
from contentful_graph.core.ports.content_types import ContentTypeResolver
from contentful_graph.core.resolver import Resolver
from contentful_graph.models import Asset, ContentfulCollection, SyncResult, SystemProperties


def build_collection(
    document: dict[str, Any],
    item_type: Any = None,
    content_type_resolver: ContentTypeResolver | None = None,
    policy: ResolutionPolicy = ResolutionPolicy.ON_DEMAND,
) -> ContentfulCollection[Any]:
    """Resolve, materialize and wrap one collection response.

    ``item_type`` may be a ``ContentfulResource`` subclass, a plain pydantic model, or ``None``
    for the hydrated dicts themselves. Dangling links end up in ``errors``; they never raise.
    """
    resolved = Resolver(document, policy).resolve()
    materializer = Materializer(content_type_resolver)
    items = materializer.materialize_many(resolved.items, item_type)
    included_assets = materializer.materialize_many(resolved.included_assets, Asset)
    return ContentfulCollection(
        skip=resolved.skip,
        limit=resolved.limit,
        total=resolved.total,
        items=items,
        included_assets=included_assets,
        included_entries=resolved.included_entries,
        errors=resolved.errors,
    )


def build_sync_result(
    document: dict[str, Any], policy: ResolutionPolicy = ResolutionPolicy.ON_DEMAND
) -> SyncResult:
    """Split a sync page into entries, assets and deletions.

    Sync pages carry no ``includes``; links between items of the same page still resolve.
    """
    resolved = Resolver(document, policy).resolve()
    materializer = Materializer()
    result = SyncResult(
        next_sync_url=document.get("nextSyncUrl"),
        next_page_url=document.get("nextPageUrl"),
        errors=resolved.errors,
    )
    for node in resolved.items:
        if not isinstance(node, dict) or not isinstance(node.get("sys"), dict):
            continue
        node_type = node["sys"].get("type")
        if node_type == "Entry" and is_resource(node):
            result.entries.append(node)
        elif node_type == "Asset" and is_resource(node):
            result.assets.append(materializer.materialize(node, Asset))
        elif node_type == "DeletedEntry":
            result.deleted_entries.append(SystemProperties.model_validate(node["sys"]))
        elif node_type == "DeletedAsset":
            result.deleted_assets.append(SystemProperties.model_validate(node["sys"]))
    return result
