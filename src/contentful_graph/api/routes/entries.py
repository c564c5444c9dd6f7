from fastapi import APIRouter, Depends, Query

from contentful_graph.api.dependencies import get_client
from contentful_graph.api.schemas import CollectionResponse
from contentful_graph.client import ContentfulClient
from contentful_graph.core.export import export_graph

router = APIRouter(prefix="/entries", tags=["entries"])


@router.get("", response_model=CollectionResponse)
async def entries(
    content_type: str | None = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    skip: int = Query(0, ge=0),
    client: ContentfulClient = Depends(get_client),
) -> CollectionResponse:
    collection = await client.get_entries({"content_type": content_type, "limit": limit, "skip": skip})
    return CollectionResponse(
        skip=collection.skip,
        limit=collection.limit,
        total=collection.total,
        items=export_graph(collection.items),
        errors=collection.errors,
    )
