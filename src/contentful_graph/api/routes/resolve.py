from fastapi import APIRouter

from contentful_graph.api.schemas import CollectionResponse, ResolveRequest
from contentful_graph.core.export import export_graph
from contentful_graph.core.resolver import resolve_document

router = APIRouter(tags=["resolve"])


@router.post("/resolve", response_model=CollectionResponse)
async def resolve(body: ResolveRequest) -> CollectionResponse:
    """Resolve a raw collection response; repeated resources come back as link stubs."""
    resolved = resolve_document(body.document, body.policy)
    return CollectionResponse(
        skip=resolved.skip,
        limit=resolved.limit,
        total=resolved.total,
        items=export_graph(resolved.items),
        errors=resolved.errors,
    )
