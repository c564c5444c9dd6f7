from fastapi import APIRouter, Depends, Response, status

from contentful_graph.api.dependencies import get_client
from contentful_graph.api.schemas import HealthResponse, ReadinessResponse
from contentful_graph.client import ContentfulClient

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse()


@router.get("/healthz/live", response_model=HealthResponse)
async def liveness() -> HealthResponse:
    return HealthResponse()


@router.get("/healthz/ready", response_model=ReadinessResponse)
async def readiness(
    response: Response,
    client: ContentfulClient = Depends(get_client),
) -> ReadinessResponse:
    """Readiness check: fetches one content type from the space to prove the token and host work."""
    options = client.options
    target = {
        "space_id": options.space_id,
        "environment": options.environment,
        "api": "preview" if options.use_preview_api else "delivery",
    }
    if await client.ping():
        return ReadinessResponse(status="ok", source="up", **target)
    response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    return ReadinessResponse(status="degraded", source="down", **target)
