from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from contentful_graph.core.links import ResolutionPolicy
from contentful_graph.models import ResolutionError


class HealthResponse(BaseModel):
    status: str = "ok"


class ReadinessResponse(BaseModel):
    """Whether the configured space environment answers with the configured token."""

    status: str = "ok"
    source: str = "up"
    space_id: str
    environment: str
    api: str = "delivery"


class ResolveRequest(BaseModel):
    """POST /resolve: a raw collection response plus how far to expand it."""

    document: dict[str, Any]
    policy: ResolutionPolicy = ResolutionPolicy.ON_DEMAND


class CollectionResponse(BaseModel):
    skip: int = 0
    limit: int = 0
    total: int = 0
    items: list[Any] = Field(default_factory=list)
    errors: list[ResolutionError] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    status_code: int
    message: str
    error_id: str | None = None
    request_id: str | None = None
