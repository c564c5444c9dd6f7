from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from contentful_graph.api.lifespan import lifespan
from contentful_graph.api.routes.entries import router as entries_router
from contentful_graph.api.routes.health import router as health_router
from contentful_graph.api.routes.resolve import router as resolve_router
from contentful_graph.api.schemas import ErrorResponse
from contentful_graph.errors import ContentfulException


def create_app() -> FastAPI:
    app = FastAPI(
        title="Contentful Graph API",
        description="Resolve links in Contentful delivery responses into hydrated graphs.",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(ContentfulException)
    async def contentful_exception_handler(_request: Request, exc: ContentfulException) -> JSONResponse:
        body = ErrorResponse(
            status_code=exc.status_code,
            message=exc.message,
            error_id=exc.error_id,
            request_id=exc.request_id,
        )
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    app.include_router(health_router, include_in_schema=False)
    app.include_router(resolve_router)
    app.include_router(entries_router)

    return app
