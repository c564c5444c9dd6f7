"""Tests for the FastAPI routes using an in-memory content source."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any
from unittest.mock import AsyncMock

import pytest
from conftest import collection, entry, link
from fastapi.testclient import TestClient

from contentful_graph.api.app import create_app
from contentful_graph.api.dependencies import get_client
from contentful_graph.client import ContentfulClient
from contentful_graph.config import ContentfulOptions
from contentful_graph.errors import ContentfulException
from contentful_graph.transport.memory import InMemoryContentSource


def _test_client(contentful: Any) -> TestClient:
    app = create_app()

    async def _override() -> AsyncIterator[Any]:
        yield contentful

    app.dependency_overrides[get_client] = _override
    return TestClient(app)


@pytest.fixture
def client(memory_source: InMemoryContentSource) -> TestClient:
    return _test_client(ContentfulClient(memory_source, ContentfulOptions(space_id="s")))


class TestHealthRoutes:
    def test_health(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_liveness(self, client: TestClient) -> None:
        resp = client.get("/healthz/live")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok"}

    def test_readiness(self, client: TestClient) -> None:
        resp = client.get("/healthz/ready")
        assert resp.status_code == 200
        assert resp.json() == {
            "status": "ok",
            "source": "up",
            "space_id": "s",
            "environment": "master",
            "api": "delivery",
        }

    def test_readiness_degraded(self) -> None:
        contentful = AsyncMock()
        contentful.options = ContentfulOptions(space_id="s", environment="staging", use_preview_api=True)
        contentful.ping.return_value = False
        resp = _test_client(contentful).get("/healthz/ready")
        assert resp.status_code == 503
        assert resp.json() == {
            "status": "degraded",
            "source": "down",
            "space_id": "s",
            "environment": "staging",
            "api": "preview",
        }


class TestResolveRoute:
    def test_resolve_exports_back_references_as_links(self, client: TestClient, cyclic_document: dict[str, Any]) -> None:
        resp = client.post("/resolve", json={"document": cyclic_document})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["total"] == 2
        assert body["items"][0]["fields"]["next"] == link("Entry", "item2")
        assert body["items"][1]["fields"]["next"] == link("Entry", "item1")
        assert body["items"][1]["fields"]["image"]["fields"]["title"] == "Image"
        assert body["errors"] == []

    def test_resolve_reports_dangling_links(self, client: TestClient) -> None:
        document = collection(items=[entry("a", ref=link("Entry", "gone"))])
        resp = client.post("/resolve", json={"document": document, "policy": "eager"})
        assert resp.status_code == 200
        body = resp.json()
        assert body["items"][0]["fields"]["ref"] is None
        assert body["errors"] == [{"id": "gone", "linkType": "Entry", "reason": "notResolvable"}]

    def test_resolve_rejects_unknown_policy(self, client: TestClient) -> None:
        resp = client.post("/resolve", json={"document": {}, "policy": "sometimes"})
        assert resp.status_code == 422


class TestEntriesRoute:
    def test_entries(self, client: TestClient) -> None:
        resp = client.get("/entries", params={"content_type": "item"})
        assert resp.status_code == 200, resp.text
        body = resp.json()
        assert body["total"] == 2
        assert [i["sys"]["id"] for i in body["items"]] == ["item1", "item2"]

    def test_contentful_errors_are_passed_through(self) -> None:
        contentful = AsyncMock()
        contentful.get_entries.side_effect = ContentfulException(
            404,
            "The requested resource or endpoint could not be found.",
            request_id="req-1",
            system_properties={"id": "NotFound"},
        )
        resp = _test_client(contentful).get("/entries")
        assert resp.status_code == 404
        assert resp.json() == {
            "status_code": 404,
            "message": "The requested resource or endpoint could not be found.",
            "error_id": "NotFound",
            "request_id": "req-1",
        }
