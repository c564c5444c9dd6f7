"""Shared fixtures and helpers for tests."""

from pathlib import Path
from typing import Any

import pytest

from contentful_graph.transport.memory import InMemoryContentSource

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Document builders
# ---------------------------------------------------------------------------


def link(link_type: str, id: str) -> dict[str, Any]:
    return {"sys": {"type": "Link", "linkType": link_type, "id": id}}


def entry(id: str, content_type: str = "item", **fields: Any) -> dict[str, Any]:
    return {
        "sys": {
            "type": "Entry",
            "id": id,
            "locale": "en-US",
            "contentType": {"sys": {"type": "Link", "linkType": "ContentType", "id": content_type}},
            "space": {"sys": {"type": "Link", "linkType": "Space", "id": "space"}},
        },
        "fields": fields,
    }


def asset(id: str, title: str = "Image", url: str = "//images.ctfassets.net/a.png") -> dict[str, Any]:
    return {
        "sys": {"type": "Asset", "id": id, "locale": "en-US"},
        "fields": {
            "title": title,
            "file": {
                "fileName": "a.png",
                "contentType": "image/png",
                "url": url,
                "details": {"size": 1024, "image": {"width": 10, "height": 20}},
            },
        },
    }


def collection(
    items: list[dict[str, Any]],
    entries: list[dict[str, Any]] | None = None,
    assets: list[dict[str, Any]] | None = None,
    errors: list[dict[str, Any]] | None = None,
) -> dict[str, Any]:
    document: dict[str, Any] = {
        "sys": {"type": "Array"},
        "skip": 0,
        "limit": 100,
        "total": len(items),
        "items": items,
        "includes": {"Entry": entries or [], "Asset": assets or []},
    }
    if errors is not None:
        document["errors"] = errors
    return document


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def cyclic_document() -> dict[str, Any]:
    """Two items pointing at each other through ``next``, the second also at an asset."""
    return collection(
        items=[
            entry("item1", title="one", next=link("Entry", "item2")),
            entry("item2", title="two", next=link("Entry", "item1"), image=link("Asset", "img")),
        ],
        assets=[asset("img")],
    )


@pytest.fixture
def self_reference_document() -> dict[str, Any]:
    return collection(items=[entry("self", title="me", me=link("Entry", "self"))])


@pytest.fixture
def memory_source(cyclic_document: dict[str, Any]) -> InMemoryContentSource:
    return InMemoryContentSource.from_document(cyclic_document)
