"""Tests for the collection envelope and sync pages."""

from typing import Any

from conftest import asset, collection, entry, link
from pydantic import BaseModel

from contentful_graph.core.collection import build_collection, build_sync_result
from contentful_graph.core.content_types import MappingContentTypeResolver
from contentful_graph.core.links import ResolutionPolicy
from contentful_graph.models import Asset, SystemProperties


class Item(BaseModel):
    sys: SystemProperties
    title: str
    next: "Item | None" = None
    image: Asset | None = None


class Headline(BaseModel):
    title: str


class TestBuildCollection:
    def test_dynamic_items(self, cyclic_document: dict[str, Any]) -> None:
        result = build_collection(cyclic_document)
        assert len(result) == 2
        assert [node["sys"]["id"] for node in result] == ["item1", "item2"]
        assert result.total == 2
        assert result.limit == 100

    def test_typed_items_share_identity_with_included_assets(self, cyclic_document: dict[str, Any]) -> None:
        result = build_collection(cyclic_document, Item)
        item1, item2 = result.items
        assert item1.next is item2
        assert result.included_assets == [item2.image]
        assert result.included_assets[0] is item2.image

    def test_items_through_content_type_resolver(self, cyclic_document: dict[str, Any]) -> None:
        result = build_collection(cyclic_document, content_type_resolver=MappingContentTypeResolver({"item": Item}))
        assert all(isinstance(i, Item) for i in result)

    def test_item_type_wins_over_resolver_at_the_top_level(self, cyclic_document: dict[str, Any]) -> None:
        unmapped = build_collection(cyclic_document, Item, MappingContentTypeResolver({"page": Headline}))
        incompatible = build_collection(cyclic_document, Item, MappingContentTypeResolver({"item": Headline}))
        assert all(type(i) is Item for i in unmapped)
        assert all(type(i) is Item for i in incompatible)
        assert incompatible.items[0].next is incompatible.items[1]

    def test_dangling_links_are_reported_not_raised(self) -> None:
        result = build_collection(collection(items=[entry("a", title="x", next=link("Entry", "gone"))]), Item)
        assert result.items[0].next is None
        assert [(e.link_type, e.id, e.reason) for e in result.errors] == [("Entry", "gone", "notResolvable")]

    def test_eager_policy_hydrates_unreferenced_includes(self) -> None:
        document = collection(items=[entry("a", title="x")], entries=[entry("spare", title="y")])
        assert build_collection(document).included_entries == []
        eager = build_collection(document, policy=ResolutionPolicy.EAGER)
        assert [e["sys"]["id"] for e in eager.included_entries] == ["spare"]


class TestBuildSyncResult:
    def test_items_are_split_by_type(self) -> None:
        document = {
            "sys": {"type": "Array"},
            "items": [
                entry("a", ref=link("Entry", "b")),
                entry("b"),
                asset("img"),
                {"sys": {"type": "DeletedEntry", "id": "old", "deletedAt": "2024-01-01T00:00:00Z"}},
                {"sys": {"type": "DeletedAsset", "id": "old-img"}},
            ],
            "nextSyncUrl": "https://cdn.contentful.com/spaces/s/environments/master/sync?sync_token=abc",
        }
        result = build_sync_result(document)
        assert [e["sys"]["id"] for e in result.entries] == ["a", "b"]
        assert result.entries[0]["fields"]["ref"] is result.entries[1]
        assert [a.sys.id for a in result.assets] == ["img"]
        assert result.deleted_entries[0].id == "old"
        assert result.deleted_entries[0].deleted_at is not None
        assert result.deleted_assets[0].id == "old-img"
        assert result.next_sync_token == "abc"

    def test_next_page_token(self) -> None:
        result = build_sync_result({"items": [], "nextPageUrl": "https://cdn.contentful.com/sync?sync_token=page2"})
        assert result.next_sync_url is None
        assert result.next_sync_token == "page2"
