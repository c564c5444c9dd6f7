"""Tests for exporting hydrated graphs back to plain JSON."""

import json
from typing import Any

from conftest import link

from contentful_graph.core.export import export_graph
from contentful_graph.core.resolver import resolve_document


def test_repeated_resources_become_link_stubs(cyclic_document: dict[str, Any]) -> None:
    exported = export_graph(resolve_document(cyclic_document).items)
    item1, item2 = exported
    assert item1["fields"]["next"] == link("Entry", "item2")
    assert item2["fields"]["next"] == link("Entry", "item1")
    assert item2["fields"]["image"]["fields"]["title"] == "Image"


def test_self_reference_is_written_as_a_stub(self_reference_document: dict[str, Any]) -> None:
    exported = export_graph(resolve_document(self_reference_document).items[0])
    assert exported["fields"]["me"] == link("Entry", "self")
    assert exported["fields"]["title"] == "me"


def test_export_is_json_serializable(cyclic_document: dict[str, Any]) -> None:
    exported = export_graph(resolve_document(cyclic_document).items)
    assert json.loads(json.dumps(exported)) == exported


def test_first_occurrence_in_traversal_order_is_written_in_full(cyclic_document: dict[str, Any]) -> None:
    resolved = resolve_document(cyclic_document)
    exported = export_graph(resolved.items[1])
    assert exported["fields"]["next"]["fields"]["title"] == "one"
    assert exported["fields"]["next"]["fields"]["next"] == link("Entry", "item2")


def test_plain_values_pass_through() -> None:
    assert export_graph({"a": [1, "two", None]}) == {"a": [1, "two", None]}
