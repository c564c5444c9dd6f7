"""Rich text node variants.

Nodes are dispatched on ``nodeType`` through ``NODE_TYPES``; anything the table does not know
becomes a ``CustomNode`` so documents written with newer node types still load. Embedded
entries and assets live in ``data.target`` and are hydrated by the resolver like any other
link, so ``target`` is either a hydrated node or ``None`` when the link was dangling.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Mark(BaseModel):
    type: str


class RichTextNode(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    node_type: str = Field(alias="nodeType")
    data: dict[str, Any] = Field(default_factory=dict)

    @property
    def target(self) -> Any:
        return self.data.get("target")


class Text(RichTextNode):
    value: str = ""
    marks: list[Mark] = Field(default_factory=list)


class Block(RichTextNode):
    content: list[RichTextNode] = Field(default_factory=list)

    @field_validator("content", mode="before")
    @classmethod
    def _dispatch_children(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        return [parse_node(child) if isinstance(child, dict) else child for child in value]

    def text(self) -> str:
        """Concatenated text of all descendant text nodes."""
        parts: list[str] = []
        stack: list[RichTextNode] = [self]
        while stack:
            node = stack.pop()
            if isinstance(node, Text):
                parts.append(node.value)
            elif isinstance(node, Block):
                stack.extend(reversed(node.content))
        return "".join(parts)


class Document(Block):
    pass


class Paragraph(Block):
    pass


class Heading(Block):
    @property
    def level(self) -> int:
        _, _, size = self.node_type.partition("-")
        return int(size) if size.isdigit() else 1


class Quote(Block):
    pass


class List(Block):
    @property
    def ordered(self) -> bool:
        return self.node_type == "ordered-list"


class ListItem(Block):
    pass


class HorizontalRule(RichTextNode):
    pass


class Hyperlink(Block):
    @property
    def uri(self) -> str | None:
        return self.data.get("uri")


class EntryHyperlink(Block):
    pass


class AssetHyperlink(Block):
    pass


class ResourceHyperlink(Block):
    pass


class EmbeddedEntryBlock(Block):
    pass


class EmbeddedEntryInline(Block):
    pass


class EmbeddedAssetBlock(Block):
    pass


class EmbeddedResourceBlock(Block):
    pass


class Table(Block):
    pass


class TableRow(Block):
    pass


class TableHeaderCell(Block):
    pass


class TableCell(Block):
    pass


class CustomNode(Block):
    """A node type this library does not know about; keeps its raw payload as extras."""


NODE_TYPES: dict[str, type[RichTextNode]] = {
    "document": Document,
    "paragraph": Paragraph,
    **{f"heading-{level}": Heading for level in range(1, 7)},
    "text": Text,
    "blockquote": Quote,
    "ordered-list": List,
    "unordered-list": List,
    "list-item": ListItem,
    "hr": HorizontalRule,
    "hyperlink": Hyperlink,
    "entry-hyperlink": EntryHyperlink,
    "asset-hyperlink": AssetHyperlink,
    "resource-hyperlink": ResourceHyperlink,
    "embedded-entry-block": EmbeddedEntryBlock,
    "embedded-entry-inline": EmbeddedEntryInline,
    "embedded-asset-block": EmbeddedAssetBlock,
    "embedded-resource-block": EmbeddedResourceBlock,
    "table": Table,
    "table-row": TableRow,
    "table-header-cell": TableHeaderCell,
    "table-cell": TableCell,
}


def parse_node(data: dict[str, Any]) -> RichTextNode:
    node_cls = NODE_TYPES.get(str(data.get("nodeType")), CustomNode)
    return node_cls.model_validate(data)
