from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Generic, TypeVar
from urllib.parse import parse_qs, urlparse

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from contentful_graph.core.links import NOT_RESOLVABLE

T = TypeVar("T")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LinkProperties(_CamelModel):
    id: str
    type: str = "Link"
    link_type: str | None = None


class LinkReference(_CamelModel):
    sys: LinkProperties


class SystemProperties(_CamelModel):
    model_config = ConfigDict(extra="allow")

    id: str
    type: str
    link_type: str | None = None
    revision: int | None = None
    version: int | None = None
    locale: str | None = None
    content_type: LinkReference | None = None
    space: LinkReference | None = None
    environment: LinkReference | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    published_at: datetime | None = None
    first_published_at: datetime | None = None
    published_version: int | None = None
    published_counter: int | None = None

    @property
    def content_type_id(self) -> str | None:
        return self.content_type.sys.id if self.content_type else None


class ContentfulMetadata(_CamelModel):
    tags: list[LinkReference] = Field(default_factory=list)

    @property
    def tag_ids(self) -> list[str]:
        return [t.sys.id for t in self.tags]


class ContentfulResource(BaseModel):
    """Anything exposing a ``sys`` block is materialized from the whole node."""

    sys: SystemProperties


class Entry(ContentfulResource, Generic[T]):
    metadata: ContentfulMetadata | None = None
    fields: T


class ImageDetails(BaseModel):
    width: int
    height: int


class FileDetails(BaseModel):
    size: int = 0
    image: ImageDetails | None = None


class File(_CamelModel):
    file_name: str | None = None
    content_type: str | None = None
    url: str | None = None
    details: FileDetails | None = None


class Asset(ContentfulResource):
    metadata: ContentfulMetadata | None = None
    title: str | None = None
    description: str | None = None
    file: File | None = None
    title_localized: dict[str, str] | None = None
    description_localized: dict[str, str] | None = None
    files_localized: dict[str, File] | None = None

    @model_validator(mode="before")
    @classmethod
    def _lift_fields(cls, data: Any) -> Any:
        if not isinstance(data, dict) or "fields" not in data:
            return data
        data = dict(data)
        fields = data.pop("fields") or {}
        sys = data.get("sys")
        locale = sys.get("locale") if isinstance(sys, dict) else getattr(sys, "locale", None)
        if locale:
            data["title"] = fields.get("title")
            data["description"] = fields.get("description")
            data["file"] = fields.get("file")
            data["title_localized"] = {locale: fields["title"]} if "title" in fields else None
            data["description_localized"] = {locale: fields["description"]} if "description" in fields else None
            data["files_localized"] = {locale: fields["file"]} if "file" in fields else None
        else:
            data["title_localized"] = fields.get("title")
            data["description_localized"] = fields.get("description")
            data["files_localized"] = fields.get("file")
        return data


class ResolutionError(_CamelModel):
    """A link stub whose target was in neither ``includes`` nor the page items."""

    model_config = ConfigDict(frozen=True)

    id: str
    link_type: str
    reason: str = NOT_RESOLVABLE


@dataclass
class ContentfulCollection(Generic[T]):
    skip: int = 0
    limit: int = 0
    total: int = 0
    items: list[T] = field(default_factory=list)
    included_assets: list[Asset] = field(default_factory=list)
    included_entries: list[Any] = field(default_factory=list)
    errors: list[ResolutionError] = field(default_factory=list)

    def __iter__(self) -> Iterator[T]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)


class SyncType(str, Enum):
    ALL = "all"
    ENTRY = "Entry"
    ASSET = "Asset"
    DELETION = "Deletion"
    DELETED_ENTRY = "DeletedEntry"
    DELETED_ASSET = "DeletedAsset"


@dataclass
class SyncResult:
    entries: list[dict[str, Any]] = field(default_factory=list)
    assets: list[Asset] = field(default_factory=list)
    deleted_entries: list[SystemProperties] = field(default_factory=list)
    deleted_assets: list[SystemProperties] = field(default_factory=list)
    next_sync_url: str | None = None
    next_page_url: str | None = None
    errors: list[ResolutionError] = field(default_factory=list)

    @property
    def next_sync_token(self) -> str | None:
        url = self.next_sync_url or self.next_page_url
        if not url:
            return None
        tokens = parse_qs(urlparse(url).query).get("sync_token")
        return tokens[0] if tokens else None
