from typing import Any, Protocol


class ContentTypeResolver(Protocol):
    def resolve(self, content_type_id: str) -> type[Any] | None: ...
