from collections.abc import Callable, Mapping
from typing import Any, TypeVar

C = TypeVar("C", bound=type[Any])


class MappingContentTypeResolver:
    """Resolve content type ids through a plain dict.

    Implements the ``ContentTypeResolver`` protocol. Unknown ids resolve to ``None`` so the
    materializer falls back to a dynamic representation.
    """

    def __init__(self, mapping: Mapping[str, type[Any]] | None = None) -> None:
        self._mapping: dict[str, type[Any]] = dict(mapping or {})

    def resolve(self, content_type_id: str) -> type[Any] | None:
        return self._mapping.get(content_type_id)

    def register(self, content_type_id: str) -> Callable[[C], C]:
        """Class decorator: ``@resolver.register("blogPost")``."""

        def _decorator(cls: C) -> C:
            self._mapping[content_type_id] = cls
            return cls

        return _decorator

    def __contains__(self, content_type_id: object) -> bool:
        return content_type_id in self._mapping

    def __len__(self) -> int:
        return len(self._mapping)
