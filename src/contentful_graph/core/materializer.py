"""Typed materialization of hydrated nodes into pydantic models.

A hydrated graph may contain cycles, which pydantic cannot validate in one go. Each resource
is therefore first created as an empty ``model_construct()`` placeholder and registered under
``(node, class)``; its fields are converted afterwards from a work list, nested resources
becoming placeholders in turn. Validation then runs on the converted values and the validated
state is moved into the placeholder. Pydantic keeps model instances it is handed as-is, so a
placeholder referenced from several places stays one object.
"""

from __future__ import annotations

import logging
import types
from collections import deque
from collections.abc import Iterable, Mapping, Sequence
from typing import Annotated, Any, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError

from contentful_graph.core.links import is_resource
from contentful_graph.core.ports.content_types import ContentTypeResolver
from contentful_graph.errors import MaterializationError
from contentful_graph.models import Asset, ContentfulResource

logger = logging.getLogger(__name__)

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset, Sequence, Iterable)
_MAPPING_ORIGINS = (dict, Mapping)


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and get_origin(annotation) is None and issubclass(annotation, BaseModel)


def _is_dynamic(annotation: Any) -> bool:
    return annotation is None or annotation is Any or annotation is object or isinstance(annotation, TypeVar)


def _strip(annotation: Any) -> list[Any]:
    """Flatten ``Annotated`` and unions into the alternatives they allow, minus ``None``."""
    origin = get_origin(annotation)
    if origin is Annotated:
        return _strip(get_args(annotation)[0])
    if origin is Union or origin is types.UnionType:
        result: list[Any] = []
        for arg in get_args(annotation):
            if arg is not type(None):
                result.extend(_strip(arg))
        return result
    return [annotation]


def _model_candidates(annotation: Any) -> list[type[BaseModel]]:
    return [a for a in _strip(annotation) if _is_model(a)]


def _element_annotation(annotation: Any) -> Any:
    for alternative in _strip(annotation):
        origin = get_origin(alternative) or alternative
        if origin in _SEQUENCE_ORIGINS:
            args = get_args(alternative)
            return args[0] if args else Any
    return Any


def _value_annotation(annotation: Any) -> Any:
    for alternative in _strip(annotation):
        origin = get_origin(alternative) or alternative
        if origin in _MAPPING_ORIGINS:
            args = get_args(alternative)
            return args[1] if len(args) == 2 else Any
    return None


def _adopt(placeholder: BaseModel, validated: BaseModel) -> None:
    object.__setattr__(placeholder, "__dict__", validated.__dict__)
    object.__setattr__(placeholder, "__pydantic_fields_set__", validated.__pydantic_fields_set__)
    object.__setattr__(placeholder, "__pydantic_extra__", validated.__pydantic_extra__)
    object.__setattr__(placeholder, "__pydantic_private__", validated.__pydantic_private__)


def _resource_id(node: dict[str, Any]) -> str | None:
    sys = node.get("sys")
    return str(sys.get("id")) if isinstance(sys, dict) and "id" in sys else None


class Materializer:
    """Convert hydrated nodes into caller types.

    One instance is one identity scope: the same node materialized as the same class twice
    returns the same object. The content type resolver is consulted for entries whose target
    is an interface (a base class or an unannotated slot); a resolved class that is not a
    subclass of the requested one is ignored in favour of the requested one.
    """

    def __init__(self, content_type_resolver: ContentTypeResolver | None = None) -> None:
        self._content_type_resolver = content_type_resolver
        self._built: dict[tuple[int, type[BaseModel]], tuple[dict[str, Any], BaseModel]] = {}
        self._pending: deque[tuple[BaseModel, type[BaseModel], dict[str, Any]]] = deque()

    def materialize(self, node: Any, target: Any = None) -> Any:
        result = self._materialize_root(node, target)
        self._drain()
        return result

    def materialize_many(self, nodes: Iterable[Any], target: Any = None) -> list[Any]:
        results = [self._materialize_root(node, target) for node in nodes]
        self._drain()
        return results

    # ------------------------------------------------------------------
    # Class selection
    # ------------------------------------------------------------------

    def _resolve_content_type(self, node: dict[str, Any]) -> type[BaseModel] | None:
        if self._content_type_resolver is None or node["sys"].get("type") != "Entry":
            return None
        content_type = node["sys"].get("contentType") or {}
        content_type_id = (content_type.get("sys") or {}).get("id")
        if not content_type_id:
            return None
        resolved = self._content_type_resolver.resolve(content_type_id)
        if resolved is None:
            logger.debug("No type registered for content type %r", content_type_id)
            return None
        return resolved if _is_model(resolved) else None

    def _select(self, node: dict[str, Any], candidates: list[type[BaseModel]]) -> type[BaseModel] | None:
        resolved = self._resolve_content_type(node)
        if resolved is not None and (not candidates or any(issubclass(resolved, c) for c in candidates)):
            return resolved
        is_asset = node["sys"].get("type") == "Asset"
        for candidate in candidates:
            if issubclass(candidate, Asset) == is_asset:
                return candidate
        return candidates[0] if candidates else None

    def _materialize_root(self, node: Any, target: Any) -> Any:
        candidates = _model_candidates(target)
        if not is_resource(node):
            if not candidates:
                return node
            return self._validate(candidates[0], self._convert_fields(candidates[0], node), node)
        if not candidates:
            # Without a requested type, unmapped content types stay dynamic.
            resolved = self._resolve_content_type(node)
            return node if resolved is None else self._placeholder(node, resolved)
        return self._placeholder(node, self._select(node, candidates) or candidates[0])

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def _placeholder(self, node: dict[str, Any], cls: type[BaseModel]) -> BaseModel:
        key = (id(node), cls)
        built = self._built.get(key)
        if built is not None:
            return built[1]
        instance = cls.model_construct()
        # The node is kept alongside so its id() cannot be reused during this session.
        self._built[key] = (node, instance)
        self._pending.append((instance, cls, node))
        return instance

    def _drain(self) -> None:
        while self._pending:
            instance, cls, node = self._pending.popleft()
            values = self._convert_fields(cls, self._source(cls, node))
            _adopt(instance, self._validate(cls, values, node))

    def _validate(self, cls: type[BaseModel], values: dict[str, Any], node: dict[str, Any]) -> BaseModel:
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise MaterializationError(_resource_id(node), cls, exc) from exc

    @staticmethod
    def _source(cls: type[BaseModel], node: dict[str, Any]) -> dict[str, Any]:
        if issubclass(cls, ContentfulResource):
            return dict(node)
        fields = node.get("fields")
        source = dict(fields) if isinstance(fields, dict) else {}
        if "sys" in cls.model_fields and "sys" in node:
            source["sys"] = node["sys"]
        return source

    def _convert_fields(self, cls: type[BaseModel], source: dict[str, Any]) -> dict[str, Any]:
        values = dict(source)
        for name, info in cls.model_fields.items():
            for key in (info.validation_alias, info.alias, name):
                if isinstance(key, str) and key in source:
                    values[key] = self._convert(source[key], info.annotation)
                    break
        return values

    def _convert(self, value: Any, annotation: Any) -> Any:
        if is_resource(value):
            candidates = _model_candidates(annotation)
            if not candidates and not _is_dynamic(annotation):
                return value
            cls = self._select(value, candidates)
            return value if cls is None else self._placeholder(value, cls)
        if isinstance(value, list):
            element = _element_annotation(annotation)
            return [self._convert(v, element) for v in value]
        if isinstance(value, dict):
            candidates = _model_candidates(annotation)
            if candidates:
                return self._convert_fields(candidates[0], value)
            value_annotation = _value_annotation(annotation)
            if value_annotation is not None and not _is_dynamic(value_annotation):
                return {k: self._convert(v, value_annotation) for k, v in value.items()}
        return value


def materialize(node: Any, target: Any = None, content_type_resolver: ContentTypeResolver | None = None) -> Any:
    return Materializer(content_type_resolver).materialize(node, target)
