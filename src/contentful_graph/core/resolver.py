"""Link resolution for a single delivery-API response.

The raw document is never modified. Each resource is copied into a fresh ``dict`` the first
time it is reached and registered in a side table keyed by ``(linkType, id)``; every later link
to the same key returns that same ``dict``. The side table is also the visited set, so a link
back to a resource that is still being filled yields the shell already registered for it and
cycles become ordinary Python reference cycles.

Expansion across resources goes through a work list rather than recursion, so stack depth is
bounded by the JSON nesting of one resource no matter how long a chain of links is.
"""

from __future__ import annotations

import copy
import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from contentful_graph.core.links import (
    NOT_RESOLVABLE,
    LinkKey,
    ResolutionPolicy,
    is_resolvable_link,
    is_resource,
    link_key,
)
from contentful_graph.models import ResolutionError

logger = logging.getLogger(__name__)

# Returned by ``_hydrate`` for a dangling link; never leaks into the output.
_MISSING = object()


@dataclass
class ResolutionStats:
    expanded: int = 0
    back_references: int = 0
    unresolved: int = 0


@dataclass
class ResolvedDocument:
    items: list[Any]
    included_entries: list[dict[str, Any]] = field(default_factory=list)
    included_assets: list[dict[str, Any]] = field(default_factory=list)
    errors: list[ResolutionError] = field(default_factory=list)
    skip: int = 0
    limit: int = 0
    total: int = 0
    stats: ResolutionStats = field(default_factory=ResolutionStats)


def build_includes_index(document: dict[str, Any]) -> dict[LinkKey, dict[str, Any]]:
    """Map ``(linkType, id)`` to raw nodes from ``includes``, falling back to the page items."""
    index: dict[LinkKey, dict[str, Any]] = {}
    for node in document.get("items") or []:
        if is_resource(node):
            index[link_key(node)] = node
    includes = document.get("includes") or {}
    for link_type in ("Entry", "Asset"):
        for node in includes.get(link_type) or []:
            if is_resource(node):
                index[link_key(node)] = node
    return index


def _server_errors(document: dict[str, Any]) -> list[ResolutionError]:
    """``notResolvable`` errors the API already reported alongside the items."""
    errors: list[ResolutionError] = []
    for error in document.get("errors") or []:
        details = error.get("details") or {}
        if details.get("type") != "Link" or "id" not in details or not details.get("linkType"):
            continue
        reason = (error.get("sys") or {}).get("id", NOT_RESOLVABLE)
        errors.append(ResolutionError(id=str(details["id"]), link_type=str(details["linkType"]), reason=reason))
    return errors


class Resolver:
    """One resolution pass over one document. Not reusable and not shared between documents."""

    def __init__(self, document: dict[str, Any], policy: ResolutionPolicy = ResolutionPolicy.ON_DEMAND) -> None:
        self._document = document
        self._policy = policy
        self._index = build_includes_index(document)
        self._resolved: dict[LinkKey, dict[str, Any]] = {}
        self._pending: deque[tuple[dict[str, Any], dict[str, Any]]] = deque()
        self._errors: dict[LinkKey, ResolutionError] = {}
        self._stats = ResolutionStats()

    def resolve(self) -> ResolvedDocument:
        items: list[Any] = self._hydrate(self._items())
        if self._policy is ResolutionPolicy.EAGER:
            for node in self._index.values():
                self._expand(node)
        self._drain()

        errors = list(self._errors.values())
        for error in _server_errors(self._document):
            if error not in errors:
                errors.append(error)

        logger.debug(
            "Resolved %d item(s): %d expanded, %d back-reference(s), %d unresolved",
            len(items),
            self._stats.expanded,
            self._stats.back_references,
            self._stats.unresolved,
        )
        return ResolvedDocument(
            items=items,
            included_entries=self._included("Entry"),
            included_assets=self._included("Asset"),
            errors=errors,
            skip=int(self._document.get("skip") or 0),
            limit=int(self._document.get("limit") or 0),
            total=int(self._document.get("total") or 0),
            stats=self._stats,
        )

    def _items(self) -> list[Any]:
        items = self._document.get("items")
        return list(items) if isinstance(items, list) else []

    def _included(self, link_type: str) -> list[dict[str, Any]]:
        includes = self._document.get("includes") or {}
        result: list[dict[str, Any]] = []
        for node in includes.get(link_type) or []:
            if not is_resource(node):
                continue
            hydrated = self._resolved.get(link_key(node))
            if hydrated is not None:
                result.append(hydrated)
        return result

    def _expand(self, raw: dict[str, Any]) -> dict[str, Any]:
        key = link_key(raw)
        existing = self._resolved.get(key)
        if existing is not None:
            return existing
        shell: dict[str, Any] = {}
        self._resolved[key] = shell
        self._pending.append((raw, shell))
        self._stats.expanded += 1
        return shell

    def _follow(self, stub: dict[str, Any]) -> Any:
        key = link_key(stub)
        existing = self._resolved.get(key)
        if existing is not None:
            self._stats.back_references += 1
            return existing
        target = self._index.get(key)
        if target is None:
            self._stats.unresolved += 1
            if key not in self._errors:
                logger.warning("Unresolvable link to %s", key)
                self._errors[key] = ResolutionError(id=key.id, link_type=key.link_type)
            return _MISSING
        return self._expand(target)

    def _drain(self) -> None:
        while self._pending:
            raw, shell = self._pending.popleft()
            for name, value in raw.items():
                # sys and metadata carry ContentType/Space/Tag links that are not content.
                shell[name] = self._hydrate(value) if name == "fields" else copy.deepcopy(value)

    def _hydrate(self, value: Any) -> Any:
        if isinstance(value, list):
            result = []
            for element in value:
                hydrated = self._hydrate(element)
                if hydrated is not _MISSING:
                    result.append(hydrated)
            return result
        if isinstance(value, dict):
            if is_resolvable_link(value):
                return self._follow(value)
            if is_resource(value):
                return self._expand(value)
            hydrated_dict: dict[str, Any] = {}
            for name, child in value.items():
                hydrated = self._hydrate(child)
                hydrated_dict[name] = None if hydrated is _MISSING else hydrated
            return hydrated_dict
        return value


def resolve_document(
    document: dict[str, Any], policy: ResolutionPolicy = ResolutionPolicy.ON_DEMAND
) -> ResolvedDocument:
    return Resolver(document, policy).resolve()
