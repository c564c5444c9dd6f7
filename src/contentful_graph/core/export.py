"""Turn a hydrated graph back into plain, acyclic JSON."""

from __future__ import annotations

from collections import deque
from typing import Any

from contentful_graph.core.links import LinkKey, is_resource, link_key, make_link


def export_graph(value: Any) -> Any:
    """Return a JSON-safe copy of ``value``.

    Each resource is written out in full the first time it is reached. Every later occurrence,
    including cycle back-edges, is written as a link stub to that resource.
    """
    emitted: set[LinkKey] = set()
    pending: deque[tuple[dict[str, Any], dict[str, Any]]] = deque()

    def _copy(node: Any) -> Any:
        if isinstance(node, list):
            return [_copy(element) for element in node]
        if isinstance(node, dict):
            if is_resource(node):
                key = link_key(node)
                if key in emitted:
                    return make_link(key)
                emitted.add(key)
                shell: dict[str, Any] = {}
                pending.append((node, shell))
                return shell
            return {name: _copy(child) for name, child in node.items()}
        return node

    result = _copy(value)
    while pending:
        source, shell = pending.popleft()
        for name, child in source.items():
            shell[name] = _copy(child)
    return result
