from enum import Enum
from typing import Any, NamedTuple

RESOLVABLE_LINK_TYPES = frozenset({"Entry", "Asset"})
RESOURCE_TYPES = frozenset({"Entry", "Asset", "DeletedEntry", "DeletedAsset"})

NOT_RESOLVABLE = "notResolvable"


class ResolutionPolicy(str, Enum):
    ON_DEMAND = "on_demand"
    EAGER = "eager"


class LinkKey(NamedTuple):
    link_type: str
    id: str

    def __str__(self) -> str:
        return f"{self.link_type}:{self.id}"


def _sys(value: Any) -> dict[str, Any] | None:
    if not isinstance(value, dict):
        return None
    sys = value.get("sys")
    return sys if isinstance(sys, dict) else None


def is_link(value: Any) -> bool:
    """True for a ``{"sys": {"type": "Link", ...}}`` stub of any link type."""
    sys = _sys(value)
    return sys is not None and sys.get("type") == "Link" and "id" in sys


def is_resolvable_link(value: Any) -> bool:
    return is_link(value) and value["sys"].get("linkType") in RESOLVABLE_LINK_TYPES


def is_resource(value: Any) -> bool:
    """True for a full Entry or Asset node (not a stub)."""
    sys = _sys(value)
    return sys is not None and sys.get("type") in ("Entry", "Asset") and "id" in sys


def link_key(value: dict[str, Any]) -> LinkKey:
    """Identity of a link stub or of a resource node."""
    sys = value["sys"]
    link_type = sys.get("linkType") if sys.get("type") == "Link" else sys.get("type")
    return LinkKey(str(link_type), str(sys["id"]))


def make_link(key: LinkKey) -> dict[str, Any]:
    return {"sys": {"type": "Link", "linkType": key.link_type, "id": key.id}}
