"""Exceptions raised by the client.

Dangling links are never raised; they are reported as ``ResolutionError`` data on the
collection envelope. Everything here is a caller-visible fault.
"""

from __future__ import annotations

from typing import Any


class ContentfulError(Exception):
    """Base class for all errors raised by contentful_graph."""


class ContentfulException(ContentfulError):
    """A non-successful response from the Delivery or Preview API."""

    def __init__(
        self,
        status_code: int,
        message: str,
        *,
        request_id: str | None = None,
        error_details: dict[str, Any] | None = None,
        system_properties: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.request_id = request_id
        self.error_details = error_details
        self.system_properties = system_properties or {}

    @property
    def error_id(self) -> str | None:
        """The ``sys.id`` of the error document, e.g. ``NotFound`` or ``RateLimitExceeded``."""
        value = self.system_properties.get("id")
        return str(value) if value is not None else None


class ContentfulRateLimitException(ContentfulException):
    def __init__(self, message: str, *, seconds_until_next_request: int = 0, **kwargs: Any) -> None:
        super().__init__(429, message, **kwargs)
        self.seconds_until_next_request = seconds_until_next_request


class GatewayTimeoutException(ContentfulException):
    def __init__(self, **kwargs: Any) -> None:
        super().__init__(504, "Gateway Timeout", **kwargs)


class MaterializationError(ContentfulError):
    """A hydrated node could not be coerced into the requested type."""

    def __init__(self, resource_id: str | None, target: type[Any], cause: Exception) -> None:
        name = getattr(target, "__name__", repr(target))
        super().__init__(f"Could not materialize resource {resource_id!r} as {name}: {cause}")
        self.resource_id = resource_id
        self.target = target
