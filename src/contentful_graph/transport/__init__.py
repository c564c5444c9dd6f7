from contentful_graph.transport.http import (
    HttpContentSource,
    exception_for_response,
    generic_error_message,
)
from contentful_graph.transport.memory import InMemoryContentSource

__all__ = [
    "HttpContentSource",
    "InMemoryContentSource",
    "exception_for_response",
    "generic_error_message",
]
