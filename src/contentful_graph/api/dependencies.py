from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from contentful_graph.client import ContentfulClient
from contentful_graph.config import ContentfulOptions

logger = logging.getLogger(__name__)

_client: ContentfulClient | None = None


async def get_client() -> AsyncIterator[ContentfulClient]:
    """Yield the process-wide ``ContentfulClient``, built from ``CONTENTFUL_*`` on first use."""
    global _client  # noqa: PLW0603
    if _client is None:
        options = ContentfulOptions.from_env()
        logger.info("Serving space %s/%s from %s", options.space_id, options.environment, options.host)
        _client = ContentfulClient.from_options(options)
    yield _client


async def shutdown_client() -> None:
    """Close the HTTP connection pool of the shared client, if one was built."""
    global _client  # noqa: PLW0603
    if _client is not None:
        await _client.dispose()
        _client = None
