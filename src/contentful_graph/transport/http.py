import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

import httpx
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, stop_after_attempt
from tenacity.wait import wait_base

from contentful_graph.config import ContentfulOptions
from contentful_graph.errors import (
    ContentfulError,
    ContentfulException,
    ContentfulRateLimitException,
    GatewayTimeoutException,
)

logger = logging.getLogger(__name__)

USER_AGENT = "contentful-graph/0.1.0"
RATE_LIMIT_RESET_HEADER = "X-Contentful-RateLimit-Reset"


def generic_error_message(status_code: int, error_id: str | None = None) -> str:
    """Fallback message for error responses whose body carries none."""
    if status_code == 400:
        if error_id == "BadRequestError":
            return "The request was malformed or missing a required parameter."
        return "The request contained invalid or unknown query parameters."
    if status_code == 401:
        return "The authorization token was invalid."
    if status_code == 403:
        return "The specified token does not have access to the requested resource."
    if status_code == 404:
        return "The requested resource or endpoint could not be found."
    if status_code == 409:
        return "Version mismatch error. The version you specified was incorrect."
    if status_code == 422:
        if error_id == "InvalidEntryError":
            return "The entered value was invalid."
        return "Validation failed. The request references an invalid field."
    if status_code == 429:
        return "Rate limit exceeded. Too many requests per second."
    if status_code == 500:
        return "Internal server error."
    if status_code == 502:
        return "The requested space is hibernated."
    return "An error occurred."


def exception_for_response(response: httpx.Response) -> ContentfulException:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}

    sys: dict[str, Any] = body.get("sys") or {}
    status_code = response.status_code
    message = body.get("message") or generic_error_message(status_code, sys.get("id"))
    kwargs: dict[str, Any] = {
        "request_id": body.get("requestId"),
        "error_details": body.get("details"),
        "system_properties": sys,
    }

    if status_code == 429:
        reset = response.headers.get(RATE_LIMIT_RESET_HEADER, "0")
        seconds = int(reset) if reset.isdigit() else 0
        return ContentfulRateLimitException(message, seconds_until_next_request=seconds, **kwargs)
    if status_code == 504:
        return GatewayTimeoutException(**kwargs)
    return ContentfulException(status_code, message, **kwargs)


class RateLimitResetWait(wait_base):
    """Wait as long as the rate-limited response announced in its reset header."""

    def __call__(self, retry_state: RetryCallState) -> float:
        outcome = retry_state.outcome
        if outcome is None or not outcome.failed:
            return 0.0
        error = outcome.exception()
        if isinstance(error, ContentfulRateLimitException):
            return float(max(error.seconds_until_next_request, 0))
        return 0.0


def _log_retry(retry_state: RetryCallState) -> None:
    url = retry_state.args[0] if retry_state.args else "?"
    delay = retry_state.next_action.sleep if retry_state.next_action is not None else 0.0
    logger.info("Rate limited on %s, attempt %d, retrying in %.0fs", url, retry_state.attempt_number, delay)


class HttpContentSource:
    """Fetch raw documents from the Delivery or Preview API.

    Implements the ``ContentSource`` protocol. Rate-limited requests are re-issued up to
    ``options.rate_limit_retries`` times, waiting for the reset the API announces.
    """

    def __init__(
        self,
        options: ContentfulOptions,
        client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._options = options
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=options.timeout)
        self._sleep = sleep

    @property
    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._options.access_token}",
            "User-Agent": USER_AGENT,
        }

    async def _request(self, url: str, params: dict[str, str] | None) -> dict[str, Any]:
        response = await self._client.get(url, params=params, headers=self._headers)
        if not response.is_success:
            raise exception_for_response(response)
        result: dict[str, Any] = response.json()
        return result

    async def _get(self, path: str, params: dict[str, str] | None = None) -> dict[str, Any]:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(ContentfulRateLimitException),
            wait=RateLimitResetWait(),
            stop=stop_after_attempt(self._options.rate_limit_retries + 1),
            sleep=self._sleep,
            reraise=True,
            before_sleep=_log_retry,
        )
        result: dict[str, Any] = await retrying(self._request, f"{self._options.base_url}{path}", params)
        return result

    async def fetch_entries(self, params: dict[str, str] | None = None) -> dict[str, Any]:
        return await self._get("/entries", params)

    async def fetch_assets(self, params: dict[str, str] | None = None) -> dict[str, Any]:
        return await self._get("/assets", params)

    async def fetch_asset(self, asset_id: str) -> dict[str, Any]:
        return await self._get(f"/assets/{asset_id}")

    async def fetch_sync(self, params: dict[str, str] | None = None) -> dict[str, Any]:
        return await self._get("/sync", params)

    async def ping(self) -> bool:
        try:
            await self._get("/content_types", {"limit": "1"})
            return True
        except (ContentfulError, httpx.HTTPError):
            return False

    async def dispose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
