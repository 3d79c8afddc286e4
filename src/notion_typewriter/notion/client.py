# ABOUTME: Wrapper around the official Notion Python SDK.
# ABOUTME: Lists block children one page at a time with retry on network failures.

import functools
import logging
import time
from dataclasses import dataclass

import httpx
from notion_client import Client
from notion_client.errors import HTTPResponseError, RequestTimeoutError

from .errors import ApiError, AuthError, NotFoundError, TransientNetworkError

logger = logging.getLogger(__name__)

NOTION_VERSION = "2022-06-28"

PAGE_SIZE = 100

# Connection-level failures worth retrying. HTTP error responses never are.
TRANSIENT_ERRORS = (
    httpx.TimeoutException,
    httpx.NetworkError,
    httpx.RemoteProtocolError,
    RequestTimeoutError,
)


def retry_on_transient(max_attempts: int = 3, backoff_seconds: float = 1.0):
    """Decorator to retry on transient network errors with linear backoff.

    Waits ``attempt * backoff_seconds`` after each failed attempt, then
    raises TransientNetworkError chained to the last failure.

    Args:
        max_attempts: Total number of attempts, including the first.
        backoff_seconds: Base delay multiplied by the attempt number.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            for attempt in range(1, max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except TRANSIENT_ERRORS as e:
                    if attempt == max_attempts:
                        raise TransientNetworkError(
                            f"Network error talking to Notion after {max_attempts} attempts: {e!r}",
                            cause=e,
                        ) from e
                    wait = attempt * backoff_seconds
                    logger.warning(
                        f"Network error on attempt {attempt}/{max_attempts}, "
                        f"retrying in {wait:.1f}s: {e!r}"
                    )
                    time.sleep(wait)
            return None  # Unreachable but satisfies type checker
        return wrapper
    return decorator


def _error_message(error: HTTPResponseError) -> str:
    """Best-effort human readable message from a Notion error response."""
    message = str(error)
    if message:
        return message
    return f"HTTP {error.status}"


def map_response_error(error: HTTPResponseError) -> Exception:
    """Translate an SDK HTTP error into this package's error taxonomy."""
    status = error.status
    message = _error_message(error)
    if status == 401:
        return AuthError(f"Notion rejected the integration token: {message}")
    if status in (403, 404):
        return NotFoundError(f"Block not found or not shared with the integration: {message}")
    return ApiError(status, message)


@dataclass
class ChildrenPage:
    """One page of a block's children as returned by the API."""
    results: list[dict]
    next_cursor: str | None


class NotionClient:
    """Wrapper around the Notion SDK client."""

    def __init__(
        self,
        token: str,
        notion_version: str = NOTION_VERSION,
        client: httpx.Client | None = None,
    ):
        """Initialize the client.

        Args:
            token: Notion integration token.
            notion_version: Value sent in the Notion-Version header.
            client: Optional httpx client, e.g. with a custom transport.
        """
        self._token = token
        self._client = Client(auth=token, notion_version=notion_version, client=client)

    @retry_on_transient()
    def list_children_page(self, block_id: str, start_cursor: str | None = None) -> ChildrenPage:
        """Retrieve one page of the immediate children of a block/page.

        Raises:
            AuthError: Token missing or rejected.
            NotFoundError: Unknown block or no access.
            ApiError: Any other error response.
            TransientNetworkError: Network failures exhausted all retries.
        """
        if not self._token:
            raise AuthError("A Notion integration token is required")

        params = {"block_id": block_id, "page_size": PAGE_SIZE}
        if start_cursor:
            params["start_cursor"] = start_cursor

        try:
            response = self._client.blocks.children.list(**params)
        except HTTPResponseError as e:
            raise map_response_error(e) from e

        return ChildrenPage(
            results=response.get("results") or [],
            next_cursor=response.get("next_cursor") or None,
        )
