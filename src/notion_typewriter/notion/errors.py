# ABOUTME: Error taxonomy for fetching block trees from the Notion API.
# ABOUTME: Separates fatal request errors from retryable network failures.


class NotionFetchError(Exception):
    """Base class for errors raised while fetching Notion content."""
    pass


class AuthError(NotionFetchError):
    """Missing or invalid integration token."""
    pass


class NotFoundError(NotionFetchError):
    """Unknown block ID, or the integration has no access to it."""
    pass


class ApiError(NotionFetchError):
    """Any other non-2xx response from the Notion API."""

    def __init__(self, status: int, message: str):
        super().__init__(f"Notion API error ({status}): {message}")
        self.status = status
        self.message = message


class TransientNetworkError(NotionFetchError):
    """Connection-level failure that persisted through every retry."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause


class MalformedIdentifierError(NotionFetchError):
    """Page reference is neither a 32-char hex ID nor a URL ending in one."""

    def __init__(self, value: str):
        super().__init__(f"Invalid Notion page URL or ID: {value!r}")
        self.value = value
