# ABOUTME: Notion API integration package.
# ABOUTME: Exports the client, block tree fetching, ID parsing and error types.

from .client import NotionClient
from .errors import (
    ApiError,
    AuthError,
    MalformedIdentifierError,
    NotFoundError,
    NotionFetchError,
    TransientNetworkError,
)
from .ids import parse_page_id
from .models import Block, RichText, blocks_from_api
from .pages import fetch_block_tree

__all__ = [
    "NotionClient",
    "fetch_block_tree",
    "parse_page_id",
    "Block",
    "RichText",
    "blocks_from_api",
    "NotionFetchError",
    "AuthError",
    "NotFoundError",
    "ApiError",
    "TransientNetworkError",
    "MalformedIdentifierError",
]
