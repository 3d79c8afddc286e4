# ABOUTME: Fetch-render pipeline producing a page's Markdown and content hash.
# ABOUTME: The hash is what pollers compare to decide whether to re-render.

import hashlib
import logging
from dataclasses import dataclass

from .markdown import blocks_to_markdown
from .notion import MalformedIdentifierError, NotionClient, fetch_block_tree, parse_page_id

logger = logging.getLogger(__name__)


def content_hash(markdown: str) -> str:
    """SHA-256 hex digest of the Markdown text."""
    return hashlib.sha256(markdown.encode("utf-8")).hexdigest()


@dataclass
class PageContent:
    """Rendered Markdown of one page at one point in time."""
    page_id: str
    markdown: str
    content_hash: str

    def to_dict(self) -> dict:
        """Payload served to the typewriter front-end."""
        return {"markdown": self.markdown, "contentHash": self.content_hash}


def fetch_page_content(client: NotionClient, page_ref: str) -> PageContent:
    """Fetch a page's block tree and render it to Markdown.

    Args:
        client: The Notion API client.
        page_ref: Notion page URL or 32-char page ID.

    Raises:
        MalformedIdentifierError: page_ref holds no valid ID; nothing is fetched.
        NotionFetchError: Any failure while fetching; no partial Markdown is produced.
    """
    page_id = parse_page_id(page_ref)
    if page_id is None:
        raise MalformedIdentifierError(page_ref)

    blocks = fetch_block_tree(client, page_id)
    markdown = blocks_to_markdown(blocks)
    digest = content_hash(markdown)

    logger.debug(f"Rendered page {page_id}: {len(markdown)} chars, hash {digest[:12]}")
    return PageContent(page_id=page_id, markdown=markdown, content_hash=digest)
