# ABOUTME: Block tree fetching logic for Notion pages.
# ABOUTME: Paginates and expands nested children into a fully populated tree.

import logging

from .client import NotionClient
from .models import Block

logger = logging.getLogger(__name__)


def fetch_children(client: NotionClient, block_id: str) -> list[Block]:
    """Fetch every immediate child of a block, following pagination cursors.

    Args:
        client: The Notion API client.
        block_id: The ID of the parent block or page.

    Returns:
        Child blocks in the order the API returned them, children unexpanded.
    """
    blocks = []
    cursor = None
    pages = 0
    while True:
        page = client.list_children_page(block_id, start_cursor=cursor)
        pages += 1
        blocks.extend(Block.from_api(raw) for raw in page.results)

        if not page.next_cursor:
            break
        cursor = page.next_cursor

    logger.debug(f"Fetched {len(blocks)} children of {block_id} in {pages} page(s)")
    return blocks


def fetch_block_tree(client: NotionClient, block_id: str) -> list[Block]:
    """Fetch all blocks under a parent, expanding every nested subtree.

    Subtrees are fetched one at a time in document order. An explicit
    work-list is used instead of recursion so deeply nested pages cannot
    exhaust the interpreter stack. Any error aborts the whole fetch.

    Args:
        client: The Notion API client.
        block_id: The ID of the root block or page.

    Returns:
        Top-level blocks with ``children`` populated wherever ``has_children`` is set.
    """
    root = fetch_children(client, block_id)
    subtrees = 1

    pending = [block for block in reversed(root) if block.has_children]
    while pending:
        block = pending.pop()
        block.children = fetch_children(client, block.id)
        subtrees += 1
        pending.extend(child for child in reversed(block.children) if child.has_children)

    logger.info(f"Fetched block tree for {block_id} ({subtrees} subtree(s))")
    return root
