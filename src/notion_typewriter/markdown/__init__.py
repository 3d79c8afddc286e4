# ABOUTME: Markdown conversion package.
# ABOUTME: Exports the block tree to Markdown renderer.

from .converter import block_to_markdown, blocks_to_markdown, rich_text_to_markdown

__all__ = ["block_to_markdown", "blocks_to_markdown", "rich_text_to_markdown"]
