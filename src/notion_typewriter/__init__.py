# ABOUTME: Renders a Notion page as one Markdown document for a typewriter display.
# ABOUTME: Fetches the page's block tree, converts it, and hashes the result.

__version__ = "0.1.0"
