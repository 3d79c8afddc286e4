# ABOUTME: Converts a fetched Notion block tree to a single Markdown string.
# ABOUTME: One formatting rule per block type, with nested indentation and tables.

from dataclasses import dataclass, field

from ..notion.models import (
    Block,
    BookmarkData,
    CalloutData,
    CodeData,
    EquationData,
    LinkPreviewData,
    MediaData,
    RichText,
    TableRowData,
    ToDoData,
    UnknownData,
)

INDENT = "  "

DEFAULT_CALLOUT_EMOJI = "💡"

TABLE_PLACEHOLDER = "[表格]"

LINK_PREVIEW_LABEL = "链接"

HEADING_PREFIXES = {
    "heading_1": "#",
    "heading_2": "##",
    "heading_3": "###",
}


def rich_text_to_markdown(rich_text: list[RichText]) -> str:
    """Render rich text runs as inline Markdown.

    Markup nests in a fixed order: bold, italic, strikethrough, code, then
    the link wraps everything.
    """
    result = []
    for segment in rich_text:
        text = segment.plain_text
        annotations = segment.annotations

        if annotations.bold:
            text = f"**{text}**"
        if annotations.italic:
            text = f"*{text}*"
        if annotations.strikethrough:
            text = f"~~{text}~~"
        if annotations.code:
            text = f"`{text}`"

        if segment.href:
            text = f"[{text}]({segment.href})"

        result.append(text)

    return "".join(result)


def _block_text(block: Block) -> str:
    return rich_text_to_markdown(getattr(block.data, "rich_text", None) or [])


def _quote_lines(text: str) -> str:
    return "\n> ".join(text.split("\n"))


def _table_row_cells(row: Block) -> list[str]:
    if not isinstance(row.data, TableRowData):
        return []
    return [rich_text_to_markdown(cell) for cell in row.data.cells]


def _pipe_row(cells: list[str]) -> str:
    return "| " + " | ".join(cells) + " |"


def table_to_markdown(table: Block) -> str:
    """Assemble a pipe table from a table block's row children.

    The first row always becomes the header, whatever the block's header
    flags say.
    """
    rows = []
    for row in table.children:
        if row.type != "table_row":
            continue
        cells = _table_row_cells(row)
        if not cells:
            continue
        rows.append(_pipe_row(cells))
        if len(rows) == 1:
            rows.append(_pipe_row(["---"] * len(cells)))

    if not rows:
        return f"\n{TABLE_PLACEHOLDER}\n"
    return "\n" + "\n".join(rows) + "\n"


def _own_markdown(block: Block, depth: int) -> str:
    """Markdown for the block itself, without its children."""
    block_type = block.type
    data = block.data
    prefix = INDENT * depth

    if block_type == "paragraph":
        return _block_text(block)

    if block_type in HEADING_PREFIXES:
        return f"{HEADING_PREFIXES[block_type]} {_block_text(block)}"

    # Lists (toggles render as plain bullets)
    if block_type in ("bulleted_list_item", "toggle"):
        return f"{prefix}- {_block_text(block)}"

    if block_type == "numbered_list_item":
        return f"{prefix}1. {_block_text(block)}"

    if block_type == "to_do":
        checked = isinstance(data, ToDoData) and data.checked
        checkbox = "[x]" if checked else "[ ]"
        return f"{prefix}- {checkbox} {_block_text(block)}"

    if block_type == "code":
        language = data.language if isinstance(data, CodeData) else ""
        return f"```{language}\n{_block_text(block)}\n```"

    if block_type == "quote":
        return f"> {_quote_lines(_block_text(block))}"

    if block_type == "callout":
        emoji = (data.emoji if isinstance(data, CalloutData) else None) or DEFAULT_CALLOUT_EMOJI
        return f"> {emoji} {_quote_lines(_block_text(block))}"

    if block_type == "divider":
        return "---"

    if block_type == "table":
        return table_to_markdown(block)

    # Only reached for a row outside of a table
    if block_type == "table_row":
        return _pipe_row(_table_row_cells(block))

    if block_type == "image" and isinstance(data, MediaData):
        alt_text = rich_text_to_markdown(data.caption) or "image"
        return f"![{alt_text}]({data.url or ''})"

    if block_type in ("video", "file") and isinstance(data, MediaData):
        name = rich_text_to_markdown(data.caption) or block_type
        return f"[{name}]({data.url or ''})"

    if block_type == "bookmark" and isinstance(data, BookmarkData):
        title = rich_text_to_markdown(data.caption) or data.url
        return f"[{title}]({data.url})"

    if block_type == "link_preview" and isinstance(data, LinkPreviewData):
        return f"[{LINK_PREVIEW_LABEL}]({data.url})"

    if block_type == "equation" and isinstance(data, EquationData):
        return f"${data.expression}$"

    # Column layout has no text of its own, children carry the content
    if block_type in ("column", "column_list"):
        return ""

    # Unknown block type
    if isinstance(data, UnknownData) and data.rich_text is not None:
        return rich_text_to_markdown(data.rich_text)
    return f"[{block_type}]"


@dataclass
class _Frame:
    """A block being rendered, waiting for its children's Markdown."""
    block: Block
    depth: int
    markdown: str
    next_child: int = 0
    children_markdown: list[str] = field(default_factory=list)

    def has_pending_children(self) -> bool:
        # Table rows were consumed by the table's own Markdown
        return self.block.type != "table" and self.next_child < len(self.block.children)

    def compose(self) -> str:
        children = "\n".join(self.children_markdown)
        if not children:
            return self.markdown
        if not self.markdown:
            return children
        return f"{self.markdown}\n{children}"


def block_to_markdown(block: Block, depth: int = 0) -> str:
    """Convert a single block and its children to Markdown.

    Children are rendered with an explicit stack, so nesting depth is not
    bounded by the interpreter's recursion limit.

    Args:
        block: Block with children already fetched.
        depth: Nesting level, used to indent list-like blocks.

    Returns:
        Markdown string, possibly empty.
    """
    stack = [_Frame(block, depth, _own_markdown(block, depth))]
    while True:
        frame = stack[-1]
        if frame.has_pending_children():
            child = frame.block.children[frame.next_child]
            frame.next_child += 1
            stack.append(_Frame(child, frame.depth + 1, _own_markdown(child, frame.depth + 1)))
            continue

        stack.pop()
        markdown = frame.compose()
        if not stack:
            return markdown
        if markdown.strip():
            stack[-1].children_markdown.append(markdown)


def blocks_to_markdown(blocks: list[Block]) -> str:
    """Convert a page's top-level blocks to one Markdown document.

    Blocks that render to whitespace only are dropped; the rest are
    separated by a blank line.
    """
    rendered = (block_to_markdown(block) for block in blocks)
    return "\n\n".join(md for md in rendered if md.strip())
