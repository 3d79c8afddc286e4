# ABOUTME: Typed representation of Notion blocks and rich text runs.
# ABOUTME: Parses raw API dicts into one data variant per block type.

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

# Block types whose payload is just a rich_text array
TEXT_BLOCK_TYPES = {
    "paragraph",
    "heading_1",
    "heading_2",
    "heading_3",
    "bulleted_list_item",
    "numbered_list_item",
    "toggle",
    "quote",
}

MEDIA_BLOCK_TYPES = {"image", "video", "file"}

# Layout-only blocks with no text of their own
EMPTY_BLOCK_TYPES = {"divider", "column", "column_list"}


@dataclass(frozen=True)
class Annotations:
    """Style flags of a rich text run."""
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    code: bool = False


@dataclass(frozen=True)
class RichText:
    """One styled span of text, optionally linked."""
    plain_text: str
    annotations: Annotations = field(default_factory=Annotations)
    href: str | None = None

    @classmethod
    def from_api(cls, raw: dict) -> RichText:
        annotations = raw.get("annotations") or {}
        return cls(
            plain_text=raw.get("plain_text") or "",
            annotations=Annotations(
                bold=bool(annotations.get("bold")),
                italic=bool(annotations.get("italic")),
                strikethrough=bool(annotations.get("strikethrough")),
                code=bool(annotations.get("code")),
            ),
            href=raw.get("href") or None,
        )


def parse_rich_text(raw: list[dict] | None) -> list[RichText]:
    """Parse a Notion rich_text array, tolerating null entries."""
    return [RichText.from_api(item) for item in raw or [] if isinstance(item, dict)]


@dataclass
class TextData:
    rich_text: list[RichText] = field(default_factory=list)


@dataclass
class ToDoData:
    rich_text: list[RichText] = field(default_factory=list)
    checked: bool = False


@dataclass
class CodeData:
    rich_text: list[RichText] = field(default_factory=list)
    language: str = ""


@dataclass
class CalloutData:
    rich_text: list[RichText] = field(default_factory=list)
    emoji: str | None = None


@dataclass
class MediaData:
    """Image, video or file: either hosted by Notion or external."""
    url: str | None = None
    caption: list[RichText] = field(default_factory=list)


@dataclass
class BookmarkData:
    url: str = ""
    caption: list[RichText] = field(default_factory=list)


@dataclass
class LinkPreviewData:
    url: str = ""


@dataclass
class EquationData:
    expression: str = ""


@dataclass
class TableData:
    table_width: int = 0
    has_column_header: bool = False
    has_row_header: bool = False


@dataclass
class TableRowData:
    cells: list[list[RichText]] = field(default_factory=list)


@dataclass
class EmptyData:
    """Divider and column layout blocks carry nothing to render."""
    pass


@dataclass
class UnknownData:
    """Block type this package does not model; keeps the raw payload."""
    raw: dict = field(default_factory=dict)
    rich_text: list[RichText] | None = None


BlockData = Union[
    TextData,
    ToDoData,
    CodeData,
    CalloutData,
    MediaData,
    BookmarkData,
    LinkPreviewData,
    EquationData,
    TableData,
    TableRowData,
    EmptyData,
    UnknownData,
]


def _media_url(data: dict) -> str | None:
    hosted = data.get("file") or {}
    external = data.get("external") or {}
    return hosted.get("url") or external.get("url") or None


def parse_block_data(block_type: str, data: dict) -> BlockData:
    """Build the typed payload for a block from its type-keyed dict."""
    if block_type in TEXT_BLOCK_TYPES:
        return TextData(rich_text=parse_rich_text(data.get("rich_text")))

    if block_type == "to_do":
        return ToDoData(
            rich_text=parse_rich_text(data.get("rich_text")),
            checked=bool(data.get("checked")),
        )

    if block_type == "code":
        return CodeData(
            rich_text=parse_rich_text(data.get("rich_text")),
            language=data.get("language") or "",
        )

    if block_type == "callout":
        icon = data.get("icon") or {}
        return CalloutData(
            rich_text=parse_rich_text(data.get("rich_text")),
            emoji=icon.get("emoji") or None,
        )

    if block_type in MEDIA_BLOCK_TYPES:
        return MediaData(url=_media_url(data), caption=parse_rich_text(data.get("caption")))

    if block_type == "bookmark":
        return BookmarkData(url=data.get("url") or "", caption=parse_rich_text(data.get("caption")))

    if block_type == "link_preview":
        return LinkPreviewData(url=data.get("url") or "")

    if block_type == "equation":
        return EquationData(expression=data.get("expression") or "")

    if block_type == "table":
        return TableData(
            table_width=data.get("table_width") or 0,
            has_column_header=bool(data.get("has_column_header")),
            has_row_header=bool(data.get("has_row_header")),
        )

    if block_type == "table_row":
        return TableRowData(cells=[parse_rich_text(cell) for cell in data.get("cells") or []])

    if block_type in EMPTY_BLOCK_TYPES:
        return EmptyData()

    rich_text = data.get("rich_text")
    return UnknownData(
        raw=data,
        rich_text=parse_rich_text(rich_text) if isinstance(rich_text, list) else None,
    )


@dataclass
class Block:
    """A node of a Notion page's content tree.

    ``children`` is only populated by the fetcher for blocks with
    ``has_children`` set; the renderer treats an empty list as no nested
    content.
    """
    id: str
    type: str
    data: BlockData
    has_children: bool = False
    children: list[Block] = field(default_factory=list)

    @classmethod
    def from_api(cls, raw: dict) -> Block:
        block_type = raw.get("type") or ""
        data = raw.get(block_type)
        return cls(
            id=raw.get("id", ""),
            type=block_type,
            data=parse_block_data(block_type, data if isinstance(data, dict) else {}),
            has_children=bool(raw.get("has_children")),
        )


def blocks_from_api(raw_blocks: list[dict]) -> list[Block]:
    """Parse raw block dicts, including any pre-populated ``children``.

    Nested children are parsed with a work-list so arbitrarily deep trees
    do not hit the recursion limit.
    """
    blocks: list[Block] = []
    pending = [(raw_blocks, blocks)]
    while pending:
        raw_list, target = pending.pop()
        for raw in raw_list:
            block = Block.from_api(raw)
            if raw.get("children"):
                pending.append((raw["children"], block.children))
            target.append(block)
    return blocks
