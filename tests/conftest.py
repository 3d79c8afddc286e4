from __future__ import annotations

import httpx
import pytest

from notion_typewriter.notion import NotionClient
from notion_typewriter.notion import client as client_module


# =============================================================================
# Raw API payload builders
# =============================================================================


def text(content: str, href: str | None = None, **annotations: bool) -> dict:
    """A raw rich text run as the Notion API returns it."""
    return {
        "type": "text",
        "plain_text": content,
        "href": href,
        "annotations": {
            "bold": False,
            "italic": False,
            "strikethrough": False,
            "underline": False,
            "code": False,
            "color": "default",
            **annotations,
        },
    }


def block(block_type: str, block_id: str = "", has_children: bool = False, children=None, **data) -> dict:
    """A raw block dict; ``data`` becomes the type-keyed payload."""
    raw = {
        "object": "block",
        "id": block_id or f"{block_type}-id",
        "type": block_type,
        "has_children": has_children,
        block_type: data,
    }
    if children is not None:
        raw["children"] = children
    return raw


def paragraph(content: str, **kwargs) -> dict:
    return block("paragraph", rich_text=[text(content)] if content else [], **kwargs)


# =============================================================================
# Fake Notion API
# =============================================================================


class FakeNotionAPI:
    """Serves ``GET /v1/blocks/{id}/children`` from in-memory pages.

    ``pages[block_id]`` is a list of result pages; cursors are the page
    index as a string. ``failures`` is a list of exceptions or
    httpx.Response objects returned before any normal response.
    """

    def __init__(self):
        self.pages: dict[str, list[list[dict]]] = {}
        self.failures: list = []
        self.requests: list[httpx.Request] = []

    def add(self, block_id: str, *pages: list[dict]) -> None:
        self.pages[block_id] = list(pages)

    def fail_with(self, *failures) -> None:
        self.failures.extend(failures)

    @property
    def requested_ids(self) -> list[str]:
        return [r.url.path.split("/")[3] for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if self.failures:
            failure = self.failures.pop(0)
            if isinstance(failure, Exception):
                raise failure
            return failure

        block_id = request.url.path.split("/")[3]
        if block_id not in self.pages:
            return error_response(404, "object_not_found", f"Could not find block with ID: {block_id}.")

        pages = self.pages[block_id]
        index = int(request.url.params.get("start_cursor", "0"))
        next_cursor = str(index + 1) if index + 1 < len(pages) else None
        return httpx.Response(
            200,
            json={
                "object": "list",
                "results": pages[index],
                "next_cursor": next_cursor,
                "has_more": next_cursor is not None,
            },
        )


def error_response(status: int, code: str, message: str) -> httpx.Response:
    return httpx.Response(
        status,
        json={"object": "error", "status": status, "code": code, "message": message},
    )


@pytest.fixture
def fake_api() -> FakeNotionAPI:
    return FakeNotionAPI()


@pytest.fixture
def make_client(fake_api: FakeNotionAPI):
    """Factory for NotionClients talking to the fake API."""

    def factory(token: str = "secret-token") -> NotionClient:
        http = httpx.Client(transport=httpx.MockTransport(lambda request: fake_api.handler(request)))
        return NotionClient(token, client=http)

    return factory


@pytest.fixture
def notion_client(make_client) -> NotionClient:
    return make_client()


@pytest.fixture
def sleeps(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Record retry backoff sleeps instead of sleeping."""
    recorded: list[float] = []
    monkeypatch.setattr(client_module.time, "sleep", recorded.append)
    return recorded
