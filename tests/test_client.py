"""Tests for notion/client.py - paging requests, retries and error mapping."""

from __future__ import annotations

import httpx
import pytest

from conftest import error_response, paragraph

from notion_typewriter.notion import ApiError, AuthError, NotFoundError, TransientNetworkError
from notion_typewriter.notion.client import retry_on_transient


class TestListChildrenPage:
    def test_request_shape(self, fake_api, notion_client):
        fake_api.add("root", [paragraph("a")], [paragraph("b")])

        page = notion_client.list_children_page("root")

        request = fake_api.requests[0]
        assert request.method == "GET"
        assert request.url.path == "/v1/blocks/root/children"
        assert request.url.params["page_size"] == "100"
        assert "start_cursor" not in request.url.params
        assert request.headers["Authorization"] == "Bearer secret-token"
        assert request.headers["Notion-Version"] == "2022-06-28"
        assert page.next_cursor == "1"
        assert [b["id"] for b in page.results] == ["paragraph-id"]

    def test_cursor_is_forwarded(self, fake_api, notion_client):
        fake_api.add("root", [paragraph("a")], [paragraph("b")])

        page = notion_client.list_children_page("root", start_cursor="1")

        assert fake_api.requests[0].url.params["start_cursor"] == "1"
        assert page.next_cursor is None

    def test_missing_token_fails_before_request(self, fake_api, make_client):
        client = make_client(token="")

        with pytest.raises(AuthError):
            client.list_children_page("root")
        assert fake_api.requests == []


class TestErrorMapping:
    def test_unauthorized(self, fake_api, notion_client, sleeps):
        fake_api.fail_with(error_response(401, "unauthorized", "API token is invalid."))

        with pytest.raises(AuthError):
            notion_client.list_children_page("root")
        assert len(fake_api.requests) == 1
        assert sleeps == []

    def test_not_found(self, fake_api, notion_client, sleeps):
        with pytest.raises(NotFoundError):
            notion_client.list_children_page("missing")
        assert sleeps == []

    def test_restricted_resource_is_not_found(self, fake_api, notion_client):
        fake_api.fail_with(error_response(403, "restricted_resource", "No access."))

        with pytest.raises(NotFoundError):
            notion_client.list_children_page("root")

    def test_other_status_is_api_error(self, fake_api, notion_client, sleeps):
        fake_api.fail_with(error_response(400, "validation_error", "page_size should be <= 100"))

        with pytest.raises(ApiError) as excinfo:
            notion_client.list_children_page("root")
        assert excinfo.value.status == 400
        assert "page_size" in excinfo.value.message
        assert len(fake_api.requests) == 1
        assert sleeps == []

    def test_non_json_error_body(self, fake_api, notion_client):
        fake_api.fail_with(httpx.Response(502, text="Bad Gateway"))

        with pytest.raises(ApiError) as excinfo:
            notion_client.list_children_page("root")
        assert excinfo.value.status == 502


class TestRetry:
    def test_recovers_on_third_attempt(self, fake_api, notion_client, sleeps):
        fake_api.add("root", [paragraph("ok")])
        fake_api.fail_with(
            httpx.ConnectError("connection reset"),
            httpx.ReadTimeout("timed out"),
        )

        page = notion_client.list_children_page("root")

        assert len(page.results) == 1
        assert len(fake_api.requests) == 3
        assert sleeps == [1.0, 2.0]

    def test_exhausted_retries_wrap_last_cause(self, fake_api, notion_client, sleeps):
        last = httpx.RemoteProtocolError("other side closed")
        fake_api.fail_with(
            httpx.ConnectError("connection reset"),
            httpx.ConnectError("connection reset"),
            last,
        )

        with pytest.raises(TransientNetworkError) as excinfo:
            notion_client.list_children_page("root")

        assert excinfo.value.cause is last
        assert excinfo.value.__cause__ is last
        assert len(fake_api.requests) == 3
        assert sleeps == [1.0, 2.0]

    def test_decorator_does_not_retry_other_errors(self, sleeps):
        calls = []

        @retry_on_transient()
        def boom():
            calls.append(1)
            raise ValueError("not a network problem")

        with pytest.raises(ValueError):
            boom()
        assert calls == [1]
        assert sleeps == []

    def test_decorator_custom_backoff(self, sleeps):
        calls = []

        @retry_on_transient(max_attempts=4, backoff_seconds=0.5)
        def flaky():
            calls.append(1)
            if len(calls) < 4:
                raise httpx.WriteError("broken pipe")
            return "done"

        assert flaky() == "done"
        assert sleeps == [0.5, 1.0, 1.5]
