"""Tests for NotionSyncClient.

The client is built with an ``httpx.MockTransport`` so the full stack
(config, transport, endpoint wrappers, converter, engine) runs offline.
"""

from __future__ import annotations

import json

import httpx
import pytest

from notionsync.client import NotionSyncClient
from notionsync.errors import NotionSyncAuthError

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


class _NotionHandler:
    """Answers the four sync endpoints and records every request."""

    def __init__(self, existing: list[str], status: int = 200):
        self.existing = list(existing)
        self.status = status
        self.requests: list[tuple[str, str, dict | None]] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        path = request.url.path.removeprefix("/v1")
        self.requests.append((request.method, path, body))

        if self.status != 200:
            return httpx.Response(self.status, json={"code": "unauthorized", "message": "bad token"})
        if request.method == "GET":
            results = [{"id": bid, "type": "paragraph"} for bid in self.existing]
            return httpx.Response(200, json={"results": results, "has_more": False, "next_cursor": None})
        if request.method == "DELETE":
            self.existing.remove(path.rsplit("/", 1)[-1])
            return httpx.Response(200, json={"archived": True})
        return httpx.Response(200, json={"object": "list", "results": []})


def _client(handler) -> NotionSyncClient:
    return NotionSyncClient(
        token="test-token",
        http_transport=httpx.MockTransport(handler),
        rate_limit_rps=10_000.0,
        retry_base_delay=0.0,
        retry_jitter=False,
    )


# ===========================================================================
# Tests
# ===========================================================================


class TestNotionSyncClient:
    def test_kwargs_reach_config(self):
        with NotionSyncClient(token="tok_abcd", list_page_size=10) as client:
            assert client.config.list_page_size == 10
            assert client.config.token == "tok_abcd"

    def test_invalid_kwarg_rejected(self):
        with pytest.raises(ValueError):
            NotionSyncClient(token="t", list_page_size=500)

    def test_convert_is_offline(self):
        handler = _NotionHandler([])
        with _client(handler) as client:
            result = client.convert("# Hi")
        assert [b["type"] for b in result.blocks] == ["heading_1"]
        assert handler.requests == []

    def test_replace_markdown_end_to_end(self):
        handler = _NotionHandler(["b1", "b2"])
        with _client(handler) as client:
            result = client.replace_markdown("pg", "# New\n\nbody", title="Doc")

        assert [(m, p) for m, p, _ in handler.requests] == [
            ("GET", "/blocks/pg/children"),
            ("DELETE", "/blocks/b1"),
            ("DELETE", "/blocks/b2"),
            ("PATCH", "/blocks/pg/children"),
            ("PATCH", "/pages/pg"),
        ]
        appended = handler.requests[3][2]["children"]
        assert [b["type"] for b in appended] == ["heading_1", "paragraph"]
        assert handler.requests[4][2]["properties"]["title"]["title"][0]["text"]["content"] == "Doc"
        assert result.blocks_deleted == 2
        assert result.blocks_appended == 2

    def test_list_uses_configured_page_size(self):
        handler = _NotionHandler(["b1"])
        with _client(handler) as client:
            assert [b["id"] for b in client.iter_children("pg")] == ["b1"]
        assert handler.requests[0][1] == "/blocks/pg/children"

    def test_auth_failure_surfaces(self):
        handler = _NotionHandler(["b1"], status=401)
        with _client(handler) as client:
            with pytest.raises(NotionSyncAuthError) as exc_info:
                client.clear_children("pg")
        assert exc_info.value.context["blocks_deleted"] == 0
        assert len(handler.requests) == 1

    def test_append_and_update_title(self):
        handler = _NotionHandler([])
        with _client(handler) as client:
            result = client.append_markdown("pg", "a\n\nb")
            client.update_title("pg", "T")
        assert result.batches_submitted == 1
        assert [m for m, _, _ in handler.requests] == ["PATCH", "PATCH"]
