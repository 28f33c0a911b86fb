"""Shared test fixtures for the notionsync test suite."""

from __future__ import annotations

import itertools
import re
from typing import Any

import pytest

from notionsync.config import MAX_BLOCKS_PER_APPEND, SyncConfig
from notionsync.converter.md_to_notion import MarkdownToNotionConverter
from notionsync.engine import SyncEngine
from notionsync.errors import NotionSyncNotFoundError, NotionSyncValidationError
from notionsync.notion_api.blocks import BlockAPI
from notionsync.notion_api.pages import PageAPI
from notionsync.notion_api.transport import NotionTransport

_CHILDREN_RE = re.compile(r"^/blocks/([^/]+)/children$")
_BLOCK_RE = re.compile(r"^/blocks/([^/]+)$")
_PAGE_RE = re.compile(r"^/pages/([^/]+)$")


class FakeNotion:
    """In-memory stand-in for :class:`NotionTransport`.

    Keeps an ordered child list per parent id and answers the four calls the
    sync engine makes.  Cursors are the id of the next unread child, the
    same way Notion behaves, so deleting while paginating works.
    ``paginate`` is the real transport implementation running on top of
    :meth:`request`.
    """

    paginate = NotionTransport.paginate

    def __init__(self) -> None:
        self.children: dict[str, list[dict]] = {}
        self.titles: dict[str, str] = {}
        self.calls: list[tuple[str, str, dict]] = []
        self._ids = itertools.count(1)
        self._failures: list[tuple[str, str, int, Exception]] = []
        self._seen: dict[tuple[str, str], int] = {}

    # -- setup ------------------------------------------------------------

    def seed(self, parent_id: str, count: int) -> list[str]:
        """Give *parent_id* *count* paragraph children; return their ids."""
        blocks = [self._new_block(_paragraph(f"old {i}")) for i in range(count)]
        self.children.setdefault(parent_id, []).extend(blocks)
        return [b["id"] for b in blocks]

    def fail_on(self, method: str, nth: int, exc: Exception, path_contains: str = "") -> None:
        """Raise *exc* on the *nth* (1-based) *method* call whose path matches."""
        self._failures.append((method, path_contains, nth, exc))

    # -- inspection -------------------------------------------------------

    def contents(self, parent_id: str) -> list[str]:
        """Plain text of each child of *parent_id*, in order."""
        out = []
        for block in self.children.get(parent_id, []):
            body = block[block["type"]]
            rich_text = body.get("rich_text", []) if isinstance(body, dict) else []
            out.append("".join(seg.get("text", {}).get("content", "") for seg in rich_text))
        return out

    def calls_for(self, method: str, path_contains: str = "") -> list[tuple[str, str, dict]]:
        return [c for c in self.calls if c[0] == method and path_contains in c[1]]

    # -- transport surface ------------------------------------------------

    def request(self, method: str, path: str, **kwargs: Any) -> dict:
        self.calls.append((method, path, kwargs))
        self._maybe_fail(method, path)

        if method == "GET" and (m := _CHILDREN_RE.match(path)):
            return self._list(m.group(1), kwargs.get("params") or {})
        if method == "DELETE" and (m := _BLOCK_RE.match(path)):
            return self._delete(m.group(1))
        if method == "PATCH" and (m := _CHILDREN_RE.match(path)):
            return self._append(m.group(1), kwargs["json"]["children"])
        if method == "PATCH" and (m := _PAGE_RE.match(path)):
            title = kwargs["json"]["properties"]["title"]["title"]
            self.titles[m.group(1)] = "".join(s["text"]["content"] for s in title)
            return {"object": "page", "id": m.group(1)}
        raise AssertionError(f"unexpected request {method} {path}")

    # -- internals --------------------------------------------------------

    def _maybe_fail(self, method: str, path: str) -> None:
        for fail_method, contains, nth, exc in self._failures:
            if fail_method != method or contains not in path:
                continue
            key = (fail_method, contains)
            self._seen[key] = self._seen.get(key, 0) + 1
            if self._seen[key] == nth:
                raise exc

    def _new_block(self, block: dict) -> dict:
        return {**block, "id": f"blk-{next(self._ids)}"}

    def _list(self, parent_id: str, params: dict) -> dict:
        items = self.children.get(parent_id, [])
        start = 0
        cursor = params.get("start_cursor")
        if cursor is not None:
            ids = [b["id"] for b in items]
            if cursor not in ids:
                raise NotionSyncValidationError(f"Invalid start_cursor {cursor}")
            start = ids.index(cursor)
        size = params["page_size"]
        page = items[start : start + size]
        rest = items[start + size :]
        return {
            "object": "list",
            "results": [dict(b) for b in page],
            "has_more": bool(rest),
            "next_cursor": rest[0]["id"] if rest else None,
        }

    def _delete(self, block_id: str) -> dict:
        for items in self.children.values():
            for i, block in enumerate(items):
                if block["id"] == block_id:
                    del items[i]
                    return {**block, "archived": True}
        raise NotionSyncNotFoundError(f"Block {block_id} not found")

    def _append(self, parent_id: str, children: list[dict]) -> dict:
        if len(children) > MAX_BLOCKS_PER_APPEND:
            raise NotionSyncValidationError("body.children.length should be <= 100")
        created = [self._new_block(c) for c in children]
        self.children.setdefault(parent_id, []).extend(created)
        return {"object": "list", "results": created}


def _paragraph(text: str) -> dict:
    return {
        "object": "block",
        "type": "paragraph",
        "paragraph": {"rich_text": [{"type": "text", "text": {"content": text}}]},
    }


@pytest.fixture
def config() -> SyncConfig:
    """Default test configuration with a dummy token."""
    return SyncConfig(token="test_token_1234")


@pytest.fixture
def converter(config: SyncConfig) -> MarkdownToNotionConverter:
    """Markdown-to-Notion converter using the default test config."""
    return MarkdownToNotionConverter(config)


@pytest.fixture
def fake_notion() -> FakeNotion:
    """Empty in-memory Notion workspace."""
    return FakeNotion()


@pytest.fixture
def engine(
    fake_notion: FakeNotion,
    converter: MarkdownToNotionConverter,
    config: SyncConfig,
) -> SyncEngine:
    """SyncEngine wired to the in-memory workspace through the real endpoint wrappers."""
    return SyncEngine(BlockAPI(fake_notion), PageAPI(fake_notion), converter, config)
