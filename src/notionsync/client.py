"""Synchronous notionsync client.

:class:`NotionSyncClient` builds the whole stack from a token: config,
HTTP transport, endpoint wrappers, converter and :class:`SyncEngine`.
Construct it once per process and reuse it for every file.

Usage::

    from notionsync import NotionSyncClient

    with NotionSyncClient(token="secret_xxx") as client:
        client.replace_markdown("<page_id>", "# Hello\\n\\nWorld", title="Hello")
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

import httpx

from notionsync.config import SyncConfig
from notionsync.converter.md_to_notion import MarkdownToNotionConverter
from notionsync.engine import SyncEngine
from notionsync.models import AppendResult, ConversionResult, ReplaceResult
from notionsync.notion_api.blocks import BlockAPI
from notionsync.notion_api.pages import PageAPI
from notionsync.notion_api.transport import NotionTransport


class NotionSyncClient:
    """Notion client exposing the sync operations.

    Parameters
    ----------
    token:
        Notion integration token.
    http_transport:
        Optional ``httpx`` transport, mainly for tests.
    **kwargs:
        Forwarded to :class:`SyncConfig`.
    """

    def __init__(
        self,
        token: str,
        http_transport: httpx.BaseTransport | None = None,
        **kwargs: Any,
    ) -> None:
        self._config = SyncConfig(token=token, **kwargs)
        self._transport = NotionTransport(self._config, http_transport=http_transport)
        self._converter = MarkdownToNotionConverter(self._config)
        self._engine = SyncEngine(
            BlockAPI(self._transport),
            PageAPI(self._transport),
            self._converter,
            self._config,
        )

    @property
    def config(self) -> SyncConfig:
        return self._config

    def convert(self, markdown: str) -> ConversionResult:
        """Convert *markdown* to blocks without touching Notion."""
        return self._converter.convert(markdown)

    def iter_children(self, block_id: str, page_size: int | None = None) -> Iterator[dict]:
        """Lazily list the children of a block.  See :meth:`SyncEngine.iter_children`."""
        return self._engine.iter_children(block_id, page_size)

    def clear_children(self, block_id: str) -> int:
        """Delete every child of a block.  See :meth:`SyncEngine.clear_children`."""
        return self._engine.clear_children(block_id)

    def append_markdown(
        self,
        block_id: str,
        markdown: str,
        preamble: list[dict] | None = None,
    ) -> AppendResult:
        """Append converted Markdown in batches.  See :meth:`SyncEngine.append_markdown`."""
        return self._engine.append_markdown(block_id, markdown, preamble)

    def update_title(self, page_id: str, title: str) -> None:
        """Set a page title.  See :meth:`SyncEngine.update_title`."""
        self._engine.update_title(page_id, title)

    def replace_markdown(
        self,
        block_id: str,
        markdown: str,
        preamble: list[dict] | None = None,
        title: str | None = None,
    ) -> ReplaceResult:
        """Clear, append and retitle.  See :meth:`SyncEngine.replace_markdown`."""
        return self._engine.replace_markdown(block_id, markdown, preamble, title)

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._transport.close()

    def __enter__(self) -> NotionSyncClient:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
