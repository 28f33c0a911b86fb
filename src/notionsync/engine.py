"""Replace the children of a Notion block with converted Markdown.

:class:`SyncEngine` owns the remote-content replacement protocol:

* :meth:`~SyncEngine.iter_children` walks a block's children page by page,
  lazily, following Notion's ``next_cursor``.
* :meth:`~SyncEngine.clear_children` deletes every child, one call per
  block, in listing order.
* :meth:`~SyncEngine.append_markdown` converts Markdown, prepends optional
  preamble blocks, and appends the result in batches of at most 100 blocks,
  strictly one after the other so Notion keeps them in order.
* :meth:`~SyncEngine.update_title` sets a page's title.
* :meth:`~SyncEngine.replace_markdown` runs clear, append and title update
  in that order.

Nothing here retries or rolls back.  The first failing call aborts the
operation and its error propagates with progress counters added to
``error.context``; whatever was deleted or appended before it stays that
way.  Callers must not run two operations against the same block
concurrently.
"""

from __future__ import annotations

from collections.abc import Iterator

from notionsync.config import MAX_BLOCKS_PER_APPEND, SyncConfig
from notionsync.converter.md_to_notion import MarkdownToNotionConverter
from notionsync.errors import NotionSyncError
from notionsync.models import AppendResult, ReplaceResult
from notionsync.notion_api.blocks import BlockAPI
from notionsync.notion_api.pages import PageAPI, title_property
from notionsync.observability import NoopMetricsHook, get_logger
from notionsync.utils.chunk import chunk_children

log = get_logger("notionsync.engine")


class SyncEngine:
    """Clear-and-append operations against a single Notion workspace.

    Parameters
    ----------
    blocks:
        Block endpoint wrapper.
    pages:
        Page endpoint wrapper.
    converter:
        Markdown converter producing unpersisted block dicts.
    config:
        Supplies the default listing page size and the metrics hook.
    """

    def __init__(
        self,
        blocks: BlockAPI,
        pages: PageAPI,
        converter: MarkdownToNotionConverter,
        config: SyncConfig,
    ) -> None:
        self._blocks = blocks
        self._pages = pages
        self._converter = converter
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def iter_children(self, block_id: str, page_size: int | None = None) -> Iterator[dict]:
        """Yield every child of *block_id* in the order Notion stores them.

        Pages are fetched on demand: the request for page *n + 1* is only
        sent once the caller has consumed page *n*, so stopping early saves
        the remaining requests.  Every call starts again from the first
        page.

        Parameters
        ----------
        block_id:
            The page or block whose children are listed.
        page_size:
            Children per request, 1-100.  Defaults to
            ``config.list_page_size`` (50).
        """
        size = self._config.list_page_size if page_size is None else page_size
        return self._blocks.iter_children(block_id, page_size=size)

    # ------------------------------------------------------------------
    # Clear
    # ------------------------------------------------------------------

    def clear_children(self, block_id: str) -> int:
        """Delete every child of *block_id*; return how many were deleted.

        Raises
        ------
        NotionSyncError
            From the first failing list or delete call, with
            ``context["blocks_deleted"]`` set to the number of children
            already removed.  Later children are left in place.
        """
        deleted = 0
        try:
            for block in self.iter_children(block_id):
                self._blocks.delete(block["id"])
                deleted += 1
        except NotionSyncError as exc:
            exc.context["blocks_deleted"] = deleted
            log.error(
                "Clearing children failed",
                extra={
                    "extra_fields": {
                        "op": "clear_children",
                        "block_id": block_id,
                        "blocks_deleted": deleted,
                        "error_code": exc.code,
                    }
                },
            )
            raise
        finally:
            if deleted:
                self._metrics.increment("notionsync.blocks_deleted_total", deleted)

        log.info(
            "Cleared children",
            extra={
                "extra_fields": {
                    "op": "clear_children",
                    "block_id": block_id,
                    "blocks_deleted": deleted,
                }
            },
        )
        return deleted

    # ------------------------------------------------------------------
    # Append
    # ------------------------------------------------------------------

    def append_markdown(
        self,
        block_id: str,
        markdown: str,
        preamble: list[dict] | None = None,
    ) -> AppendResult:
        """Convert *markdown* and append it, after *preamble*, to *block_id*.

        The combined block list is split into consecutive batches of at most
        100 and each batch is appended with its own call, waiting for one to
        finish before sending the next.  An empty list sends nothing.

        Parameters
        ----------
        block_id:
            The page or block to append to.
        markdown:
            Markdown body to convert.
        preamble:
            Blocks placed before the converted content, e.g. a banner
            callout.

        Raises
        ------
        NotionSyncError
            From the first failing append, with ``batches_submitted`` and
            ``blocks_appended`` in ``context``.  Batches already appended
            stay on the page.
        """
        conversion = self._converter.convert(markdown)
        all_blocks = [*(preamble or []), *conversion.blocks]
        batches = chunk_children(all_blocks, MAX_BLOCKS_PER_APPEND)

        log.info(
            "Appending markdown",
            extra={
                "extra_fields": {
                    "op": "append_markdown",
                    "block_id": block_id,
                    "blocks": len(all_blocks),
                    "batches": len(batches),
                    "warnings": len(conversion.warnings),
                }
            },
        )

        submitted = 0
        appended = 0
        for index, batch in enumerate(batches, start=1):
            try:
                self._blocks.append_children(block_id, batch)
            except NotionSyncError as exc:
                exc.context["batches_submitted"] = submitted
                exc.context["blocks_appended"] = appended
                log.error(
                    "Appending batch failed",
                    extra={
                        "extra_fields": {
                            "op": "append_markdown",
                            "block_id": block_id,
                            "batch": index,
                            "batches": len(batches),
                            "blocks_appended": appended,
                            "error_code": exc.code,
                        }
                    },
                )
                raise
            submitted += 1
            appended += len(batch)
            self._metrics.increment("notionsync.blocks_appended_total", len(batch))
            log.debug(
                "Appended batch",
                extra={
                    "extra_fields": {
                        "op": "append_markdown",
                        "block_id": block_id,
                        "batch": index,
                        "batches": len(batches),
                        "size": len(batch),
                    }
                },
            )

        return AppendResult(
            blocks_appended=appended,
            batches_submitted=submitted,
            warnings=list(conversion.warnings),
        )

    # ------------------------------------------------------------------
    # Title
    # ------------------------------------------------------------------

    def update_title(self, page_id: str, title: str) -> None:
        """Set the title of *page_id* to *title*, verbatim."""
        self._pages.update(page_id, title_property(title))
        log.info(
            "Updated page title",
            extra={"extra_fields": {"op": "update_title", "page_id": page_id}},
        )

    # ------------------------------------------------------------------
    # Replace
    # ------------------------------------------------------------------

    def replace_markdown(
        self,
        block_id: str,
        markdown: str,
        preamble: list[dict] | None = None,
        title: str | None = None,
    ) -> ReplaceResult:
        """Replace the children of *block_id* with converted *markdown*.

        Clears every existing child first, then appends the new content,
        then sets the title when *title* is given.  A failure in any step
        skips the remaining ones.
        """
        deleted = self.clear_children(block_id)
        appended = self.append_markdown(block_id, markdown, preamble)

        title_updated = False
        if title is not None:
            self.update_title(block_id, title)
            title_updated = True

        return ReplaceResult(
            blocks_deleted=deleted,
            blocks_appended=appended.blocks_appended,
            batches_submitted=appended.batches_submitted,
            title_updated=title_updated,
            warnings=appended.warnings,
        )
