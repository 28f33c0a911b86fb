"""Block API wrapper for the Notion API.

:class:`BlockAPI` is a thin wrapper around the ``/blocks`` endpoints the
sync engine needs: a lazy children listing, per-block delete, and a
children append that refuses to exceed the per-call limit.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from notionsync.config import MAX_BLOCKS_PER_APPEND, MAX_PAGE_SIZE
from notionsync.errors import BatchLimitError

from .transport import NotionTransport


class BlockAPI:
    """Synchronous wrapper for the Notion Blocks API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def iter_children(
        self,
        block_id: str,
        page_size: int = MAX_PAGE_SIZE,
    ) -> Iterator[dict[str, Any]]:
        """Iterate over the children of a block, one page request at a time.

        Parameters
        ----------
        block_id:
            The UUID of the parent block (or page).
        page_size:
            Children requested per ``GET /blocks/{id}/children`` call.

        Yields
        ------
        dict
            Child block objects in the order Notion reports them.
        """
        return self._transport.paginate(
            f"/blocks/{block_id}/children",
            page_size=page_size,
        )

    def delete(self, block_id: str) -> dict[str, Any]:
        """Delete (archive) a block.

        Returns the archived block object.
        """
        return self._transport.request("DELETE", f"/blocks/{block_id}")

    def append_children(
        self,
        block_id: str,
        children: list[dict[str, Any]],
    ) -> dict[str, Any]:
        """Append child blocks to the end of a block or page.

        Parameters
        ----------
        block_id:
            The UUID of the parent block (or page).
        children:
            At most 100 block objects.  Use
            :func:`notionsync.utils.chunk_children` to batch longer lists.

        Returns
        -------
        dict
            The API response listing the created blocks.

        Raises
        ------
        BatchLimitError
            If more than 100 children are supplied.  No request is sent.
        """
        if len(children) > MAX_BLOCKS_PER_APPEND:
            raise BatchLimitError(
                f"Cannot append {len(children)} children in one call; "
                f"the limit is {MAX_BLOCKS_PER_APPEND}",
                context={"block_id": block_id, "count": len(children)},
            )
        return self._transport.request(
            "PATCH", f"/blocks/{block_id}/children", json={"children": children}
        )
