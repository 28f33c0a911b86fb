"""Partition a list of Notion block dicts into append-sized batches.

``PATCH /blocks/{id}/children`` accepts at most 100 children per call, so
any longer sequence has to be submitted as consecutive batches.
"""

from __future__ import annotations

from typing import Any

from notionsync.config import MAX_BLOCKS_PER_APPEND


def chunk_children(
    blocks: list[dict[str, Any]],
    size: int = MAX_BLOCKS_PER_APPEND,
) -> list[list[dict[str, Any]]]:
    """Split *blocks* into consecutive batches of at most *size* items.

    Batch *k* holds ``blocks[size * k : size * (k + 1)]``; concatenating the
    batches in order gives back the original list.

    Parameters
    ----------
    blocks:
        The full list of block dictionaries to partition.
    size:
        Maximum number of blocks per batch.  Defaults to **100**.

    Returns
    -------
    list[list[dict]]
        ``ceil(len(blocks) / size)`` sublists.  An empty input returns an
        empty list (not ``[[]]``).

    Raises
    ------
    ValueError
        If *size* is less than 1.

    Examples
    --------
    >>> [len(b) for b in chunk_children([{"type": "paragraph"}] * 250)]
    [100, 100, 50]
    """
    if size < 1:
        raise ValueError(f"size must be >= 1, got {size}")

    if not blocks:
        return []

    return [blocks[i : i + size] for i in range(0, len(blocks), size)]
