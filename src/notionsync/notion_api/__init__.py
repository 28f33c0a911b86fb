"""notionsync.notion_api -- Notion API transport and endpoint wrappers.

* :mod:`.rate_limit` -- token bucket for client-side pacing.
* :mod:`.retries` -- retry decision logic and exponential backoff.
* :mod:`.transport` -- HTTP transport with auth, retries and pagination.
* :mod:`.pages` -- page API wrapper.
* :mod:`.blocks` -- block API wrapper.
"""

from __future__ import annotations

from .blocks import BlockAPI
from .pages import PageAPI, title_property
from .rate_limit import TokenBucket
from .retries import compute_backoff, should_retry
from .transport import NotionTransport

__all__ = [
    "BlockAPI",
    "NotionTransport",
    "PageAPI",
    "TokenBucket",
    "compute_backoff",
    "should_retry",
    "title_property",
]
