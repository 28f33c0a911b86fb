"""Runtime configuration for notionsync.

:class:`SyncConfig` is a plain dataclass that captures every tuneable knob
used by the transport, the converter and the sync engine.  Instances are
built by :class:`~notionsync.client.NotionSyncClient`, which forwards its
keyword arguments here.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Literal
from urllib.parse import urlparse

MAX_BLOCKS_PER_APPEND = 100
"""Hard limit on children accepted by one ``PATCH /blocks/{id}/children``."""

MAX_PAGE_SIZE = 100
"""Largest ``page_size`` the Notion list endpoints accept."""


@dataclass
class SyncConfig:
    """Complete configuration for a notionsync client.

    The only *required* value is ``token``.

    Parameters
    ----------
    token:
        Notion integration token.  Never logged.
    notion_version:
        Value of the ``Notion-Version`` header sent with every request.
    base_url:
        API root URL.  Override for proxy or testing environments.
    list_page_size:
        Number of children requested per page when listing a block's
        children.  Must be between 1 and 100.
    heading_overflow:
        How to convert Markdown headings of level 4 and above.

        * ``"downgrade"``: clamp to ``heading_3``.
        * ``"paragraph"``: render as a bold paragraph.
    retry_max_attempts:
        Maximum attempts per request for retryable HTTP errors.
    retry_base_delay:
        Base delay (seconds) for exponential backoff.
    retry_max_delay:
        Upper cap (seconds) on computed backoff delay.
    retry_jitter:
        Randomly scale backoff intervals to 50-100 % of their value.
    rate_limit_rps:
        Target requests per second for client-side pacing.
    timeout_seconds:
        HTTP request timeout in seconds.
    http_proxy:
        Optional HTTP/HTTPS proxy URL.
    metrics:
        Optional :class:`~notionsync.observability.MetricsHook` backend.
    debug_dump_payload:
        Write redacted request/response payloads to *stderr*.
    """

    token: str = ""

    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    list_page_size: int = 50

    heading_overflow: Literal["downgrade", "paragraph"] = "downgrade"

    # ── Retry & rate ────────────────────────────────────────────────────
    retry_max_attempts: int = 5

    retry_base_delay: float = 1.0

    retry_max_delay: float = 60.0

    retry_jitter: bool = True

    rate_limit_rps: float = 3.0

    # ── HTTP ────────────────────────────────────────────────────────────
    timeout_seconds: float = 30.0

    http_proxy: str | None = None

    # ── Observability ──────────────────────────────────────────────────
    metrics: Any | None = None

    debug_dump_payload: bool = False

    def __post_init__(self) -> None:
        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in _LOCAL_HOSTS:
            raise ValueError(
                f"base_url uses plain HTTP for '{parsed.hostname}'; the token would be "
                "sent in clear text. Use HTTPS, or a localhost URL for testing."
            )

        if not 1 <= self.list_page_size <= MAX_PAGE_SIZE:
            raise ValueError(
                f"list_page_size must be between 1 and {MAX_PAGE_SIZE}, "
                f"got {self.list_page_size}"
            )
        for name, minimum, inclusive in _NUMERIC_BOUNDS:
            value = getattr(self, name)
            if value < minimum or (not inclusive and value == minimum):
                op = ">=" if inclusive else ">"
                raise ValueError(f"{name} must be {op} {minimum}, got {value}")

    def __repr__(self) -> str:
        """Show every field except the token, of which only the tail is kept."""
        shown = []
        for f in dataclasses.fields(self):
            value = getattr(self, f.name)
            if f.name == "token":
                tail = f"...{value[-4:]}" if len(value) >= 4 else "****"
                shown.append(f"token='{tail}'")
            else:
                shown.append(f"{f.name}={value!r}")
        return f"{type(self).__name__}({', '.join(shown)})"


_LOCAL_HOSTS = ("localhost", "127.0.0.1", "::1")

# (field, lower bound, bound allowed)
_NUMERIC_BOUNDS: tuple[tuple[str, float, bool], ...] = (
    ("retry_max_attempts", 1, True),
    ("retry_base_delay", 0, True),
    ("retry_max_delay", 0, True),
    ("rate_limit_rps", 0, False),
    ("timeout_seconds", 0, False),
)
