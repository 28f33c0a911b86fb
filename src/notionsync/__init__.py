"""notionsync: push markdown files changed by a commit into Notion pages.

Public re-exports
-----------------

* **Client:** :class:`NotionSyncClient`, :class:`SyncEngine`
* **Driver:** :func:`sync_file`, :func:`sync_changed_files`,
  :func:`list_changed_markdown_files`
* **Configuration:** :class:`SyncConfig`
* **Frontmatter:** :class:`NotionFrontmatter`,
  :func:`parse_notion_frontmatter`, :func:`is_notion_frontmatter`
* **Errors:** Every :class:`NotionSyncError` subclass and :class:`ErrorCode`
* **Models:** Result dataclasses and enums

Usage::

    from notionsync import NotionSyncClient, sync_changed_files

    with NotionSyncClient(token="secret_xxx") as client:
        outcomes = sync_changed_files(client, repo_path=".", revision="HEAD")
"""

from __future__ import annotations

# ── Change set ──────────────────────────────────────────────────────────
from notionsync.changes import list_changed_markdown_files

# ── Client ──────────────────────────────────────────────────────────────
from notionsync.client import NotionSyncClient

# ── Configuration ───────────────────────────────────────────────────────
from notionsync.config import MAX_BLOCKS_PER_APPEND, SyncConfig
from notionsync.engine import SyncEngine

# ── Errors ──────────────────────────────────────────────────────────────
from notionsync.errors import (
    BatchLimitError,
    ErrorCode,
    FileReadError,
    FrontmatterError,
    GitQueryError,
    NotionSyncAuthError,
    NotionSyncConflictError,
    NotionSyncError,
    NotionSyncNetworkError,
    NotionSyncNotFoundError,
    NotionSyncPermissionError,
    NotionSyncRetryExhaustedError,
    NotionSyncValidationError,
)

# ── Frontmatter ─────────────────────────────────────────────────────────
from notionsync.frontmatter import (
    NotionFrontmatter,
    is_notion_frontmatter,
    parse_notion_frontmatter,
)

# ── Models ──────────────────────────────────────────────────────────────
from notionsync.models import (
    AppendResult,
    ChangedPath,
    ChangeStatus,
    ConversionResult,
    ConversionWarning,
    FileSyncOutcome,
    ReplaceResult,
)

# ── Driver ──────────────────────────────────────────────────────────────
from notionsync.runner import sync_changed_files, sync_file
from notionsync.utils.chunk import chunk_children

__version__ = "0.1.0"

# ── Public surface ──────────────────────────────────────────────────────

__all__ = [
    # Client
    "NotionSyncClient",
    "SyncEngine",
    # Driver
    "sync_file",
    "sync_changed_files",
    "list_changed_markdown_files",
    "chunk_children",
    # Configuration
    "SyncConfig",
    "MAX_BLOCKS_PER_APPEND",
    # Frontmatter
    "NotionFrontmatter",
    "parse_notion_frontmatter",
    "is_notion_frontmatter",
    # Error base + code enum
    "NotionSyncError",
    "ErrorCode",
    # API / transport errors
    "NotionSyncValidationError",
    "NotionSyncAuthError",
    "NotionSyncPermissionError",
    "NotionSyncNotFoundError",
    "NotionSyncConflictError",
    "NotionSyncRetryExhaustedError",
    "NotionSyncNetworkError",
    # Local errors
    "FileReadError",
    "FrontmatterError",
    "GitQueryError",
    "BatchLimitError",
    # Models
    "AppendResult",
    "ReplaceResult",
    "FileSyncOutcome",
    "ConversionResult",
    "ConversionWarning",
    "ChangedPath",
    "ChangeStatus",
]
