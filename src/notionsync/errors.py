"""Error hierarchy for notionsync.

Every error raised by the package inherits from :class:`NotionSyncError`.
Each carries a machine-readable ``code`` (from :class:`ErrorCode`), a
human-readable ``message``, a structured ``context`` dict, and an optional
``cause`` (chained exception).

The sync engine adds progress keys to ``context`` before re-raising, so a
caller can tell how far a partially applied operation got
(``blocks_deleted``, ``batches_submitted``, ``blocks_appended``).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

# ---------------------------------------------------------------------------
# Error code enum
# ---------------------------------------------------------------------------

class ErrorCode(str, Enum):
    """Machine-readable error codes for every error the package can raise."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    AUTH_ERROR = "AUTH_ERROR"
    PERMISSION_ERROR = "PERMISSION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"
    NETWORK_ERROR = "NETWORK_ERROR"
    FRONTMATTER_ERROR = "FRONTMATTER_ERROR"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    GIT_QUERY_ERROR = "GIT_QUERY_ERROR"
    BATCH_LIMIT_EXCEEDED = "BATCH_LIMIT_EXCEEDED"


# ---------------------------------------------------------------------------
# Base error
# ---------------------------------------------------------------------------

class NotionSyncError(Exception):
    """Base exception for all notionsync errors.

    Parameters
    ----------
    code:
        A value from :class:`ErrorCode` identifying the error category.
    message:
        A developer-friendly description of what went wrong.
    context:
        Arbitrary structured data providing extra diagnostic detail.
    cause:
        The underlying exception, if this error wraps another.
    """

    code: ErrorCode = ErrorCode.VALIDATION_ERROR

    def __init__(
        self,
        message: str,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
        *,
        code: str | None = None,
    ) -> None:
        self.code = code if code is not None else type(self).code
        self.message: str = message
        self.context: dict[str, Any] = context or {}
        self.cause: Exception | None = cause
        super().__init__(message)
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        ctx = f", context={self.context!r}" if self.context else ""
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r}{ctx})"


# ---------------------------------------------------------------------------
# API / transport errors
# ---------------------------------------------------------------------------

class NotionSyncValidationError(NotionSyncError):
    """Notion API returned 400 (or another non-retryable 4xx).

    Context keys: ``status_code``, ``notion_code``, ``body``.
    """

    code = ErrorCode.VALIDATION_ERROR


class NotionSyncAuthError(NotionSyncError):
    """Notion API returned 401: the integration token is invalid or expired."""

    code = ErrorCode.AUTH_ERROR


class NotionSyncPermissionError(NotionSyncError):
    """Notion API returned 403: the integration lacks access to the resource.

    Context keys: ``status_code``, ``operation``.
    """

    code = ErrorCode.PERMISSION_ERROR


class NotionSyncNotFoundError(NotionSyncError):
    """Notion API returned 404: the page or block does not exist or is not shared."""

    code = ErrorCode.NOT_FOUND


class NotionSyncConflictError(NotionSyncError):
    """Notion API returned 409: the resource was modified concurrently."""

    code = ErrorCode.CONFLICT


class NotionSyncRetryExhaustedError(NotionSyncError):
    """All retry attempts were used up for a retryable request.

    Context keys: ``attempts``, ``last_status_code``.
    """

    code = ErrorCode.RETRY_EXHAUSTED


class NotionSyncNetworkError(NotionSyncError):
    """A transport-level failure (DNS, connection reset, timeout)."""

    code = ErrorCode.NETWORK_ERROR


# ---------------------------------------------------------------------------
# Local errors
# ---------------------------------------------------------------------------

class FrontmatterError(NotionSyncError):
    """A markdown file has missing or malformed notion frontmatter.

    Context keys: ``path`` (when known), ``frontmatter``.
    """

    code = ErrorCode.FRONTMATTER_ERROR


class FileReadError(NotionSyncError):
    """A changed markdown file is missing or is not valid UTF-8.

    Context keys: ``path``.
    """

    code = ErrorCode.FILE_READ_ERROR


class GitQueryError(NotionSyncError):
    """The version-control query for changed files failed.

    Context keys: ``command``, ``returncode``, ``stderr``.
    """

    code = ErrorCode.GIT_QUERY_ERROR


class BatchLimitError(NotionSyncError):
    """More children than the store accepts were handed to a single append.

    This indicates a programming error; correct batching never triggers it.
    """

    code = ErrorCode.BATCH_LIMIT_EXCEEDED
