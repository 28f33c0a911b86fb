"""Data models shared across notionsync.

Plain dataclasses and enums with no behaviour beyond structural equality.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Change set
# ---------------------------------------------------------------------------

class ChangeStatus(str, Enum):
    """Change type letters reported by ``git --name-status``."""

    ADDED = "A"
    MODIFIED = "M"
    DELETED = "D"
    RENAMED = "R"
    COPIED = "C"
    TYPE_CHANGED = "T"
    UNMERGED = "U"
    UNKNOWN = "X"


@dataclass(frozen=True)
class ChangedPath:
    """One entry of a commit's name-status listing.

    Attributes
    ----------
    status:
        The kind of change.
    path:
        Path of the file after the change (the new path for renames).
    old_path:
        Source path for renames and copies, otherwise ``None``.
    """

    status: ChangeStatus
    path: str
    old_path: str | None = None


# ---------------------------------------------------------------------------
# Conversion
# ---------------------------------------------------------------------------

@dataclass
class ConversionWarning:
    """A non-fatal issue encountered while converting Markdown.

    Attributes
    ----------
    code:
        Machine-readable warning code (e.g. ``"HTML_BLOCK_SKIPPED"``).
    message:
        Human-readable description.
    context:
        Structured data for diagnostics.
    """

    code: str
    message: str
    context: dict = field(default_factory=dict)


@dataclass
class ConversionResult:
    """Output of :meth:`MarkdownToNotionConverter.convert`.

    Attributes
    ----------
    blocks:
        Unpersisted Notion block dicts in document order.
    warnings:
        Non-fatal issues encountered during conversion.
    """

    blocks: list[dict] = field(default_factory=list)
    warnings: list[ConversionWarning] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Sync results
# ---------------------------------------------------------------------------

@dataclass
class AppendResult:
    """Result of appending converted Markdown to a block."""

    blocks_appended: int = 0
    batches_submitted: int = 0
    warnings: list[ConversionWarning] = field(default_factory=list)


@dataclass
class ReplaceResult:
    """Result of replacing a block's children with converted Markdown."""

    blocks_deleted: int = 0
    blocks_appended: int = 0
    batches_submitted: int = 0
    title_updated: bool = False
    warnings: list[ConversionWarning] = field(default_factory=list)


@dataclass
class FileSyncOutcome:
    """What happened to one markdown file during a sync run.

    Attributes
    ----------
    path:
        Repository-relative path of the markdown file.
    page_id:
        Destination page from the frontmatter, if it could be read.
    ok:
        ``True`` when the page was fully replaced.
    error:
        The error that stopped this file, when ``ok`` is ``False``.
    result:
        The replace result, when ``ok`` is ``True``.
    """

    path: str
    page_id: str | None = None
    ok: bool = False
    error: Exception | None = None
    result: ReplaceResult | None = None
