"""YAML frontmatter parsing for synced markdown files.

A synced file starts with a YAML block naming its destination page::

    ---
    notion_page: 0123456789abcdef0123456789abcdef
    title: Release checklist
    ---
    # Body starts here

``notion_page`` is required and must be a string; ``title`` is optional but
must be a string when present.  Any other keys are kept in
:attr:`NotionFrontmatter.extra` and otherwise ignored.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import yaml

from notionsync.errors import FrontmatterError

FRONTMATTER_PATTERN = re.compile(
    r"\A---[ \t]*\r?\n(.*?)^---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL | re.MULTILINE,
)


@dataclass(frozen=True)
class NotionFrontmatter:
    """Validated frontmatter of a synced markdown file."""

    notion_page: str
    title: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)


def is_notion_frontmatter(fm: object) -> bool:
    """Return ``True`` if *fm* is a valid notion frontmatter mapping.

    >>> is_notion_frontmatter({"notion_page": "x"})
    True
    >>> is_notion_frontmatter({"notion_page": "x", "title": 5})
    False
    """
    if not isinstance(fm, Mapping):
        return False
    if not isinstance(fm.get("notion_page"), str):
        return False
    return "title" not in fm or isinstance(fm["title"], str)


def split_frontmatter(text: str) -> tuple[Any, str]:
    """Split *text* into its parsed YAML frontmatter and the remaining body.

    Returns ``(None, text)`` when the file has no frontmatter block.

    Raises
    ------
    FrontmatterError
        If the frontmatter block is not valid YAML.
    """
    text = text.removeprefix("\ufeff")
    match = FRONTMATTER_PATTERN.match(text)
    if match is None:
        return None, text

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise FrontmatterError(
            f"Invalid YAML in frontmatter: {exc}",
            cause=exc,
        ) from exc

    return data, text[match.end():]


def parse_notion_frontmatter(
    text: str,
    path: str | None = None,
) -> tuple[NotionFrontmatter, str]:
    """Parse and validate the frontmatter of a markdown document.

    Parameters
    ----------
    text:
        Full file contents.
    path:
        File path, only used for error context.

    Returns
    -------
    tuple[NotionFrontmatter, str]
        The validated record and the markdown body without frontmatter.

    Raises
    ------
    FrontmatterError
        If the frontmatter is missing, not valid YAML, or fails
        :func:`is_notion_frontmatter`.
    """
    try:
        data, body = split_frontmatter(text)
    except FrontmatterError as exc:
        exc.context["path"] = path
        raise

    if data is None:
        raise FrontmatterError(
            "File has no frontmatter; expected a 'notion_page' key",
            context={"path": path},
        )
    if not is_notion_frontmatter(data):
        raise FrontmatterError(
            "Frontmatter must contain a string 'notion_page' and, "
            "if present, a string 'title'",
            context={"path": path, "frontmatter": data},
        )

    extra = {k: v for k, v in data.items() if k not in ("notion_page", "title")}
    return NotionFrontmatter(
        notion_page=data["notion_page"],
        title=data.get("title"),
        extra=extra,
    ), body
