"""Convert normalised AST tokens to Notion block dicts.

Block mapping:

- heading 1-3 -> heading_1/2/3 (level 4+ per ``heading_overflow``)
- paragraph -> paragraph (a lone image becomes an image block)
- block_quote -> quote, non-paragraph children nested
- list -> bulleted_list_item / numbered_list_item, nested via ``children``
- task_list_item -> to_do
- block_code -> code with a Notion-accepted language
- thematic_break -> divider
- table -> table with table_row children
- block_math -> equation
- html_block -> skipped with a warning
"""

from __future__ import annotations

import re
from collections.abc import Callable
from urllib.parse import urlparse

from notionsync.config import SyncConfig
from notionsync.converter.rich_text import build_rich_text, extract_text, split_rich_text
from notionsync.models import ConversionWarning

# ---------------------------------------------------------------------------
# Notion code language mapping
# ---------------------------------------------------------------------------

_NOTION_LANGUAGES: frozenset[str] = frozenset({
    "abap", "arduino", "bash", "basic", "c", "clojure", "coffeescript",
    "c++", "c#", "css", "dart", "diff", "docker", "elixir", "elm",
    "erlang", "flow", "fortran", "f#", "gherkin", "glsl", "go", "graphql",
    "groovy", "haskell", "html", "java", "javascript", "json", "julia",
    "kotlin", "latex", "less", "lisp", "livescript", "lua", "makefile",
    "markdown", "markup", "matlab", "mermaid", "nix", "objective-c",
    "ocaml", "pascal", "perl", "php", "plain text", "powershell",
    "prolog", "protobuf", "python", "r", "reason", "ruby", "rust",
    "sass", "scala", "scheme", "scss", "shell", "sql", "swift",
    "typescript", "vb.net", "verilog", "vhdl", "visual basic",
    "webassembly", "xml", "yaml", "java/c/c++/c#",
})

_LANGUAGE_ALIASES: dict[str, str] = {
    "py": "python",
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "sh": "shell",
    "zsh": "shell",
    "console": "shell",
    "rb": "ruby",
    "rs": "rust",
    "yml": "yaml",
    "md": "markdown",
    "cs": "c#",
    "csharp": "c#",
    "cpp": "c++",
    "objc": "objective-c",
    "dockerfile": "docker",
    "make": "makefile",
    "tex": "latex",
    "htm": "html",
    "jsonc": "json",
    "golang": "go",
    "kt": "kotlin",
    "ps1": "powershell",
    "text": "plain text",
    "txt": "plain text",
}

_MAX_NESTING_DEPTH = 8


def normalize_language(info: str | None) -> str:
    """Map a code fence info string to a Notion-accepted language name."""
    if not info or not info.strip():
        return "plain text"
    lang = info.strip().lower().split()[0]
    for candidate in (lang, re.sub(r"\d+$", "", lang)):
        if candidate in _NOTION_LANGUAGES:
            return candidate
        if candidate in _LANGUAGE_ALIASES:
            return _LANGUAGE_ALIASES[candidate]
    return "plain text"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def build_blocks(
    tokens: list[dict],
    config: SyncConfig,
) -> tuple[list[dict], list[ConversionWarning]]:
    """Convert normalised AST tokens to top-level Notion block dicts.

    Returns ``(blocks, warnings)``.  Nested blocks (list children, quote
    children) live inside their parent and are not repeated at the top
    level.
    """
    ctx = _BuildContext(config)
    blocks = _process_tokens(tokens, ctx)
    return blocks, ctx.warnings


def build_callout(text: str, emoji: str = "ℹ️") -> dict:
    """Build a callout block, used as a banner above synced content."""
    return {
        "object": "block",
        "type": "callout",
        "callout": {
            "rich_text": split_rich_text([{"type": "text", "text": {"content": text}}]),
            "icon": {"type": "emoji", "emoji": emoji},
            "color": "gray_background",
        },
    }


class _BuildContext:
    __slots__ = ("config", "warnings")

    def __init__(self, config: SyncConfig) -> None:
        self.config = config
        self.warnings: list[ConversionWarning] = []

    def add_warning(self, code: str, message: str, **context: object) -> None:
        self.warnings.append(ConversionWarning(
            code=code, message=message, context=dict(context),
        ))


def _process_tokens(tokens: list[dict], ctx: _BuildContext, depth: int = 0) -> list[dict]:
    produced: list[dict] = []
    for token in tokens:
        produced.extend(_process_token(token, ctx, depth))
    return produced


def _process_token(token: dict, ctx: _BuildContext, depth: int = 0) -> list[dict]:
    token_type = token.get("type", "")
    handler = _BLOCK_HANDLERS.get(token_type)
    if handler is not None:
        return handler(token, ctx, depth)
    if token_type:
        ctx.add_warning(
            "UNKNOWN_TOKEN",
            f"Unknown token type '{token_type}' was skipped.",
        )
    return []


def _text_block(block_type: str, rich_text: list[dict], **extra: object) -> dict:
    return {
        "object": "block",
        "type": block_type,
        block_type: {"rich_text": rich_text, "color": "default", **extra},
    }


# ---------------------------------------------------------------------------
# Block builders
# ---------------------------------------------------------------------------

def _build_heading(token: dict, ctx: _BuildContext, depth: int) -> list[dict]:
    level = token.get("attrs", {}).get("level", 1)
    rich_text = split_rich_text(build_rich_text(token.get("children", []), warnings=ctx.warnings))

    if level <= 3:
        return [_text_block(f"heading_{level}", rich_text, is_toggleable=False)]
    if ctx.config.heading_overflow == "downgrade":
        return [_text_block("heading_3", rich_text, is_toggleable=False)]

    for seg in rich_text:
        if seg.get("type") == "text":
            seg.setdefault("annotations", {})["bold"] = True
    return [_text_block("paragraph", rich_text)]


def _build_paragraph(token: dict, ctx: _BuildContext, depth: int) -> list[dict]:
    children = token.get("children", [])

    if len(children) == 1 and children[0].get("type") == "image":
        return _build_image(children[0], ctx)

    rich_text = split_rich_text(build_rich_text(children, warnings=ctx.warnings))
    if not rich_text:
        return []
    return [_text_block("paragraph", rich_text)]


def _build_block_quote(token: dict, ctx: _BuildContext, depth: int) -> list[dict]:
    """Paragraphs become the quote's rich_text; anything else is nested."""
    rich_text: list[dict] = []
    nested: list[dict] = []

    for child in token.get("children", []):
        if child.get("type") == "paragraph":
            if rich_text:
                rich_text.append({"type": "text", "text": {"content": "\n"}})
            rich_text.extend(build_rich_text(child.get("children", []), warnings=ctx.warnings))
        else:
            nested.extend(_process_token(child, ctx, depth + 1))

    block = _text_block("quote", split_rich_text(rich_text))
    if nested:
        block["quote"]["children"] = nested
    return [block]


def _build_list(token: dict, ctx: _BuildContext, depth: int) -> list[dict]:
    """Notion has no list wrapper: each item is its own top-level block."""
    ordered = token.get("attrs", {}).get("ordered", False)
    blocks: list[dict] = []

    for item in token.get("children", []):
        item_type = item.get("type", "")
        if item_type == "task_list_item":
            checked = item.get("attrs", {}).get("checked", False)
            blocks.append(_build_list_item(item, "to_do", ctx, depth, checked=checked))
        elif item_type == "list_item":
            block_type = "numbered_list_item" if ordered else "bulleted_list_item"
            blocks.append(_build_list_item(item, block_type, ctx, depth))

    return blocks


def _build_list_item(
    token: dict,
    block_type: str,
    ctx: _BuildContext,
    depth: int,
    **extra: object,
) -> dict:
    rich_text: list[dict] = []
    nested: list[dict] = []

    for child in token.get("children", []):
        child_type = child.get("type", "")
        if child_type == "paragraph":
            rich_text.extend(build_rich_text(child.get("children", []), warnings=ctx.warnings))
        elif depth + 1 >= _MAX_NESTING_DEPTH:
            ctx.add_warning(
                "NESTING_DEPTH_EXCEEDED",
                f"Nesting depth exceeds {_MAX_NESTING_DEPTH} levels; nested content dropped.",
                depth=depth + 1,
            )
        else:
            nested.extend(_process_token(child, ctx, depth + 1))

    block = _text_block(block_type, split_rich_text(rich_text), **extra)
    if nested:
        block[block_type]["children"] = nested
    return block


def _build_code_block(token: dict, ctx: _BuildContext, depth: int) -> list[dict]:
    raw = token.get("raw", "")
    rich_text = split_rich_text([{"type": "text", "text": {"content": raw}}]) if raw else []
    return [{
        "object": "block",
        "type": "code",
        "code": {
            "rich_text": rich_text,
            "language": normalize_language(token.get("attrs", {}).get("info")),
            "caption": [],
        },
    }]


def _build_divider(token: dict, ctx: _BuildContext, depth: int) -> list[dict]:
    return [{"object": "block", "type": "divider", "divider": {}}]


def _build_block_math(token: dict, ctx: _BuildContext, depth: int) -> list[dict]:
    expression = token.get("raw", "").strip()
    if not expression:
        return []
    return [{
        "object": "block",
        "type": "equation",
        "equation": {"expression": expression},
    }]


def _build_table(token: dict, ctx: _BuildContext, depth: int) -> list[dict]:
    """Header cells come first, then body rows; short rows are padded."""
    rows: list[list[list[dict]]] = []

    for part in token.get("children", []):
        if part.get("type") == "table_head":
            rows.append(_row_cells(part.get("children", []), ctx))
        elif part.get("type") == "table_body":
            for row in part.get("children", []):
                rows.append(_row_cells(row.get("children", []), ctx))

    if not rows:
        return []

    width = max(len(cells) for cells in rows)
    for cells in rows:
        cells.extend([] for _ in range(width - len(cells)))

    return [{
        "object": "block",
        "type": "table",
        "table": {
            "table_width": width,
            "has_column_header": True,
            "has_row_header": False,
            "children": [
                {"object": "block", "type": "table_row", "table_row": {"cells": cells}}
                for cells in rows
            ],
        },
    }]


def _row_cells(cells: list[dict], ctx: _BuildContext) -> list[list[dict]]:
    return [
        split_rich_text(build_rich_text(cell.get("children", []), warnings=ctx.warnings))
        for cell in cells
    ]


def _build_image(token: dict, ctx: _BuildContext) -> list[dict]:
    """External URLs become image blocks; anything else stays as text."""
    url = token.get("attrs", {}).get("url", "")
    alt_text = extract_text(token.get("children", []))

    if urlparse(url).scheme in ("http", "https"):
        image: dict = {"type": "external", "external": {"url": url}}
        if alt_text:
            image["caption"] = [{"type": "text", "text": {"content": alt_text}}]
        return [{"object": "block", "type": "image", "image": image}]

    ctx.add_warning(
        "IMAGE_NOT_EXTERNAL",
        f"Image is not an http(s) URL and was kept as text: {url}",
        src=url,
    )
    return [_text_block("paragraph", build_rich_text([token]))]


def _handle_html_block(token: dict, ctx: _BuildContext, depth: int) -> list[dict]:
    ctx.add_warning(
        "HTML_BLOCK_SKIPPED",
        "HTML block was skipped (not supported by Notion).",
        raw=token.get("raw", "")[:200],
    )
    return []


_BlockHandler = Callable[[dict, _BuildContext, int], list[dict]]

_BLOCK_HANDLERS: dict[str, _BlockHandler] = {
    "heading": _build_heading,
    "paragraph": _build_paragraph,
    "block_quote": _build_block_quote,
    "list": _build_list,
    "block_code": _build_code_block,
    "thematic_break": _build_divider,
    "table": _build_table,
    "block_math": _build_block_math,
    "html_block": _handle_html_block,
}
