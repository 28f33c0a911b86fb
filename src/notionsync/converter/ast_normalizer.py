"""Parse Markdown with mistune and reduce the AST to the tokens we build from.

mistune v3's AST renderer emits a few structural token types (``block_text``
for tight list items, ``blank_line``, ``raw`` for escaped text...) that the
block builder should not have to care about.  :class:`ASTNormalizer` renames
or drops them and keeps only ``type``, ``attrs``, ``raw`` and ``children``.
"""

from __future__ import annotations

import mistune

# mistune type -> canonical type.  Types not listed here are dropped.
_CANONICAL: dict[str, str] = {
    # blocks
    "heading": "heading",
    "paragraph": "paragraph",
    "block_text": "paragraph",
    "block_quote": "block_quote",
    "list": "list",
    "list_item": "list_item",
    "task_list_item": "task_list_item",
    "block_code": "block_code",
    "thematic_break": "thematic_break",
    "block_math": "block_math",
    "block_html": "html_block",
    "table": "table",
    "table_head": "table_head",
    "table_body": "table_body",
    "table_row": "table_row",
    "table_cell": "table_cell",
    # inlines
    "text": "text",
    "raw": "text",
    "strong": "strong",
    "emphasis": "emphasis",
    "strikethrough": "strikethrough",
    "codespan": "codespan",
    "link": "link",
    "image": "image",
    "inline_math": "inline_math",
    "inline_html": "html_inline",
    "softbreak": "softbreak",
    "linebreak": "linebreak",
}

# Canonical types whose payload is ``raw`` text rather than ``children``.
_LEAF_TYPES = frozenset({
    "text", "softbreak", "linebreak", "codespan", "inline_math",
    "block_code", "block_math", "html_block", "html_inline",
})

_PLUGINS = ["strikethrough", "table", "task_lists", "url", "math"]


class ASTNormalizer:
    """Parse Markdown and return canonical tokens."""

    def __init__(self) -> None:
        self._parser = mistune.create_markdown(renderer="ast", plugins=_PLUGINS)

    def parse(self, markdown: str) -> list[dict]:
        tokens = self._parser(markdown)
        if not isinstance(tokens, list):
            return []
        return _normalize_all(tokens)


def _normalize_all(tokens: list[dict]) -> list[dict]:
    normalized = (_normalize(token) for token in tokens)
    return [token for token in normalized if token is not None]


def _normalize(token: dict) -> dict | None:
    kind = _CANONICAL.get(token.get("type", ""))
    if kind is None:
        return None

    out: dict = {"type": kind}
    if token.get("attrs"):
        out["attrs"] = dict(token["attrs"])

    if kind in _LEAF_TYPES:
        if "raw" in token:
            raw = token["raw"]
            out["raw"] = raw.removesuffix("\n") if kind == "block_code" else raw
        elif kind not in ("softbreak", "linebreak"):
            out["raw"] = ""
        return out

    if token.get("children"):
        out["children"] = _normalize_all(token["children"])
    return out
