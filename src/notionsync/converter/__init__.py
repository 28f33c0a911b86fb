"""Markdown → Notion conversion.

- :class:`MarkdownToNotionConverter`: Markdown text → Notion blocks.
- :class:`ASTNormalizer`: parse and normalise Markdown to canonical tokens.
- :func:`build_blocks`: canonical tokens → Notion block dicts.
- :func:`build_callout`: banner block for use as a preamble.
- :func:`build_rich_text` / :func:`split_rich_text`: inline helpers.
"""

from notionsync.converter.ast_normalizer import ASTNormalizer
from notionsync.converter.block_builder import build_blocks, build_callout
from notionsync.converter.md_to_notion import MarkdownToNotionConverter
from notionsync.converter.rich_text import build_rich_text, split_rich_text

__all__ = [
    "ASTNormalizer",
    "MarkdownToNotionConverter",
    "build_blocks",
    "build_callout",
    "build_rich_text",
    "split_rich_text",
]
