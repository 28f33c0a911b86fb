"""Markdown-to-Notion conversion pipeline.

:class:`MarkdownToNotionConverter` runs three stages:

1. **Parse**: mistune parses raw Markdown into an AST.
2. **Normalize**: :class:`ASTNormalizer` maps token types to canonical names.
3. **Build**: :func:`build_blocks` turns tokens into Notion block dicts.

The converter is pure: no I/O, no network, same output for the same input.
"""

from __future__ import annotations

from notionsync.config import SyncConfig
from notionsync.converter.ast_normalizer import ASTNormalizer
from notionsync.converter.block_builder import build_blocks
from notionsync.models import ConversionResult


class MarkdownToNotionConverter:
    """Convert Markdown text to unpersisted Notion block payloads.

    Examples
    --------
    >>> converter = MarkdownToNotionConverter(SyncConfig())
    >>> result = converter.convert("# Hello\\n\\nWorld")
    >>> [b["type"] for b in result.blocks]
    ['heading_1', 'paragraph']
    """

    def __init__(self, config: SyncConfig) -> None:
        self._config = config
        self._normalizer = ASTNormalizer()

    def convert(self, markdown: str) -> ConversionResult:
        """Convert *markdown* into blocks plus any conversion warnings."""
        tokens = self._normalizer.parse(markdown)
        blocks, warnings = build_blocks(tokens, self._config)
        return ConversionResult(blocks=blocks, warnings=warnings)
