"""Tests for MarkdownToNotionConverter end-to-end."""

from __future__ import annotations

import pytest

from notionsync.config import SyncConfig
from notionsync.converter.md_to_notion import MarkdownToNotionConverter


def make_config(**kwargs):
    return SyncConfig(token="test-token", **kwargs)


def _get_rich_text_content(block):
    """Concatenated text content of a block's rich_text."""
    rich_text = block[block["type"]].get("rich_text", [])
    return "".join(
        seg.get("text", {}).get("content", "")
        if seg.get("type") == "text"
        else seg.get("equation", {}).get("expression", "")
        for seg in rich_text
    )


def _types(result):
    return [b["type"] for b in result.blocks]


# =========================================================================
# Headings
# =========================================================================


class TestHeadings:
    @pytest.mark.parametrize(("md", "expected"), [
        ("# A", "heading_1"),
        ("## A", "heading_2"),
        ("### A", "heading_3"),
    ])
    def test_levels_1_to_3(self, converter, md, expected):
        result = converter.convert(md)
        assert _types(result) == [expected]
        assert _get_rich_text_content(result.blocks[0]) == "A"

    def test_level_4_downgraded_by_default(self, converter):
        assert _types(converter.convert("#### Deep")) == ["heading_3"]

    def test_level_4_as_bold_paragraph(self):
        c = MarkdownToNotionConverter(make_config(heading_overflow="paragraph"))
        block = c.convert("##### Deep").blocks[0]
        assert block["type"] == "paragraph"
        assert block["paragraph"]["rich_text"][0]["annotations"]["bold"] is True


# =========================================================================
# Paragraphs and inline formatting
# =========================================================================


class TestInline:
    def test_plain_paragraph_has_no_annotations(self, converter):
        seg = converter.convert("hello").blocks[0]["paragraph"]["rich_text"][0]
        assert seg == {"type": "text", "text": {"content": "hello"}}

    def test_bold_italic_code_strike(self, converter):
        rich = converter.convert("**b** *i* `c` ~~s~~").blocks[0]["paragraph"]["rich_text"]
        annotated = {
            seg["text"]["content"]: seg["annotations"] for seg in rich if "annotations" in seg
        }
        assert annotated["b"]["bold"] is True
        assert annotated["i"]["italic"] is True
        assert annotated["c"]["code"] is True
        assert annotated["s"]["strikethrough"] is True

    def test_nested_emphasis_merges(self, converter):
        seg = converter.convert("***both***").blocks[0]["paragraph"]["rich_text"][0]
        assert seg["annotations"]["bold"] is True
        assert seg["annotations"]["italic"] is True

    def test_link_uses_text_link(self, converter):
        seg = converter.convert("[docs](https://example.com)").blocks[0]["paragraph"]["rich_text"][0]
        assert seg["text"] == {"content": "docs", "link": {"url": "https://example.com"}}

    def test_inline_math_becomes_equation(self, converter):
        rich = converter.convert("area $a^2$ here").blocks[0]["paragraph"]["rich_text"]
        assert {"type": "equation", "equation": {"expression": "a^2"}} in rich

    def test_softbreak_becomes_space(self, converter):
        assert _get_rich_text_content(converter.convert("one\ntwo").blocks[0]) == "one two"

    def test_long_paragraph_split_at_2000(self, converter):
        rich = converter.convert("x" * 4500).blocks[0]["paragraph"]["rich_text"]
        assert [len(s["text"]["content"]) for s in rich] == [2000, 2000, 500]


# =========================================================================
# Block structures
# =========================================================================


class TestBlocks:
    def test_bulleted_list(self, converter):
        result = converter.convert("- a\n- b\n")
        assert _types(result) == ["bulleted_list_item", "bulleted_list_item"]

    def test_numbered_list(self, converter):
        assert _types(converter.convert("1. a\n2. b\n")) == ["numbered_list_item"] * 2

    def test_nested_list_children(self, converter):
        block = converter.convert("- parent\n  - child\n").blocks[0]
        children = block["bulleted_list_item"]["children"]
        assert [c["type"] for c in children] == ["bulleted_list_item"]
        assert _get_rich_text_content(children[0]) == "child"

    def test_task_list(self, converter):
        blocks = converter.convert("- [x] done\n- [ ] todo\n").blocks
        assert [b["type"] for b in blocks] == ["to_do", "to_do"]
        assert [b["to_do"]["checked"] for b in blocks] == [True, False]

    def test_code_block_language(self, converter):
        block = converter.convert("```py\nprint(1)\n```").blocks[0]
        assert block["type"] == "code"
        assert block["code"]["language"] == "python"
        assert block["code"]["rich_text"][0]["text"]["content"] == "print(1)"

    def test_quote(self, converter):
        block = converter.convert("> quoted").blocks[0]
        assert block["type"] == "quote"
        assert _get_rich_text_content(block) == "quoted"

    def test_divider(self, converter):
        assert _types(converter.convert("a\n\n---\n\nb")) == ["paragraph", "divider", "paragraph"]

    def test_table(self, converter):
        block = converter.convert("| h1 | h2 |\n|----|----|\n| a | b |\n").blocks[0]
        table = block["table"]
        assert table["table_width"] == 2
        assert table["has_column_header"] is True
        assert len(table["children"]) == 2

    def test_block_math(self, converter):
        block = converter.convert("$$\nE = mc^2\n$$").blocks[0]
        assert block == {"object": "block", "type": "equation", "equation": {"expression": "E = mc^2"}}

    def test_external_image(self, converter):
        block = converter.convert("![logo](https://example.com/logo.png)").blocks[0]
        assert block["type"] == "image"
        assert block["image"]["external"]["url"] == "https://example.com/logo.png"

    def test_local_image_kept_as_text_with_warning(self, converter):
        result = converter.convert("![diagram](./img/d.png)")
        assert _types(result) == ["paragraph"]
        assert [w.code for w in result.warnings] == ["IMAGE_NOT_EXTERNAL"]

    def test_cross_file_link_becomes_plain_text(self, converter):
        result = converter.convert("See [setup](./setup.md) and [site](https://example.com).")
        rich_text = result.blocks[0]["paragraph"]["rich_text"]
        assert "".join(seg["text"]["content"] for seg in rich_text) == "See setup and site."
        assert [seg["text"]["link"] for seg in rich_text if "link" in seg["text"]] == [
            {"url": "https://example.com"},
        ]
        assert [w.code for w in result.warnings] == ["LINK_DROPPED"]

    def test_html_block_skipped_with_warning(self, converter):
        result = converter.convert("<div>\nraw\n</div>\n\nafter")
        assert _types(result) == ["paragraph"]
        assert result.warnings[0].code == "HTML_BLOCK_SKIPPED"


# =========================================================================
# Document-level behaviour
# =========================================================================


class TestDocument:
    def test_empty_markdown(self, converter):
        result = converter.convert("")
        assert result.blocks == []
        assert result.warnings == []

    def test_whitespace_only(self, converter):
        assert converter.convert("\n\n   \n").blocks == []

    def test_order_preserved(self, converter):
        md = "# T\n\npara\n\n- item\n\n```\ncode\n```\n"
        assert _types(converter.convert(md)) == ["heading_1", "paragraph", "bulleted_list_item", "code"]

    def test_deterministic(self, converter):
        md = "# T\n\n**x** [y](https://z.io)\n"
        assert converter.convert(md).blocks == converter.convert(md).blocks

    def test_every_block_is_unpersisted(self, converter):
        for block in converter.convert("# a\n\nb\n\n- c\n").blocks:
            assert block["object"] == "block"
            assert "id" not in block
