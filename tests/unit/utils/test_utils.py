"""Unit tests for notionsync.utils: chunk_children, split_string, redact."""

from __future__ import annotations

import pytest

from notionsync.utils import chunk_children, redact, split_string

# ---------------------------------------------------------------------------
# chunk_children
# ---------------------------------------------------------------------------


class TestChunkChildren:
    """Example-based checks; the algebraic properties live in test_properties.py."""

    def test_empty_list(self):
        assert chunk_children([]) == []

    def test_under_limit(self):
        blocks = [{"type": "paragraph"}] * 5
        assert chunk_children(blocks) == [blocks]

    def test_at_limit(self):
        blocks = [{"type": "paragraph", "i": i} for i in range(100)]
        result = chunk_children(blocks)
        assert len(result) == 1
        assert len(result[0]) == 100

    def test_one_over_limit(self):
        blocks = [{"type": "paragraph", "i": i} for i in range(101)]
        result = chunk_children(blocks)
        assert [len(b) for b in result] == [100, 1]
        assert result[1][0]["i"] == 100

    def test_custom_size(self):
        blocks = [{"i": i} for i in range(7)]
        assert [len(b) for b in chunk_children(blocks, size=3)] == [3, 3, 1]

    @pytest.mark.parametrize("size", [0, -1])
    def test_invalid_size_raises(self, size):
        with pytest.raises(ValueError, match="size"):
            chunk_children([{"i": 0}], size=size)

    def test_does_not_copy_blocks(self):
        block = {"type": "paragraph"}
        assert chunk_children([block])[0][0] is block


# ---------------------------------------------------------------------------
# split_string
# ---------------------------------------------------------------------------


class TestSplitString:
    def test_empty_string(self):
        assert split_string("") == []

    def test_short_string(self):
        assert split_string("hello") == ["hello"]

    def test_exact_limit(self):
        assert split_string("a" * 2000) == ["a" * 2000]

    def test_over_limit(self):
        parts = split_string("a" * 4001)
        assert [len(p) for p in parts] == [2000, 2000, 1]

    def test_unicode_is_split_by_code_point(self):
        text = "\U0001f600" * 5
        assert split_string(text, 2) == ["\U0001f600" * 2, "\U0001f600" * 2, "\U0001f600"]

    def test_invalid_limit_raises(self):
        with pytest.raises(ValueError):
            split_string("abc", 0)


# ---------------------------------------------------------------------------
# redact
# ---------------------------------------------------------------------------


class TestRedact:
    def test_authorization_header_redacted(self):
        assert redact({"Authorization": "Bearer ntn_abc123"}) == {
            "Authorization": "Bearer <redacted>",
        }

    def test_token_in_nested_string_masked(self):
        token = "secret_abcdef9876"
        payload = {"request_body": {"note": f"leaked {token} here", "items": [token]}}

        result = redact(payload, token)

        assert token not in str(result)
        assert result["request_body"]["note"] == "leaked <redacted:...9876> here"

    def test_sensitive_non_string_value_masked(self):
        assert redact({"api_key": 12345}) == {"api_key": "<redacted>"}

    def test_input_not_mutated(self):
        payload = {"Authorization": "Bearer x", "nested": {"password": "p"}}
        redact(payload)
        assert payload == {"Authorization": "Bearer x", "nested": {"password": "p"}}

    def test_plain_values_kept(self):
        payload = {"method": "PATCH", "status": 200, "children": [{"type": "divider"}]}
        assert redact(payload, "tok_1234") == payload
