"""Unit tests for BlockAPI and PageAPI.

All HTTP calls go through a transport mock.
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from notionsync.errors import BatchLimitError
from notionsync.notion_api.blocks import BlockAPI
from notionsync.notion_api.pages import PageAPI, title_property

# ===========================================================================
# BlockAPI
# ===========================================================================


class TestBlockAPI:
    def test_iter_children_paginates_children_endpoint(self):
        t = MagicMock()
        t.paginate.return_value = iter([{"id": "c1"}, {"id": "c2"}])
        api = BlockAPI(t)

        result = list(api.iter_children("blk-1", page_size=25))

        t.paginate.assert_called_once_with("/blocks/blk-1/children", page_size=25)
        assert result == [{"id": "c1"}, {"id": "c2"}]

    def test_iter_children_default_page_size(self):
        t = MagicMock()
        t.paginate.return_value = iter([])
        BlockAPI(t).iter_children("blk-1")
        t.paginate.assert_called_once_with("/blocks/blk-1/children", page_size=100)

    def test_delete(self):
        t = MagicMock()
        t.request.return_value = {"id": "blk-2", "archived": True}
        result = BlockAPI(t).delete("blk-2")
        t.request.assert_called_once_with("DELETE", "/blocks/blk-2")
        assert result["archived"] is True

    def test_append_children(self):
        t = MagicMock()
        t.request.return_value = {"results": []}
        children = [{"type": "divider", "divider": {}}]

        BlockAPI(t).append_children("blk-3", children)

        t.request.assert_called_once_with(
            "PATCH", "/blocks/blk-3/children", json={"children": children},
        )

    def test_append_exactly_100_allowed(self):
        t = MagicMock()
        BlockAPI(t).append_children("blk-4", [{"type": "divider"}] * 100)
        assert t.request.call_count == 1

    def test_append_over_limit_raises_without_request(self):
        t = MagicMock()
        with pytest.raises(BatchLimitError) as exc_info:
            BlockAPI(t).append_children("blk-5", [{"type": "divider"}] * 101)
        t.request.assert_not_called()
        assert exc_info.value.context == {"block_id": "blk-5", "count": 101}


# ===========================================================================
# PageAPI
# ===========================================================================


class TestPageAPI:
    def test_update_properties(self):
        t = MagicMock()
        t.request.return_value = {"id": "pg-4"}
        props = title_property("New title")

        result = PageAPI(t).update("pg-4", props)

        t.request.assert_called_once_with("PATCH", "/pages/pg-4", json={"properties": props})
        assert result == {"id": "pg-4"}


class TestTitleProperty:
    def test_shape(self):
        assert title_property("Hello") == {
            "title": {
                "type": "title",
                "title": [{"type": "text", "text": {"content": "Hello"}}],
            },
        }

    def test_text_kept_verbatim(self):
        prop = title_property("**bold** & <tags>")
        assert prop["title"]["title"][0]["text"]["content"] == "**bold** & <tags>"
