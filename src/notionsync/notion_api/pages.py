"""Page API wrapper for the Notion API."""

from __future__ import annotations

from typing import Any

from .transport import NotionTransport


def title_property(title: str) -> dict[str, Any]:
    """Build the ``properties`` payload that sets a page's title to *title*."""
    return {
        "title": {
            "type": "title",
            "title": [
                {"type": "text", "text": {"content": title}},
            ],
        },
    }


class PageAPI:
    """Synchronous wrapper for the Notion Pages API.

    Parameters
    ----------
    transport:
        A configured :class:`NotionTransport` instance.
    """

    def __init__(self, transport: NotionTransport) -> None:
        self._transport = transport

    def update(self, page_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        """Update page properties.

        Only the properties present in *properties* are changed.  Returns
        the updated page object.
        """
        return self._transport.request(
            "PATCH", f"/pages/{page_id}", json={"properties": properties}
        )
