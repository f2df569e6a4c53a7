"""
JSON formatter for research-feed CLI output.
"""

import json
from typing import TYPE_CHECKING, Any

from .base import BaseFormatter

if TYPE_CHECKING:
    from research_feed.services.feed_controller import FeedController
    from research_feed.services.preferences import PreferenceSyncController


class JSONFormatter(BaseFormatter):
    """Formatter for JSON output."""

    def __init__(self, indent: int = 2, ensure_ascii: bool = False):
        self.indent = indent
        self.ensure_ascii = ensure_ascii

    def _dumps(self, data: Any) -> str:
        return json.dumps(data, indent=self.indent, ensure_ascii=self.ensure_ascii)

    def format_feed(self, controller: "FeedController") -> str:
        first, last = controller.visible_range
        return self._dumps(
            {
                "source": controller.source.value,
                "status": controller.status.value,
                "error": controller.error,
                "page": controller.current_page,
                "page_size": controller.page_size,
                "total": controller.total_items,
                "total_pages": controller.total_pages,
                "showing": [first, last],
                "pages": controller.page_window,
                "papers": [row.model_dump(mode="json") for row in controller.rows],
            }
        )

    def format_preferences(self, controller: "PreferenceSyncController") -> str:
        working = controller.local_working
        return self._dumps(
            {
                "status": controller.status.value,
                "error": controller.error,
                "dirty": controller.dirty,
                "changed": controller.changed_fields,
                "preferences": working.model_dump(mode="json") if working else None,
            }
        )

    def format_error(self, message: str) -> str:
        return self._dumps({"error": message})
