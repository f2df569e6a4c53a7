"""
Markdown formatter for research-feed CLI output.
"""

from typing import TYPE_CHECKING

from research_feed.models.enums import FeedSource, FeedStatus
from research_feed.models.papers import FeedRow

from .base import BaseFormatter

if TYPE_CHECKING:
    from research_feed.services.feed_controller import FeedController
    from research_feed.services.preferences import PreferenceSyncController

MAX_AUTHORS = 3


def format_authors(authors: list[str]) -> str:
    if not authors:
        return "Unknown authors"
    if len(authors) > MAX_AUTHORS:
        return ", ".join(authors[:MAX_AUTHORS]) + " et al."
    return ", ".join(authors)


class MarkdownFormatter(BaseFormatter):
    """Formatter for Markdown output."""

    def format_row(self, row: FeedRow, index: int) -> str:
        star = "★ " if row.is_favorite else ""
        lines = [f"{index}. {star}**{row.title}** (`{row.id}`)"]

        meta = [format_authors(row.authors)]
        if row.journal:
            meta.append(f"*{row.journal}*")
        if row.publication_date:
            meta.append(row.publication_date.isoformat())
        lines.append(f"   {' · '.join(meta)}")

        if row.tags:
            lines.append(f"   Tags: {', '.join(row.tags)}")
        if row.abstract:
            lines.append(f"   {row.abstract}")
        if row.summary and row.summary.key_points:
            for point in row.summary.key_points:
                lines.append(f"   - {point}")
        if row.link:
            lines.append(f"   <{row.link}>")
        return "\n".join(lines)

    def format_feed(self, controller: "FeedController") -> str:
        title = "My Favorites" if controller.source == FeedSource.FAVORITES else "My Research Feed"
        lines = [f"# {title}", ""]

        if controller.status == FeedStatus.FAILED and controller.error:
            lines.extend([f"> {controller.error}", ""])

        if not controller.rows:
            lines.append("No papers found.")
            return "\n".join(lines)

        first, last = controller.visible_range
        lines.extend([f"Showing {first}-{last} of {controller.total_items}", ""])

        for offset, row in enumerate(controller.rows):
            lines.append(self.format_row(row, first + offset))
            lines.append("")

        if controller.total_pages > 1:
            pages = [
                f"[{token}]" if token == controller.current_page else str(token)
                for token in controller.page_window
            ]
            lines.append(f"Pages: {' '.join(pages)}")

        return "\n".join(lines).rstrip()

    def format_preferences(self, controller: "PreferenceSyncController") -> str:
        working = controller.local_working
        if working is None:
            return self.format_error(controller.error or "Preferences not loaded")

        lines = ["# Preferences", ""]
        for kind, heading in (
            ("subspecialties", "Subspecialties"),
            ("research_types", "Research types"),
        ):
            catalog = controller.catalogs.get(kind)
            selected = working.selected(kind)
            labels = [catalog.label_for(key) if catalog else key for key in selected]
            lines.append(f"**{heading}:** {', '.join(labels) or 'none'}")

        notifications = working.notifications
        channels = [
            name
            for name, enabled in (
                ("email", notifications.email_enabled),
                ("push", notifications.push_enabled),
                ("whatsapp", notifications.whatsapp_enabled),
            )
            if enabled
        ]
        lines.append(
            f"**Notifications:** {', '.join(channels) or 'off'} "
            f"({notifications.frequency.value})"
        )

        if controller.dirty:
            lines.extend(["", f"Unsaved changes: {', '.join(controller.changed_fields)}"])
        return "\n".join(lines)

    def format_error(self, message: str) -> str:
        return f"**Error:** {message}"
