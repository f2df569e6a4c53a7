"""
Base formatter for research-feed CLI output.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from research_feed.models.enums import ResponseFormat

if TYPE_CHECKING:
    from research_feed.services.feed_controller import FeedController
    from research_feed.services.preferences import PreferenceSyncController


class BaseFormatter(ABC):
    """Abstract base class for all formatters."""

    @abstractmethod
    def format_feed(self, controller: "FeedController") -> str:
        """Format the rows and pagination state of a loaded feed."""
        ...

    @abstractmethod
    def format_preferences(self, controller: "PreferenceSyncController") -> str:
        """Format the working preference document and its pending changes."""
        ...

    @abstractmethod
    def format_error(self, message: str) -> str:
        """Format an error message."""
        ...


def get_formatter(response_format: ResponseFormat | str) -> BaseFormatter:
    """Return the formatter for ``response_format``."""
    from .json_formatter import JSONFormatter
    from .markdown import MarkdownFormatter

    if ResponseFormat(response_format) == ResponseFormat.JSON:
        return JSONFormatter()
    return MarkdownFormatter()
