"""
Formatters for research-feed CLI output.

Provides consistent formatting for Markdown and JSON outputs.
"""

from .base import BaseFormatter, get_formatter
from .json_formatter import JSONFormatter
from .markdown import MarkdownFormatter

__all__ = [
    "BaseFormatter",
    "JSONFormatter",
    "MarkdownFormatter",
    "get_formatter",
]
