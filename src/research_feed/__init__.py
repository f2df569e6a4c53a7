"""
Research Feed.

Client library for browsing a curated feed of research-paper summaries:
filtering, pagination, favorites and preference syncing.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("research-feed")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = ["__version__"]
