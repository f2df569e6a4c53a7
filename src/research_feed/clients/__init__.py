"""HTTP clients for the research feed backend."""

from .feed_api import ResearchFeedClient

__all__ = ["ResearchFeedClient"]
