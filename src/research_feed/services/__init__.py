"""Feed query and reconciliation services."""

from .favorites import FavoriteService, FavoriteSet
from .feed_controller import FeedController, enrich_rows
from .pagination import ELLIPSIS, page_window
from .preferences import PreferenceSyncController
from .query import FeedQuery, encode_query

__all__ = [
    "ELLIPSIS",
    "FavoriteService",
    "FavoriteSet",
    "FeedController",
    "FeedQuery",
    "PreferenceSyncController",
    "encode_query",
    "enrich_rows",
    "page_window",
]
