"""Pydantic models for the research feed client."""

from .enums import (
    DatePreset,
    FeedSource,
    FeedStatus,
    NotificationFrequency,
    ResponseFormat,
    SortOrder,
    SyncStatus,
)
from .filters import (
    FilterOptions,
    FilterState,
    cleared_date_filter,
    set_field,
    with_custom_range,
)
from .papers import FeedPage, FeedRow, Paper, PaperSummary
from .preferences import NotificationSettings, PreferenceDocument
from .taxonomy import RESEARCH_TYPES, SUBSPECIALTIES, TaxonomyCatalog, TaxonomyOption

__all__ = [
    # Enums
    "DatePreset",
    "FeedSource",
    "FeedStatus",
    "NotificationFrequency",
    "ResponseFormat",
    "SortOrder",
    "SyncStatus",
    # Filters
    "FilterOptions",
    "FilterState",
    "cleared_date_filter",
    "set_field",
    "with_custom_range",
    # Papers
    "FeedPage",
    "FeedRow",
    "Paper",
    "PaperSummary",
    # Preferences
    "NotificationSettings",
    "PreferenceDocument",
    # Taxonomy
    "RESEARCH_TYPES",
    "SUBSPECIALTIES",
    "TaxonomyCatalog",
    "TaxonomyOption",
]
