"""Enum definitions for filter values, sources and controller states."""

from enum import Enum, StrEnum


class SortOrder(StrEnum):
    """Sort orders understood by the feed endpoint."""

    DATE = "date"  # newest first
    DATE_ASC = "date_asc"
    TITLE = "title"
    TITLE_DESC = "title_desc"
    JOURNAL = "journal"


class DatePreset(StrEnum):
    """Publication date windows understood by the feed endpoint."""

    TODAY = "today"
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_3_MONTHS = "3m"
    LAST_6_MONTHS = "6m"
    LAST_12_MONTHS = "12m"
    ALL = "all"
    CUSTOM = "custom"


class NotificationFrequency(StrEnum):
    """How often preference notifications are delivered."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


class FeedSource(StrEnum):
    """Remote listing a FeedController pages through."""

    FEED = "feed"
    FAVORITES = "favorites"


class ResponseFormat(str, Enum):
    """Output format for CLI responses."""

    MARKDOWN = "markdown"
    JSON = "json"


class FeedStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class SyncStatus(StrEnum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    SAVING = "saving"
    FAILED = "failed"
