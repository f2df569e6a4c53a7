"""Serialize a FilterState plus pagination into the feed query."""

from dataclasses import dataclass
from urllib.parse import quote

from research_feed.models.enums import DatePreset
from research_feed.models.filters import MULTI_VALUE_FIELDS, FilterState
from research_feed.utils.errors import ValidationFailure


@dataclass(frozen=True)
class FeedQuery:
    """Ordered query parameters for the feed and favorites endpoints."""

    params: tuple[tuple[str, str], ...]

    def to_query_string(self) -> str:
        """Percent-escape every value and join as ``name=value&...``."""
        return "&".join(f"{name}={quote(value, safe='')}" for name, value in self.params)

    def values(self, name: str) -> list[str]:
        return [value for key, value in self.params if key == name]


def encode_query(filters: FilterState, page: int, page_size: int) -> FeedQuery:
    """
    Build the remote query for one page of results.

    Parameters are always emitted in the same order: page, page_size,
    subspecialties, research_types, journals, sort, date_preset, date_from,
    date_to. Values of multi-valued filters are sorted so equal selections
    encode identically.

    Raises:
        ValidationFailure: page or page_size below 1
    """
    if page < 1:
        raise ValidationFailure(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValidationFailure(f"page_size must be >= 1, got {page_size}")

    params: list[tuple[str, str]] = [
        ("page", str(page)),
        ("page_size", str(page_size)),
    ]

    for field in MULTI_VALUE_FIELDS:
        for value in sorted(getattr(filters, field)):
            params.append((field, value))

    params.append(("sort", filters.sort.value))
    params.append(("date_preset", filters.date_preset.value))

    if filters.date_preset == DatePreset.CUSTOM:
        if filters.date_from is not None:
            params.append(("date_from", filters.date_from.isoformat()))
        if filters.date_to is not None:
            params.append(("date_to", filters.date_to.isoformat()))

    return FeedQuery(params=tuple(params))
