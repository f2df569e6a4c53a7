"""
Filter state for the paper feed.

FilterState is an immutable value object; every change goes through
set_field(), which returns a new state and keeps the date-range invariant.
Pagination is not part of the filter state.
"""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from research_feed.models.enums import DatePreset, SortOrder
from research_feed.utils.errors import ValidationFailure

# Multi-valued fields, in the order they are encoded on the wire.
MULTI_VALUE_FIELDS = ("subspecialties", "research_types", "journals")

# camelCase names used by the web client
FIELD_ALIASES = {
    "researchTypes": "research_types",
    "datePreset": "date_preset",
    "dateFrom": "date_from",
    "dateTo": "date_to",
}


class FilterState(BaseModel):
    """User's current filter, sort and date selection."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    subspecialties: frozenset[str] = Field(default_factory=frozenset)
    research_types: frozenset[str] = Field(default_factory=frozenset)
    journals: frozenset[str] = Field(default_factory=frozenset)
    sort: SortOrder = Field(default=SortOrder.DATE)
    date_preset: DatePreset = Field(default=DatePreset.LAST_7_DAYS)
    date_from: date | None = None
    date_to: date | None = None

    @model_validator(mode="after")
    def check_date_range(self) -> "FilterState":
        if self.date_preset != DatePreset.CUSTOM and (
            self.date_from is not None or self.date_to is not None
        ):
            raise ValueError("date_from/date_to require date_preset='custom'")
        if (
            self.date_from is not None
            and self.date_to is not None
            and self.date_from > self.date_to
        ):
            raise ValueError("date_from must not be after date_to")
        return self


def resolve_field(key: str) -> str:
    """Map a (possibly camelCase) key to a FilterState field name."""
    field = FIELD_ALIASES.get(key, key)
    if field not in FilterState.model_fields:
        raise ValidationFailure(
            f"Unknown filter field '{key}'",
            suggestion=f"Use one of: {', '.join(FilterState.model_fields)}",
        )
    return field


def _rebuild(data: dict[str, Any], field: str) -> FilterState:
    try:
        return FilterState.model_validate(data)
    except PydanticValidationError as e:
        errors = "; ".join(err["msg"] for err in e.errors())
        raise ValidationFailure(f"Invalid value for '{field}': {errors}") from e


def set_field(state: FilterState, key: str, value: Any) -> FilterState:
    """
    Return a copy of ``state`` with one field replaced.

    Switching ``date_preset`` to anything other than ``custom`` also clears
    ``date_from`` and ``date_to``.

    Raises:
        ValidationFailure: unknown key, or a value the state cannot hold
    """
    field = resolve_field(key)
    data = state.model_dump()
    data[field] = value

    if field == "date_preset" and value != DatePreset.CUSTOM:
        data["date_from"] = None
        data["date_to"] = None

    return _rebuild(data, field)


def with_custom_range(
    state: FilterState, date_from: date | None, date_to: date | None
) -> FilterState:
    """Switch to a custom date range in one transition."""
    data = state.model_dump()
    data.update(date_preset=DatePreset.CUSTOM, date_from=date_from, date_to=date_to)
    return _rebuild(data, "date_preset")


def cleared_date_filter(state: FilterState) -> FilterState:
    """Drop any date restriction (preset 'all')."""
    return set_field(state, "date_preset", DatePreset.ALL)


class FilterOptions(BaseModel):
    """Catalog of values the filter controls can offer."""

    model_config = ConfigDict(extra="ignore")

    subspecialties: list[str] = Field(default_factory=list)
    research_types: list[str] = Field(default_factory=list)
    journals: list[str] = Field(default_factory=list)

    def for_field(self, key: str) -> list[str]:
        field = resolve_field(key)
        if field not in MULTI_VALUE_FIELDS:
            raise ValidationFailure(f"'{key}' is not a multi-valued filter")
        return list(getattr(self, field))
