"""Common utilities shared across services."""

from .diffing import changed_preference_fields, covers_all, preferences_differ, sets_differ

__all__ = [
    "changed_preference_fields",
    "covers_all",
    "preferences_differ",
    "sets_differ",
]
