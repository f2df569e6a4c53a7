"""Order-independent comparisons shared by the feed and preference controllers."""

from collections.abc import Iterable

from research_feed.models.preferences import PreferenceDocument

# Notification fields that count towards unsaved changes. Frequency and
# WhatsApp are saved with the document but never make it dirty.
TRACKED_NOTIFICATION_FIELDS = ("email_enabled", "push_enabled")


def sets_differ(left: Iterable[str], right: Iterable[str]) -> bool:
    """True when the two collections hold different members."""
    return set(left) != set(right)


def covers_all(selected: Iterable[str], catalog: Iterable[str]) -> bool:
    """True when every catalog entry is selected (False for an empty catalog)."""
    catalog_set = set(catalog)
    return bool(catalog_set) and catalog_set <= set(selected)


def changed_preference_fields(
    baseline: PreferenceDocument, working: PreferenceDocument
) -> list[str]:
    """
    Names of the tracked fields where ``working`` differs from ``baseline``.

    Notification fields are reported as ``notifications.<field>``.
    """
    changed = []
    if sets_differ(baseline.subspecialties, working.subspecialties):
        changed.append("subspecialties")
    if sets_differ(baseline.research_types, working.research_types):
        changed.append("research_types")
    for field in TRACKED_NOTIFICATION_FIELDS:
        if getattr(baseline.notifications, field) != getattr(
            working.notifications, field
        ):
            changed.append(f"notifications.{field}")
    return changed


def preferences_differ(
    baseline: PreferenceDocument | None, working: PreferenceDocument | None
) -> bool:
    if baseline is None or working is None:
        return False
    return bool(changed_preference_fields(baseline, working))
