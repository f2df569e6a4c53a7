"""
Preference sync controller.

Keeps two copies of the user's preference document: the last state the
server acknowledged and a local working copy that edits go to. Whether
there is anything to save is derived from the two on every read.
"""

from datetime import datetime, timezone
import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError as PydanticValidationError

from research_feed.models.enums import SyncStatus
from research_feed.models.preferences import (
    PREFERENCE_KINDS,
    NotificationSettings,
    PreferenceDocument,
)
from research_feed.models.taxonomy import RESEARCH_TYPES, SUBSPECIALTIES, TaxonomyCatalog
from research_feed.services.common.diffing import (
    changed_preference_fields,
    covers_all,
    preferences_differ,
)
from research_feed.utils.errors import ResearchFeedError, ValidationFailure

if TYPE_CHECKING:
    from research_feed.clients.feed_api import ResearchFeedClient

logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load preferences"
SAVE_ERROR_MESSAGE = "Failed to save preferences"


class PreferenceSyncController:
    """Load, edit and save the remote preference document."""

    def __init__(
        self,
        client: "ResearchFeedClient",
        catalogs: dict[str, TaxonomyCatalog] | None = None,
    ):
        """
        Args:
            client: Backend client
            catalogs: Canonical option catalog per kind; defaults to the
                bundled subspecialty and research type catalogs
        """
        self.client = client
        self.catalogs = catalogs or {
            "subspecialties": SUBSPECIALTIES,
            "research_types": RESEARCH_TYPES,
        }
        self.remote_snapshot: PreferenceDocument | None = None
        self.local_working: PreferenceDocument | None = None
        self.status = SyncStatus.IDLE
        self.error: str | None = None

    # -------------------- Derived state --------------------

    @property
    def dirty(self) -> bool:
        return preferences_differ(self.remote_snapshot, self.local_working)

    @property
    def changed_fields(self) -> list[str]:
        if self.remote_snapshot is None or self.local_working is None:
            return []
        return changed_preference_fields(self.remote_snapshot, self.local_working)

    @property
    def can_save(self) -> bool:
        return self.dirty and self.status not in (SyncStatus.LOADING, SyncStatus.SAVING)

    # -------------------- Remote --------------------

    async def load(self) -> bool:
        """Fetch the document and reset both copies to it."""
        self.status = SyncStatus.LOADING
        try:
            document = await self.client.get_preferences()
        except ResearchFeedError as e:
            logger.error(f"Loading preferences failed: {e}")
            self.status = SyncStatus.FAILED
            self.error = LOAD_ERROR_MESSAGE
            return False

        self.remote_snapshot = document.model_copy(deep=True)
        self.local_working = document.model_copy(deep=True)
        self.status = SyncStatus.READY
        self.error = None
        return True

    async def save(self, force: bool = False) -> bool:
        """
        Submit the working copy in full.

        Without ``force`` nothing is sent when there are no tracked changes.
        On failure the working copy is kept as is so the save can be retried.

        Returns:
            True if the server now holds the working copy
        """
        working = self._working()
        if not force and not self.dirty:
            logger.info("No preference changes to save")
            return True

        payload = self._normalized(working)
        self.status = SyncStatus.SAVING
        try:
            await self.client.update_preferences(payload)
        except ResearchFeedError as e:
            logger.error(f"Saving preferences failed: {e}")
            self.status = SyncStatus.FAILED
            self.error = SAVE_ERROR_MESSAGE
            return False

        self.remote_snapshot = payload.model_copy(deep=True)
        self.local_working = self._normalized(self._working())
        self.status = SyncStatus.READY
        self.error = None
        logger.info("Preferences saved")
        return True

    # -------------------- Local edits --------------------

    def toggle(self, kind: str, key: str) -> bool:
        """
        Add or remove one key of ``kind``.

        Returns:
            True if the key is selected afterwards
        """
        working = self._working()
        selected = list(working.selected(self._check_kind(kind)))
        if key in selected:
            selected.remove(key)
            now_selected = False
        else:
            selected.append(key)
            now_selected = True
        setattr(working, kind, selected)
        return now_selected

    def set_notification(self, field: str, value: Any) -> None:
        working = self._working()
        if field not in NotificationSettings.model_fields:
            raise ValidationFailure(f"Unknown notification setting '{field}'")
        try:
            setattr(working.notifications, field, value)
        except PydanticValidationError as e:
            raise ValidationFailure(f"Invalid value for '{field}': {value!r}") from e

    def select_all(self, kind: str) -> None:
        catalog = self.catalogs[self._check_kind(kind)]
        setattr(self._working(), kind, list(catalog.keys))

    def deselect_all(self, kind: str) -> None:
        self._check_kind(kind)
        setattr(self._working(), kind, [])

    def is_all_selected(self, kind: str) -> bool:
        catalog = self.catalogs[self._check_kind(kind)]
        return covers_all(self._working().selected(kind), catalog.keys)

    def toggle_all(self, kind: str) -> None:
        if self.is_all_selected(kind):
            self.deselect_all(kind)
        else:
            self.select_all(kind)

    # -------------------- Export --------------------

    def export(self) -> dict[str, Any]:
        """JSON-ready copy of the saved preferences with a timestamp."""
        return {
            "preferences": (
                self.remote_snapshot.model_dump(mode="json")
                if self.remote_snapshot
                else None
            ),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # -------------------- Helpers --------------------

    def _working(self) -> PreferenceDocument:
        if self.local_working is None:
            raise ValidationFailure(
                "Preferences have not been loaded", suggestion="Call load() first"
            )
        return self.local_working

    @staticmethod
    def _check_kind(kind: str) -> str:
        if kind not in PREFERENCE_KINDS:
            raise ValidationFailure(
                f"Unknown preference kind '{kind}'",
                suggestion=f"Use one of: {', '.join(PREFERENCE_KINDS)}",
            )
        return kind

    def _normalized(self, document: PreferenceDocument) -> PreferenceDocument:
        """Copy of ``document`` with display labels mapped to backend keys."""
        normalized = document.model_copy(deep=True)
        for kind in PREFERENCE_KINDS:
            catalog = self.catalogs.get(kind)
            if catalog is None:
                continue
            keys = [catalog.key_for(value) for value in normalized.selected(kind)]
            setattr(normalized, kind, list(dict.fromkeys(keys)))
        return normalized
