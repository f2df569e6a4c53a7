"""User preference document (subspecialties, research types, notifications)."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from research_feed.models.enums import NotificationFrequency

PREFERENCE_KINDS: tuple[str, ...] = ("subspecialties", "research_types")


class NotificationSettings(BaseModel):
    """Notification channels and delivery frequency."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    email_enabled: bool = True
    push_enabled: bool = False
    whatsapp_enabled: bool = False
    frequency: NotificationFrequency = NotificationFrequency.WEEKLY


class PreferenceDocument(BaseModel):
    """The remote preferences resource.

    Subspecialties and research types hold canonical backend keys.
    """

    model_config = ConfigDict(extra="ignore", validate_assignment=True)

    subspecialties: list[str] = Field(default_factory=list)
    research_types: list[str] = Field(default_factory=list)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    @field_validator("subspecialties", "research_types", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("notifications", mode="before")
    @classmethod
    def default_notifications(cls, v: Any) -> Any:
        return NotificationSettings() if v is None else v

    def selected(self, kind: str) -> list[str]:
        """Selected keys for ``subspecialties`` or ``research_types``."""
        if kind not in PREFERENCE_KINDS:
            raise KeyError(kind)
        return getattr(self, kind)
