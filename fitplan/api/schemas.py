"""Request schemas for the schedule endpoints.

Field names follow the camelCase used by the web client; snake_case names are
accepted as well.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fitplan.programs.types import SchedulingPreferences


class ScheduleRequest(BaseModel):
    """Full (re)scheduling request.

    Attributes:
        start_date: Anchor date; defaults to the program's stored start_date
        preferences: Scheduling preferences; a non-object value is ignored
    """

    model_config = ConfigDict(populate_by_name=True)

    start_date: str | None = Field(default=None, alias="startDate")
    preferences: SchedulingPreferences | None = None

    @field_validator("start_date", mode="before")
    @classmethod
    def _ignore_non_string_date(cls, value: Any) -> Any:
        return value if isinstance(value, str) and value.strip() else None

    @field_validator("preferences", mode="before")
    @classmethod
    def _ignore_non_object_preferences(cls, value: Any) -> Any:
        return value if isinstance(value, (dict, SchedulingPreferences)) else None


class ScheduleFeedbackRequest(ScheduleRequest):
    """Schedule feedback from the calendar view.

    Exactly one action is applied, checked in this order:
    1. ``uid`` + ``newDurationMinutes``: resize one session
    2. ``uid`` + ``newStartAt`` or ``deltaMinutes``: move one session
    3. ``shiftDays`` and/or ``shiftMinutes``: shift every scheduled session
    4. otherwise: full regeneration from ``startDate``/``preferences``
    """

    shift_days: int | None = Field(default=None, alias="shiftDays")
    shift_minutes: int | None = Field(default=None, alias="shiftMinutes")
    uid: str | None = None
    new_start_at: str | None = Field(default=None, alias="newStartAt")
    delta_minutes: int | None = Field(default=None, alias="deltaMinutes")
    new_duration_minutes: int | None = Field(default=None, alias="newDurationMinutes")
