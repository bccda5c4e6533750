"""Program payload schema.

A program is a plain tree: weeks -> sessions -> exercises. The scheduling
engine only reads and writes ``uid``, ``start_at`` and ``duration_minutes``;
every other field (including fields unknown to this schema) is carried through
untouched, so all models allow extra keys.
"""

import math
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ExerciseInstance(BaseModel):
    """One prescribed exercise within a session.

    Attributes:
        exercise_id: Catalogue identifier of the exercise
        sets: Number of sets
        reps: Repetitions per set
        notes: Optional coaching notes
    """

    model_config = ConfigDict(extra="allow")

    exercise_id: str
    sets: int
    reps: int
    notes: str | None = None


class ProgramSession(BaseModel):
    """A single workout session.

    Attributes:
        session: 1-based session number within its week
        uid: Stable identifier, unique across the program (e.g. "w1s2")
        goal: Short description of the session goal
        exercises: Prescribed exercises
        start_at: Local wall-time start, ``YYYY-MM-DDTHH:mm``, once scheduled
        duration_minutes: Planned duration, once scheduled
    """

    model_config = ConfigDict(extra="allow")

    session: int
    uid: str | None = None
    goal: str = ""
    exercises: list[ExerciseInstance] = Field(default_factory=list)
    start_at: str | None = None
    duration_minutes: int | None = None


class ProgramWeek(BaseModel):
    model_config = ConfigDict(extra="allow")

    week: int
    sessions: list[ProgramSession] = Field(default_factory=list)


class Program(BaseModel):
    model_config = ConfigDict(extra="allow")

    weeks: list[ProgramWeek] = Field(default_factory=list)

    def iter_sessions(self):
        """Yield ``(week, session)`` pairs in stored order."""
        for week in self.weeks:
            for session in week.sessions:
                yield week, session

    def to_payload(self) -> dict[str, Any]:
        """Serialize for persistence.

        Schema fields that default to None (``uid``, ``start_at``,
        ``duration_minutes``, ``notes``) are omitted while empty. Extra keys
        are written back verbatim, explicit nulls included.
        """
        payload = self.model_dump()
        for week in payload["weeks"]:
            for session in week["sessions"]:
                _drop_empty(session, _OPTIONAL_SESSION_FIELDS)
                for exercise in session["exercises"]:
                    _drop_empty(exercise, _OPTIONAL_EXERCISE_FIELDS)
        return payload


_OPTIONAL_SESSION_FIELDS = ("uid", "start_at", "duration_minutes")
_OPTIONAL_EXERCISE_FIELDS = ("notes",)


def _drop_empty(data: dict[str, Any], keys: tuple[str, ...]) -> None:
    for key in keys:
        if data.get(key) is None:
            data.pop(key, None)


def _discard_invalid_list(value: Any) -> Any:
    if value is None:
        return None
    if not isinstance(value, (list, tuple, set)):
        return None
    return list(value)


class SchedulingPreferences(BaseModel):
    """Caller scheduling preferences.

    Two weekday shapes are accepted: ``preferred_days`` (names such as
    "Monday" or "tue") and ``daysOfWeek`` (0=Sunday..6=Saturday). Malformed
    values are dropped during validation instead of being rejected, so any
    dict can be turned into preferences.

    Attributes:
        preferred_days: Weekday names
        days_of_week: Weekday indices (serialized as ``daysOfWeek``)
        default_time: Session start time of day, ``HH:mm``
        default_duration_minutes: Duration applied to every session
        timezone: IANA time zone name, carried through for calendar consumers
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    preferred_days: list[str] | None = None
    days_of_week: list[int] | None = Field(default=None, alias="daysOfWeek")
    default_time: str | None = None
    default_duration_minutes: int | None = None
    timezone: str | None = None

    @field_validator("preferred_days", mode="before")
    @classmethod
    def _keep_string_days(cls, value: Any) -> Any:
        items = _discard_invalid_list(value)
        if items is None:
            return None
        return [item for item in items if isinstance(item, str)]

    @field_validator("days_of_week", mode="before")
    @classmethod
    def _keep_integer_days(cls, value: Any) -> Any:
        items = _discard_invalid_list(value)
        if items is None:
            return None
        # bool is an int subclass; True is not a weekday
        return [item for item in items if isinstance(item, int) and not isinstance(item, bool)]

    @field_validator("default_time", "timezone", mode="before")
    @classmethod
    def _keep_non_empty_string(cls, value: Any) -> Any:
        if isinstance(value, str) and value.strip():
            return value.strip()
        return None

    @field_validator("default_duration_minutes", mode="before")
    @classmethod
    def _keep_positive_minutes(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if not math.isfinite(value) or value <= 0:
            return None
        return round(value)

    def to_payload(self) -> dict[str, Any]:
        """Serialize with the wire aliases, omitting unset fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
