"""Error types for program scheduling.

Only inputs the engine cannot work around are errors. A missing uid is
reported through ``updated_count == 0`` and malformed preferences fall back
to defaults, so neither has an exception type here.
"""


class SchedulingError(ValueError):
    """Base exception for scheduling failures."""

    pass


class InvalidStartDateError(SchedulingError):
    """Raised when the scheduling anchor date is missing or unparseable.

    Attributes:
        value: The rejected start date value
    """

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid start date: {value!r}. Expected YYYY-MM-DD.")


class InvalidStartAtError(SchedulingError):
    """Raised when a stored session start time cannot be parsed.

    Attributes:
        uid: Uid of the offending session (may be None for unscheduled programs)
        value: The rejected start_at value
    """

    def __init__(self, uid: str | None, value: object) -> None:
        self.uid = uid
        self.value = value
        super().__init__(f"Session {uid} has invalid start_at: {value!r}. Expected YYYY-MM-DDTHH:mm.")


class ScheduleRangeError(SchedulingError):
    """Raised when a schedule would run outside the supported calendar (years 1-9999).

    Attributes:
        uid: Uid of the session that fell out of range, if known
    """

    def __init__(self, message: str, uid: str | None = None) -> None:
        self.uid = uid
        super().__init__(message)
