"""Program scheduling engine.

Pure functions that stamp a program with start times and apply partial
reschedules (shift, move, resize). Nothing here performs I/O or reads the
clock.
"""

from fitplan.programs.schedule.assigner import ScheduleResult, schedule_program
from fitplan.programs.schedule.errors import (
    InvalidStartAtError,
    InvalidStartDateError,
    ScheduleRangeError,
    SchedulingError,
)
from fitplan.programs.schedule.mutator import (
    SessionUpdateResult,
    ShiftResult,
    find_session_start,
    shift_program_schedule,
    update_session_duration,
    update_session_start,
)
from fitplan.programs.schedule.uid import assign_session_uids, ensure_uid, generate_session_uid
from fitplan.programs.schedule.weekdays import next_allowed_date, normalize_weekdays

__all__ = [
    "InvalidStartAtError",
    "InvalidStartDateError",
    "ScheduleRangeError",
    "ScheduleResult",
    "SchedulingError",
    "SessionUpdateResult",
    "ShiftResult",
    "assign_session_uids",
    "ensure_uid",
    "find_session_start",
    "generate_session_uid",
    "next_allowed_date",
    "normalize_weekdays",
    "schedule_program",
    "shift_program_schedule",
    "update_session_duration",
    "update_session_start",
]
