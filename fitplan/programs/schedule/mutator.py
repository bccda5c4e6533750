"""Partial reschedule operations on an already scheduled program.

All operations return a new program. Only the path to a changed session is
copied; untouched weeks and sessions are the very same objects as in the
input, which is what lets callers check that a single-session edit did not
disturb anything else.
"""

from collections.abc import Callable

from loguru import logger
from pydantic import BaseModel

from fitplan.programs.schedule.errors import InvalidStartAtError, ScheduleRangeError
from fitplan.programs.types import Program, ProgramSession
from fitplan.utils.local_time import offset_local_datetime, parse_local_datetime


class ShiftResult(BaseModel):
    """Outcome of a bulk shift.

    Attributes:
        updated: Program with every scheduled session shifted
        shifted_count: Number of sessions that carried a start time
    """

    updated: Program
    shifted_count: int


class SessionUpdateResult(BaseModel):
    """Outcome of a single-session update.

    Attributes:
        updated: Program with the target session changed (the input when not found)
        updated_count: 1 if a session matched the uid, 0 otherwise
    """

    updated: Program
    updated_count: int


def _map_sessions(
    program: Program,
    transform: Callable[[ProgramSession], ProgramSession | None],
) -> tuple[Program, int]:
    """Rebuild the program, replacing sessions for which ``transform`` returns a value.

    Returns:
        Tuple of (program, number of replaced sessions). The input program is
        returned as-is when nothing was replaced.
    """
    replaced = 0
    weeks = []
    for week in program.weeks:
        sessions = []
        week_replaced = False
        for session in week.sessions:
            new_session = transform(session)
            if new_session is None:
                sessions.append(session)
            else:
                sessions.append(new_session)
                replaced += 1
                week_replaced = True
        weeks.append(week.model_copy(update={"sessions": sessions}) if week_replaced else week)

    if not replaced:
        return program, 0
    return program.model_copy(update={"weeks": weeks}), replaced


def shift_program_schedule(program: Program, shift_days: int = 0, shift_minutes: int = 0) -> ShiftResult:
    """Move every scheduled session by the same number of days and minutes.

    Sessions without ``start_at`` are left untouched. A zero shift returns an
    equivalent program, and shifts compose additively.

    Args:
        program: Scheduled program
        shift_days: Whole days to add (may be negative)
        shift_minutes: Minutes to add (may be negative)

    Returns:
        ShiftResult with the shifted program

    Raises:
        InvalidStartAtError: If a stored start_at cannot be parsed
        ScheduleRangeError: If a shifted start_at falls outside years 1-9999
    """
    shifted_count = sum(1 for _, session in program.iter_sessions() if session.start_at)

    if not shift_days and not shift_minutes:
        return ShiftResult(updated=program, shifted_count=shifted_count)

    def shift(session: ProgramSession) -> ProgramSession | None:
        if not session.start_at:
            return None
        try:
            parse_local_datetime(session.start_at)
        except ValueError as e:
            raise InvalidStartAtError(session.uid, session.start_at) from e
        try:
            new_start = offset_local_datetime(session.start_at, days=shift_days, minutes=shift_minutes)
        except ValueError as e:
            raise ScheduleRangeError(str(e), uid=session.uid) from e
        return session.model_copy(update={"start_at": new_start})

    updated, _ = _map_sessions(program, shift)

    logger.info(
        "Program schedule shifted",
        shift_days=shift_days,
        shift_minutes=shift_minutes,
        shifted_count=shifted_count,
    )
    return ShiftResult(updated=updated, shifted_count=shifted_count)


def update_session_start(program: Program, uid: str, new_start_at: str) -> SessionUpdateResult:
    """Set the start time of one session, looked up by uid.

    The value is stored as given; relative nudges are computed by the caller
    (see ``find_session_start``).

    Args:
        program: Scheduled program
        uid: Uid of the session to move
        new_start_at: New absolute start, ``YYYY-MM-DDTHH:mm``

    Returns:
        SessionUpdateResult; ``updated_count`` is 0 and the program unchanged
        when no session has this uid
    """

    def move(session: ProgramSession) -> ProgramSession | None:
        if session.uid != uid:
            return None
        return session.model_copy(update={"start_at": new_start_at})

    updated, count = _map_sessions(program, move)
    if not count:
        logger.warning(f"No session with uid={uid} to move")
    return SessionUpdateResult(updated=updated, updated_count=count)


def update_session_duration(program: Program, uid: str, new_duration_minutes: int) -> SessionUpdateResult:
    """Set the duration of one session, looked up by uid.

    No bounds are checked here; range policy belongs to the API layer.

    Args:
        program: Scheduled program
        uid: Uid of the session to resize
        new_duration_minutes: New duration in minutes

    Returns:
        SessionUpdateResult; ``updated_count`` is 0 and the program unchanged
        when no session has this uid
    """

    def resize(session: ProgramSession) -> ProgramSession | None:
        if session.uid != uid:
            return None
        return session.model_copy(update={"duration_minutes": new_duration_minutes})

    updated, count = _map_sessions(program, resize)
    if not count:
        logger.warning(f"No session with uid={uid} to resize")
    return SessionUpdateResult(updated=updated, updated_count=count)


def find_session_start(program: Program, uid: str) -> str | None:
    """Return the start_at of the session with this uid, or None if unknown or unscheduled."""
    for _, session in program.iter_sessions():
        if session.uid == uid:
            return session.start_at
    return None
