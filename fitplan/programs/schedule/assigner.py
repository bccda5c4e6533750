"""Full program scheduling.

Stamps every session of a program with a start time and a duration, walking
sessions in (week, session) order so that start times are strictly
increasing across the whole program.
"""

from datetime import date, time

from loguru import logger
from pydantic import BaseModel

from fitplan.core.settings import settings
from fitplan.programs.schedule.errors import InvalidStartDateError, ScheduleRangeError
from fitplan.programs.schedule.uid import assign_session_uids
from fitplan.programs.schedule.weekdays import next_allowed_date, normalize_weekdays
from fitplan.programs.types import Program, SchedulingPreferences
from fitplan.utils.local_time import combine_local, parse_start_date, parse_time_of_day


class ScheduleResult(BaseModel):
    """Outcome of a full regeneration.

    Attributes:
        updated: Newly scheduled program
        applied_preferences: Preferences actually used, defaults materialized
        scheduled_count: Number of sessions that received a start time
    """

    updated: Program
    applied_preferences: SchedulingPreferences
    scheduled_count: int


def _resolve_start_date(start_date: str | date | None) -> date:
    if start_date is None:
        raise InvalidStartDateError(start_date)
    try:
        return parse_start_date(start_date)
    except ValueError as e:
        raise InvalidStartDateError(start_date) from e


def _resolve_time_of_day(value: str | None) -> time:
    fallback = parse_time_of_day(settings.default_session_time)
    if not value:
        return fallback
    try:
        return parse_time_of_day(value)
    except ValueError:
        logger.warning(f"Invalid default_time {value!r}; falling back to {settings.default_session_time}")
        return fallback


def _session_order(program: Program) -> list[tuple[int, int]]:
    """Positions ``(week_idx, session_idx)`` sorted by week then session number.

    ``sorted`` is stable, so sessions sharing a number keep their stored order.
    """
    positions = [
        (week_idx, session_idx)
        for week_idx, week in enumerate(program.weeks)
        for session_idx in range(len(week.sessions))
    ]

    def key(position: tuple[int, int]) -> tuple[int, int]:
        week_idx, session_idx = position
        week = program.weeks[week_idx]
        return week.week, week.sessions[session_idx].session

    return sorted(positions, key=key)


def schedule_program(
    program: Program,
    start_date: str | date | None,
    preferences: SchedulingPreferences | dict | None = None,
) -> ScheduleResult:
    """Assign a start time and duration to every session of a program.

    Rules:
    - The first session lands on the first allowed date on or after
      ``start_date``; each later session lands on the first allowed date
      strictly after the previous session's date
    - Start time of day is ``default_time`` (settings fallback otherwise)
    - Duration is the caller's ``default_duration_minutes`` if given, else the
      session's existing duration, else the settings fallback
    - Sessions without a uid get a positional one; existing uids are kept

    The input program is not modified and the output keeps the stored order of
    weeks and sessions.

    Args:
        program: Program to schedule (scheduled or not)
        start_date: Anchor date (``YYYY-MM-DD``, ISO date-time, or ``date``)
        preferences: Optional scheduling preferences (model or raw dict)

    Returns:
        ScheduleResult with the new program and the applied preferences

    Raises:
        InvalidStartDateError: If ``start_date`` is missing or unparseable
        ScheduleRangeError: If the sessions would run past ``date.max``
    """
    anchor = _resolve_start_date(start_date)

    if isinstance(preferences, dict):
        preferences = SchedulingPreferences.model_validate(preferences)
    allowed, applied = normalize_weekdays(preferences)
    explicit_duration = preferences.default_duration_minutes if preferences else None
    time_of_day = _resolve_time_of_day(applied.default_time)
    applied = applied.model_copy(update={"default_time": time_of_day.strftime("%H:%M")})

    assignments: dict[tuple[int, int], dict] = {}
    previous: date | None = None
    for week_idx, session_idx in _session_order(program):
        session = program.weeks[week_idx].sessions[session_idx]
        try:
            if previous is None:
                session_date = next_allowed_date(anchor, allowed, strictly_after=False)
            else:
                session_date = next_allowed_date(previous, allowed, strictly_after=True)
        except ValueError as e:
            raise ScheduleRangeError(
                f"Program does not fit before {date.max.isoformat()} when starting on {anchor.isoformat()}",
                uid=session.uid,
            ) from e
        previous = session_date

        duration = explicit_duration or session.duration_minutes or applied.default_duration_minutes
        assignments[(week_idx, session_idx)] = {
            "start_at": combine_local(session_date, time_of_day),
            "duration_minutes": duration,
        }

    weeks = []
    for week_idx, week in enumerate(program.weeks):
        sessions = [
            session.model_copy(update=assignments[(week_idx, session_idx)])
            for session_idx, session in enumerate(week.sessions)
        ]
        weeks.append(week.model_copy(update={"sessions": sessions}))

    updated = assign_session_uids(program.model_copy(update={"weeks": weeks}))

    logger.info(
        "Program scheduled",
        start_date=anchor.isoformat(),
        days_of_week=list(allowed),
        scheduled_count=len(assignments),
        last_session_date=previous.isoformat() if previous else None,
    )

    return ScheduleResult(
        updated=updated,
        applied_preferences=applied,
        scheduled_count=len(assignments),
    )
