"""Validators for program payloads and schedule edits.

Enforces invariants to prevent silent corruption:
- Generated programs have the expected weeks/sessions/exercises shape
- Session uids are unique
- Scheduled start times increase in (week, session) order
- Requested durations and start times are acceptable (API boundary only)
"""

from typing import Any

from loguru import logger
from pydantic import ValidationError

from fitplan.core.settings import settings
from fitplan.programs.types import Program
from fitplan.utils.local_time import parse_local_datetime


class ProgramValidationError(ValueError):
    """Raised when a program payload or a schedule edit is rejected."""

    pass


def validate_program_output(data: Any) -> Program:
    """Validate a generated program payload and return it as a Program.

    Checks the shape produced by the content generator:
    - a ``weeks`` array
    - each week: numeric ``week`` and a ``sessions`` array
    - each session: numeric ``session``, string ``goal``, ``exercises`` array
    - each exercise: string ``exercise_id``, numeric ``sets``/``reps``, optional string ``notes``

    Args:
        data: Raw payload (usually parsed JSON)

    Returns:
        Validated Program

    Raises:
        ProgramValidationError: If the payload does not match the shape
    """
    if not isinstance(data, dict) or not isinstance(data.get("weeks"), list):
        raise ProgramValidationError("Missing or invalid 'weeks' array")

    for week in data["weeks"]:
        if not isinstance(week, dict) or not _is_number(week.get("week")) or not isinstance(week.get("sessions"), list):
            raise ProgramValidationError("Each week must have a number 'week' and array 'sessions'")
        for session in week["sessions"]:
            if (
                not isinstance(session, dict)
                or not _is_number(session.get("session"))
                or not isinstance(session.get("goal"), str)
                or not isinstance(session.get("exercises"), list)
            ):
                raise ProgramValidationError(
                    "Each session must have a number 'session', string 'goal', and array 'exercises'"
                )
            for exercise in session["exercises"]:
                if (
                    not isinstance(exercise, dict)
                    or not isinstance(exercise.get("exercise_id"), str)
                    or not _is_number(exercise.get("sets"))
                    or not _is_number(exercise.get("reps"))
                    or (exercise.get("notes") is not None and not isinstance(exercise.get("notes"), str))
                ):
                    raise ProgramValidationError(
                        "Each exercise must have string 'exercise_id', number 'sets', number 'reps', "
                        "and optional string 'notes'"
                    )

    try:
        return Program.model_validate(data)
    except ValidationError as e:
        raise ProgramValidationError(f"Program payload failed schema validation: {e}") from e


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_unique_uids(program: Program) -> None:
    """Validate that no two sessions share a uid.

    Sessions without a uid are ignored.

    Raises:
        ProgramValidationError: If a uid appears more than once
    """
    seen: set[str] = set()
    duplicates: set[str] = set()
    for _, session in program.iter_sessions():
        if not session.uid:
            continue
        if session.uid in seen:
            duplicates.add(session.uid)
        seen.add(session.uid)

    if duplicates:
        raise ProgramValidationError(f"Duplicate session uids: {', '.join(sorted(duplicates))}")


def validate_schedule_order(program: Program) -> None:
    """Validate that scheduled start times strictly increase in (week, session) order.

    Unscheduled sessions are skipped. This is a check on the output of full
    scheduling; single-session moves may legitimately reorder sessions.

    Raises:
        ProgramValidationError: If a start time is unparseable or not after its predecessor
    """
    ordered = sorted(
        ((week.week, session.session, session) for week, session in program.iter_sessions()),
        key=lambda item: (item[0], item[1]),
    )

    previous = None
    previous_uid = None
    for _, _, session in ordered:
        if not session.start_at:
            continue
        try:
            current = parse_local_datetime(session.start_at)
        except ValueError as e:
            raise ProgramValidationError(f"Session {session.uid} has invalid start_at: {session.start_at!r}") from e
        if previous is not None and current <= previous:
            raise ProgramValidationError(
                f"Session {session.uid} starts at {session.start_at}, not after session {previous_uid}"
            )
        previous = current
        previous_uid = session.uid


def validate_duration_minutes(value: int) -> None:
    """Validate a requested session duration against the configured bounds.

    Args:
        value: Requested duration in minutes

    Raises:
        ProgramValidationError: If the duration is outside the allowed range
    """
    low = settings.min_session_duration_minutes
    high = settings.max_session_duration_minutes
    if value < low or value > high:
        logger.warning(f"Rejected session duration {value} (allowed {low}-{high})")
        raise ProgramValidationError(f"duration_minutes must be between {low} and {high}, got {value}")


def validate_start_at(value: str) -> None:
    """Validate a requested session start time.

    Raises:
        ProgramValidationError: If the value is not ``YYYY-MM-DDTHH:mm``
    """
    try:
        parse_local_datetime(value)
    except ValueError as e:
        raise ProgramValidationError(f"Invalid start time {value!r}. Expected YYYY-MM-DDTHH:mm.") from e
