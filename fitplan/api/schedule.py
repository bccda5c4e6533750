"""Program schedule API endpoints.

Load a program, run one scheduling operation on it, and persist the result
together with the scheduling metadata. The scheduling engine is pure; this is
the only layer that reads the clock (``last_scheduled_at``) or touches storage.
"""

import re
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status
from loguru import logger
from pydantic import ValidationError

from fitplan.api.dependencies import get_current_user_id, get_program_store
from fitplan.api.schemas import ScheduleFeedbackRequest, ScheduleRequest
from fitplan.programs.repository import ProgramRecord, ProgramStore
from fitplan.programs.schedule import (
    SchedulingError,
    find_session_start,
    schedule_program,
    shift_program_schedule,
    update_session_duration,
    update_session_start,
)
from fitplan.programs.types import Program, SchedulingPreferences
from fitplan.programs.validators import ProgramValidationError, validate_duration_minutes, validate_start_at
from fitplan.utils.local_time import offset_local_datetime

router = APIRouter(prefix="/program", tags=["schedule"])

_UUID_RE = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[1-5][0-9a-fA-F]{3}-[89abAB][0-9a-fA-F]{3}-[0-9a-fA-F]{12}$"
)


def _load_owned_program(program_id: str, user_id: str, store: ProgramStore) -> tuple[ProgramRecord, Program]:
    """Fetch a program the current user owns.

    Raises:
        HTTPException: 404 if the id is malformed or unknown, 403 if owned by someone else,
            500 if the stored payload is not a valid program
    """
    if not _UUID_RE.match(program_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Program not found")

    record = store.get_program(program_id)
    if record is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Program not found")
    if record.user_id != user_id:
        logger.warning(f"User {user_id} attempted to schedule program {program_id} owned by another user")
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")

    try:
        program = Program.model_validate(record.program_json or {})
    except ValidationError as e:
        logger.error(f"Stored program {program_id} is not a valid program payload: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Stored program is invalid",
        ) from e

    return record, program


def _save_schedule(
    store: ProgramStore,
    program_id: str,
    program: Program,
    applied_preferences: SchedulingPreferences | None,
    error_prefix: str,
) -> ProgramRecord:
    fields = {
        "program_json": program.to_payload(),
        "last_scheduled_at": datetime.now(timezone.utc),
    }
    # Preferences are only replaced by a full regeneration
    if applied_preferences is not None:
        fields["scheduling_preferences"] = applied_preferences.to_payload()

    try:
        return store.update_program_fields(program_id, **fields)
    except Exception as e:
        logger.exception(f"Failed to save schedule for program {program_id}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"{error_prefix}: {e}",
        ) from e


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


@router.post("/{program_id}/schedule", response_model=ProgramRecord)
def schedule(
    program_id: str,
    body: ScheduleRequest | None = None,
    user_id: str = Depends(get_current_user_id),
    store: ProgramStore = Depends(get_program_store),
) -> ProgramRecord:
    """Schedule (or fully reschedule) every session of a program.

    Args:
        program_id: Program UUID
        body: Optional start date and preferences
        user_id: Current authenticated user ID
        store: Program store

    Returns:
        Saved ProgramRecord

    Raises:
        HTTPException: 400 if no valid start date is available, plus the
            ownership/lookup errors of ``_load_owned_program``
    """
    body = body or ScheduleRequest()
    record, program = _load_owned_program(program_id, user_id, store)

    start_date = body.start_date or record.start_date
    logger.info(f"Scheduling program {program_id} from {start_date}")

    try:
        result = schedule_program(program, start_date, body.preferences)
    except SchedulingError as e:
        raise _bad_request(str(e)) from e

    return _save_schedule(store, program_id, result.updated, result.applied_preferences, "Failed to schedule program")


@router.post("/{program_id}/schedule/feedback", response_model=ProgramRecord)
def schedule_feedback(
    program_id: str,
    body: ScheduleFeedbackRequest | None = None,
    user_id: str = Depends(get_current_user_id),
    store: ProgramStore = Depends(get_program_store),
) -> ProgramRecord:
    """Apply calendar feedback (resize, move, nudge, shift, or regenerate).

    Args:
        program_id: Program UUID
        body: Feedback payload; see ScheduleFeedbackRequest for dispatch order
        user_id: Current authenticated user ID
        store: Program store

    Returns:
        Saved ProgramRecord

    Raises:
        HTTPException: 400 if the targeted session was not updated or a value
            is rejected, plus the ownership/lookup errors of ``_load_owned_program``
    """
    body = body or ScheduleFeedbackRequest()
    record, program = _load_owned_program(program_id, user_id, store)

    applied_preferences = None
    try:
        if body.uid and body.new_duration_minutes is not None:
            validate_duration_minutes(body.new_duration_minutes)
            result = update_session_duration(program, body.uid, body.new_duration_minutes)
            if not result.updated_count:
                raise _bad_request("No session updated")
            updated = result.updated

        elif body.uid and (body.new_start_at is not None or body.delta_minutes is not None):
            target_start = body.new_start_at
            if target_start is None:
                current_start = find_session_start(program, body.uid)
                if not current_start:
                    raise _bad_request("Session not found or not scheduled")
                target_start = offset_local_datetime(current_start, minutes=body.delta_minutes)
            validate_start_at(target_start)
            result = update_session_start(program, body.uid, target_start)
            if not result.updated_count:
                raise _bad_request("No session updated")
            updated = result.updated

        elif body.shift_days is not None or body.shift_minutes is not None:
            updated = shift_program_schedule(program, body.shift_days or 0, body.shift_minutes or 0).updated

        else:
            start_date = body.start_date or record.start_date
            result = schedule_program(program, start_date, body.preferences)
            updated = result.updated
            applied_preferences = result.applied_preferences

    except (SchedulingError, ProgramValidationError) as e:
        raise _bad_request(str(e)) from e
    except ValueError as e:
        # nudge from a malformed stored start_at, or one that leaves the date range
        raise _bad_request(f"Invalid session start time: {e}") from e

    return _save_schedule(store, program_id, updated, applied_preferences, "Failed to update schedule")
