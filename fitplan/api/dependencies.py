"""FastAPI dependencies for the schedule API."""

from fastapi import Header, HTTPException, Request, status
from loguru import logger

from fitplan.programs.repository import ProgramStore


def get_current_user_id(x_user_id: str | None = Header(default=None)) -> str:
    """Return the authenticated user ID.

    Authentication happens upstream (gateway/session middleware), which
    forwards the user in the ``X-User-Id`` header.

    Raises:
        HTTPException: 401 if no user is attached to the request
    """
    if not x_user_id or not x_user_id.strip():
        logger.warning("Request without authenticated user")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
    return x_user_id.strip()


def get_program_store(request: Request) -> ProgramStore:
    return request.app.state.program_store
