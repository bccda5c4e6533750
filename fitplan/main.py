from fastapi import FastAPI, Request
from loguru import logger

from fitplan.api.schedule import router as schedule_router
from fitplan.core.logger import setup_logger
from fitplan.core.settings import settings
from fitplan.programs.repository import InMemoryProgramStore, ProgramStore


def create_app(store: ProgramStore | None = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        store: Program store to serve from. Defaults to an empty in-memory store.

    Returns:
        Configured FastAPI app
    """
    setup_logger(level=settings.log_level, log_file=settings.log_file)

    app = FastAPI(title="fitplan")
    app.state.program_store = store if store is not None else InMemoryProgramStore()
    app.include_router(schedule_router)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log all HTTP requests."""
        logger.debug(f"Request: {request.method} {request.url.path}")
        response = await call_next(request)
        logger.debug(f"Response: {response.status_code} for {request.method} {request.url.path}")
        return response

    logger.info("FastAPI application initialized")
    return app


app = create_app()
