"""
FastAPI server: check-in accounting, CheckIn event listing and token transfers.

All routes are mounted under /api and answer with the success/error envelope.
The event cache and transfer guard are created per app and live on app.state.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from checkin_rewards import __version__
from checkin_rewards.api_server.checkin_routes import router as checkin_router
from checkin_rewards.api_server.events_routes import router as events_router
from checkin_rewards.api_server.responses import api_error, api_validation_error
from checkin_rewards.api_server.transfer_routes import router as transfer_router
from checkin_rewards.chain.events import EventCache
from checkin_rewards.config.settings import get_settings
from checkin_rewards.database import init_db
from checkin_rewards.rewards_logging import get_logger
from checkin_rewards.transfers.guard import TransferGuard

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup."""
    try:
        init_db()
    except Exception as e:
        logger.warning("database_init_skip", error=str(e))
    logger.info("api_started", version=__version__)
    yield
    in_flight = app.state.transfer_guard.in_flight()
    if in_flight:
        logger.warning("api_shutdown_transfers_in_flight", count=len(in_flight))
    logger.info("api_stopped")


def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    return api_error(str(exc.detail), exc.status_code)


def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return api_validation_error(exc.errors())


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="Checkin Rewards API",
        description="Checkpoint check-ins, points ledger, CheckIn events and reward token transfers.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.event_cache = EventCache(settings.event_cache_ttl_sec)
    app.state.transfer_guard = TransferGuard()

    app.include_router(checkin_router, prefix="/api")
    app.include_router(events_router, prefix="/api")
    app.include_router(transfer_router, prefix="/api")

    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    @app.get("/health")
    def health() -> dict[str, Any]:
        """Liveness check: API is up."""
        return {"status": "ok"}

    return app


app = create_app()
