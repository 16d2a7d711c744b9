from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from collections.abc import AsyncIterator

from fastapi import FastAPI

from app.config import get_rate_limit_settings
from app.rate_limiter import FixedWindowRateLimiter
from app.schemas.impact import HealthResponse

SERVICE_NAME = "literacy-impact-engine"


def _validate_env() -> None:
    """
    Validate required environment variables at startup.

    Runs before any database connection is opened. Raises RuntimeError
    naming every problem so the operator can fix them in one restart.
    """

    from db.config import load_env_files, resolve_database_url

    load_env_files()

    errors: list[str] = []

    # --- Database URL ---------------------------------------------------
    try:
        database_url = resolve_database_url()
    except RuntimeError as exc:
        errors.append(str(exc))
    else:
        if not database_url.startswith("postgresql"):
            errors.append("Only PostgreSQL database URLs are supported.")

    # --- Log level ------------------------------------------------------
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(getattr(logging, log_level, None), int):
        errors.append(f"LOG_LEVEL='{log_level}' is not a valid logging level.")

    if errors:
        raise RuntimeError(
            "Startup validation failed, missing or invalid environment variables:\n"
            + "\n".join(f"  - {e}" for e in errors)
        )


def _configure_logging() -> None:
    """
    Configure root logging once for the API process.
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def _check_db() -> None:
    """Open a session and run SELECT 1. Raises RuntimeError if the record store is unreachable."""
    from sqlalchemy import text

    from db.session import SessionLocal

    try:
        db = SessionLocal()
        try:
            db.execute(text("SELECT 1"))
        finally:
            db.close()
    except Exception as exc:
        raise RuntimeError("Database unavailable.") from exc


@asynccontextmanager
async def _lifespan(application: FastAPI) -> AsyncIterator[None]:
    """Confirm record store connectivity on boot; drop rate limit windows on exit."""
    _check_db()
    logging.getLogger(__name__).info("Database connectivity confirmed")
    try:
        yield
    finally:
        application.state.rate_limiter.reset()
        logging.getLogger(__name__).info("Rate limiter state cleared")


def create_app(*, rate_limiter: FixedWindowRateLimiter | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    A rate limiter may be injected (tests use one with a fake clock);
    otherwise one is built from RATE_LIMIT_* settings.
    """

    _validate_env()
    _configure_logging()

    application = FastAPI(
        title="Literacy Impact Engine API",
        version="1.0.0",
        lifespan=_lifespan,
    )

    if rate_limiter is None:
        settings = get_rate_limit_settings()
        rate_limiter = FixedWindowRateLimiter(
            max_requests=settings.max_requests,
            window_seconds=settings.window_seconds,
        )
    application.state.rate_limiter = rate_limiter

    from app.api.routers import impact_router

    application.include_router(impact_router)

    @application.get("/health", response_model=HealthResponse)
    def healthcheck() -> HealthResponse:
        return HealthResponse(service=SERVICE_NAME)

    return application


app = create_app()
