"""
app/api/dependencies.py

Shared FastAPI dependencies: caller rate limiting, scope validation and
record store access.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException, Query, Request, status
from sqlalchemy.orm import Session

from app.rate_limiter import FixedWindowRateLimiter
from db.repositories.record_repository import RecordRepository
from db.session import get_db
from hierarchy.scope import InvalidScopeError, Scope

CLIENT_ID_HEADER = "X-Client-Id"


def get_rate_limiter(request: Request) -> FixedWindowRateLimiter:
    """
    Return the limiter built for this application in create_app().
    """

    return request.app.state.rate_limiter


def caller_key(request: Request) -> str:
    """
    Identify the caller: explicit client header first, then client host.
    """

    explicit = (request.headers.get(CLIENT_ID_HEADER) or "").strip()
    if explicit:
        return f"client:{explicit}"
    host = request.client.host if request.client else "unknown"
    return f"host:{host}"


def enforce_rate_limit(
    request: Request,
    limiter: FixedWindowRateLimiter = Depends(get_rate_limiter),
) -> None:
    """
    Reject callers that exceeded their request window with HTTP 429.
    """

    decision = limiter.consume(caller_key(request))
    if not decision.allowed:
        raise HTTPException(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail="Rate limit exceeded. Retry later.",
            headers={"Retry-After": str(decision.retry_after_seconds)},
        )


def get_scope(
    scope_type: str = Query(default="country", description="country, region, district, sub_county or school"),
    scope_id: str | None = Query(default=None, description="Unit name at scope_type: a school id or name, or District/Sub-County for an exact sub-county"),
) -> Scope:
    """
    Validate the requested scope; an unknown level is a 400.
    """

    try:
        return Scope.parse(scope_type, scope_id)
    except InvalidScopeError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc),
        ) from exc


def get_record_repository(db: Session = Depends(get_db)) -> RecordRepository:
    return RecordRepository(db)
