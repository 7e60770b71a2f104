"""Dependency injection and shared helpers for FastAPI endpoints"""

from fastapi import HTTPException, Request
from sqlalchemy.orm import Session

from cycle_ledger.domain.exceptions import (
    DomainException,
    DuplicateUsernameError,
    InvalidBackupError,
    PermissionDeniedError,
    RecordNotFoundError,
    UserNotFoundError,
    ValidationError,
)
from cycle_ledger.domain.models import TIMEFRAMES, User
from cycle_ledger.infrastructure.database.repositories import UserRepository


def get_request_id(request: Request) -> str:
    """Extract request ID from request state"""
    return getattr(request.state, "request_id", "unknown")


def require_user(db: Session, user_id: str) -> User:
    """Resolve the acting user or answer 404"""
    user = UserRepository(db).get(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail=f"User {user_id} not found")
    return user


def validate_timeframe(timeframe: str) -> str:
    if timeframe not in TIMEFRAMES:
        raise HTTPException(status_code=400, detail=f"timeframe must be one of {', '.join(TIMEFRAMES)}")
    return timeframe


def http_error_for(exc: DomainException) -> HTTPException:
    """Map a domain exception to the HTTP status the API answers with"""
    if isinstance(exc, (ValidationError, InvalidBackupError)):
        return HTTPException(status_code=422, detail=str(exc))
    if isinstance(exc, (UserNotFoundError, RecordNotFoundError)):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, DuplicateUsernameError):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, PermissionDeniedError):
        return HTTPException(status_code=403, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))
