"""
API dependencies for dependency injection
"""

import logging
from typing import Callable, Generator, Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from api.rate_limiter import RateLimiter, api_limiter
from app.exceptions import ForbiddenError, RateLimitError, UnauthorizedError
from domain.models import Profile, get_db_session
from services.auth_service import AuthService

logger = logging.getLogger("mealprep.api.auth")

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """
    Database session dependency for FastAPI routes.

    Usage:
        @router.get("/example")
        def example(db: Session = Depends(get_db)):
            # Use db session here
            pass
    """
    yield from get_db_session()


def get_access_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Authentication required")
    return credentials.credentials


def get_current_user(
    request: Request,
    token: str = Depends(get_access_token),
    db: Session = Depends(get_db),
) -> Profile:
    """Resolve the bearer token with Supabase Auth and return the caller's profile."""
    _, profile = AuthService.authenticate(db, token)
    request.state.user_id = str(profile.id)
    return profile


def require_role(role_name: str) -> Callable[..., Profile]:
    """Dependency factory: 403 unless the caller holds ``role_name``."""

    def checker(profile: Profile = Depends(get_current_user)) -> Profile:
        if role_name not in profile.role_names:
            logger.warning(f"role_required role={role_name} user_id={profile.id}")
            raise ForbiddenError(f"Role '{role_name}' required")
        return profile

    return checker


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def _enforce(limiter: RateLimiter, key: str) -> None:
    allowed, _, retry_after = limiter.hit(key)
    if not allowed:
        raise RateLimitError(retry_after=retry_after)


def limit_api(request: Request) -> None:
    """General budget per client address."""
    _enforce(api_limiter, _client_key(request))


def limit_per_user(limiter: RateLimiter) -> Callable[..., None]:
    """Dependency factory: budget per authenticated user."""

    def checker(profile: Profile = Depends(get_current_user)) -> None:
        _enforce(limiter, str(profile.id))

    return checker
