"""
Authentication flows backed by Supabase Auth.

The OAuth callback mirrors what the web client used to do after a redirect:
exchange the code, then keep checking until the new session is usable and
the profile row exists, backing off between attempts.
"""

import logging
import time
from typing import Any, Dict, Tuple
from sqlalchemy.orm import Session

from adapters import supabase_auth
from app.config import settings
from app.exceptions import (
    ServiceUnavailableError,
    UnauthorizedError,
    UpstreamServiceError,
)
from domain.models import Profile
from services.profile_service import ProfileService

logger = logging.getLogger("mealprep.auth")

_sleep = time.sleep


class AuthService:
    @staticmethod
    def authenticate(db: Session, access_token: str) -> Tuple[Dict[str, Any], Profile]:
        """Resolve a bearer token to (auth user, profile)."""
        user = supabase_auth.get_user(access_token)
        profile = ProfileService.ensure_profile(db, user)
        return user, profile

    @staticmethod
    def complete_oauth_callback(
        db: Session, code: str, code_verifier: str = None
    ) -> Tuple[Dict[str, Any], Profile, int]:
        """
        Exchange an OAuth code and wait for the session to be established.

        Returns:
            (session, profile, attempts)

        Raises:
            UnauthorizedError: the code exchange was rejected
            ServiceUnavailableError: the session never became usable
        """
        session = supabase_auth.exchange_code(code, code_verifier)
        token = session["access_token"]

        delays = [0.0] + list(settings.auth_callback_delays_sec)
        last_error = None
        for attempt, delay in enumerate(delays, start=1):
            if delay:
                _sleep(delay)
            try:
                _, profile = AuthService.authenticate(db, token)
                logger.info(f"oauth_session_established user_id={profile.id} attempts={attempt}")
                return session, profile, attempt
            except (UnauthorizedError, UpstreamServiceError) as e:
                last_error = e
                logger.warning(f"oauth_session_pending attempt={attempt} error={e}")

        logger.error(f"oauth_session_failed attempts={len(delays)} error={last_error}")
        raise ServiceUnavailableError(
            "Session could not be established. Please sign in again.",
            details={"attempts": len(delays)},
        )
