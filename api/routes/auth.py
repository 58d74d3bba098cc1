"""Authentication routes: OAuth callback and current session"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_access_token, get_db
from domain.mappers import ProfileMapper
from domain.schemas.profile_schemas import (
    AuthUser,
    OAuthCallbackRequest,
    OAuthCallbackResponse,
    SessionResponse,
)
from services.auth_service import AuthService

router = APIRouter(prefix="/auth", tags=["Auth"])
logger = logging.getLogger("mealprep.api.auth")


@router.post("/callback", response_model=OAuthCallbackResponse)
def oauth_callback(payload: OAuthCallbackRequest, db: Session = Depends(get_db)):
    """
    Finish an OAuth sign-in: exchange the authorization code and wait until
    the session (and the profile row) is usable.
    """
    session, profile, attempts = AuthService.complete_oauth_callback(
        db, payload.code, payload.code_verifier
    )
    return OAuthCallbackResponse(
        access_token=session["access_token"],
        refresh_token=session.get("refresh_token"),
        expires_in=session.get("expires_in"),
        token_type=session.get("token_type") or "bearer",
        profile=ProfileMapper.to_response(profile),
        attempts=attempts,
    )


@router.get("/session", response_model=SessionResponse)
def current_session(token: str = Depends(get_access_token), db: Session = Depends(get_db)):
    """Return the signed-in user, their profile and roles."""
    user, profile = AuthService.authenticate(db, token)
    return SessionResponse(
        user=AuthUser(
            id=user["id"],
            email=user.get("email") or profile.email,
            user_metadata=user.get("user_metadata") or {},
        ),
        profile=ProfileMapper.to_response(profile),
    )
