"""Preference and theme routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_current_user, get_db
from domain.mappers import ProfileMapper
from domain.models import Profile
from domain.schemas.profile_schemas import (
    PreferencesResponse,
    PreferencesUpdate,
    ThemeUpdate,
)
from services.preference_service import PreferenceService

router = APIRouter(prefix="/preferences", tags=["Preferences"])
logger = logging.getLogger("mealprep.api.preferences")


@router.get("", response_model=PreferencesResponse)
def get_preferences(
    profile: Profile = Depends(get_current_user), db: Session = Depends(get_db)
):
    """Return preferences, creating the defaults on first read."""
    prefs = PreferenceService.get_preferences(db, profile)
    return ProfileMapper.preferences_to_response(prefs, profile.household_size)


@router.put("", response_model=PreferencesResponse)
def update_preferences(
    payload: PreferencesUpdate,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    prefs = PreferenceService.update_preferences(db, profile, payload)
    return ProfileMapper.preferences_to_response(prefs, profile.household_size)


@router.put("/theme", response_model=PreferencesResponse)
def update_theme(
    payload: ThemeUpdate,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Change theme and/or color scheme only."""
    prefs = PreferenceService.update_theme(db, profile, payload)
    return ProfileMapper.preferences_to_response(prefs, profile.household_size)
