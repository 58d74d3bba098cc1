"""Profile routes"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import logging

from api.dependencies import get_current_user, get_db
from domain.mappers import ProfileMapper
from domain.models import Profile
from domain.schemas.profile_schemas import ProfileResponse, ProfileUpdate
from services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["Profiles"])
logger = logging.getLogger("mealprep.api.profiles")


@router.get("/me", response_model=ProfileResponse)
def get_my_profile(profile: Profile = Depends(get_current_user)):
    return ProfileMapper.to_response(profile)


@router.put("/me", response_model=ProfileResponse)
def update_my_profile(
    payload: ProfileUpdate,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Update display name, names, avatar, timezone or household size."""
    updated = ProfileService.update_profile(db, profile, payload)
    return ProfileMapper.to_response(updated)
