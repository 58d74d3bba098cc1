"""Family member routes, scoped to the caller's family"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from api.dependencies import get_current_user, get_db
from api.responses import deleted_response
from domain.mappers import FamilyMemberMapper
from domain.models import Profile
from domain.schemas.profile_schemas import (
    FamilyMemberCreate,
    FamilyMemberResponse,
    FamilyMemberUpdate,
)
from services.family_service import FamilyService

router = APIRouter(prefix="/family/members", tags=["Family"])
logger = logging.getLogger("mealprep.api.family")


@router.get("", response_model=List[FamilyMemberResponse])
def list_members(
    include_inactive: bool = Query(False),
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    members = FamilyService.list_members(db, profile, include_inactive=include_inactive)
    return [FamilyMemberMapper.to_response(m) for m in members]


@router.get("/{member_id}", response_model=FamilyMemberResponse)
def get_member(
    member_id: UUID,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return FamilyMemberMapper.to_response(FamilyService.get_member(db, profile, member_id))


@router.post("", response_model=FamilyMemberResponse, status_code=status.HTTP_201_CREATED)
def add_member(
    payload: FamilyMemberCreate,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return FamilyMemberMapper.to_response(FamilyService.add_member(db, profile, payload))


@router.put("/{member_id}", response_model=FamilyMemberResponse)
def update_member(
    member_id: UUID,
    payload: FamilyMemberUpdate,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    member = FamilyService.update_member(db, profile, member_id, payload)
    return FamilyMemberMapper.to_response(member)


@router.delete("/{member_id}")
def remove_member(
    member_id: UUID,
    profile: Profile = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Soft delete: the member is deactivated, not removed."""
    FamilyService.remove_member(db, profile, member_id)
    return deleted_response(member_id)
