"""Role routes. Assigning and revoking roles is admin only."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
from uuid import UUID
import logging

from api.dependencies import get_current_user, get_db, require_role
from api.responses import deleted_response
from domain.enums import RoleName
from domain.models import Profile
from domain.schemas.profile_schemas import RoleAssignment, RoleResponse
from services.role_service import RoleService

router = APIRouter(prefix="/roles", tags=["Roles"])
logger = logging.getLogger("mealprep.api.roles")


@router.get("", response_model=List[RoleResponse])
def list_roles(
    profile: Profile = Depends(get_current_user), db: Session = Depends(get_db)
):
    return [RoleResponse.model_validate(r) for r in RoleService.list_roles(db)]


@router.get("/me", response_model=List[RoleResponse])
def my_roles(profile: Profile = Depends(get_current_user), db: Session = Depends(get_db)):
    return [RoleResponse.model_validate(r) for r in RoleService.roles_for_user(db, profile.id)]


@router.post(
    "/users/{user_id}",
    response_model=RoleResponse,
    status_code=status.HTTP_201_CREATED,
)
def assign_role(
    user_id: UUID,
    payload: RoleAssignment,
    admin: Profile = Depends(require_role(RoleName.ADMIN.value)),
    db: Session = Depends(get_db),
):
    role = RoleService.assign_role(db, user_id, payload.role, assigned_by=admin.id)
    return RoleResponse.model_validate(role)


@router.delete("/users/{user_id}/{role_name}")
def revoke_role(
    user_id: UUID,
    role_name: str,
    admin: Profile = Depends(require_role(RoleName.ADMIN.value)),
    db: Session = Depends(get_db),
):
    RoleService.revoke_role(db, user_id, role_name)
    return deleted_response(f"{user_id}:{role_name}")
