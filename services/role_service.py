"""Role lookup and assignment"""

import logging
from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from domain.models import Role, UserRole
from repositories import ProfileRepository, RoleRepository, UserRoleRepository
from app.exceptions import NotFoundError, ConflictError

logger = logging.getLogger("mealprep.roles")


class RoleService:
    @staticmethod
    def list_roles(db: Session) -> List[Role]:
        return RoleRepository(db).list_all()

    @staticmethod
    def roles_for_user(db: Session, user_id: UUID) -> List[Role]:
        return [ur.role for ur in UserRoleRepository(db).list_for_user(user_id)]

    @staticmethod
    def _load(db: Session, user_id: UUID, role_name: str):
        if not ProfileRepository(db).get_by_id(user_id):
            raise NotFoundError(f"Profile {user_id} not found")
        role = RoleRepository(db).get_by_name(role_name)
        if not role:
            raise NotFoundError(f"Role '{role_name}' not found")
        return role

    @staticmethod
    def assign_role(db: Session, user_id: UUID, role_name: str, assigned_by: UUID) -> Role:
        role = RoleService._load(db, user_id, role_name)
        repo = UserRoleRepository(db)
        if repo.get_assignment(user_id, role.id):
            raise ConflictError(f"Profile already has role '{role_name}'")
        repo.create(UserRole(user_id=user_id, role_id=role.id, assigned_by=assigned_by))
        logger.info(f"role_assigned user_id={user_id} role={role_name} by={assigned_by}")
        return role

    @staticmethod
    def revoke_role(db: Session, user_id: UUID, role_name: str) -> None:
        role = RoleService._load(db, user_id, role_name)
        repo = UserRoleRepository(db)
        assignment = repo.get_assignment(user_id, role.id)
        if not assignment:
            raise NotFoundError(f"Profile does not have role '{role_name}'")
        repo.delete(assignment)
        logger.info(f"role_revoked user_id={user_id} role={role_name}")
