"""
Profile Repository - Data access for profiles, roles, preferences and family members
"""

from typing import List, Optional
from uuid import UUID
from sqlalchemy.orm import Session, selectinload

from repositories.base import BaseRepository
from domain.models import Profile, Role, UserRole, UserPreference, FamilyMember


class ProfileRepository(BaseRepository[Profile]):
    """Repository for profile data access"""

    def __init__(self, db: Session):
        super().__init__(db, Profile)

    def get_by_id(self, user_id: UUID) -> Optional[Profile]:
        """Get profile by auth user id with roles loaded"""
        return (
            self.db.query(Profile)
            .options(selectinload(Profile.roles))
            .filter(Profile.id == user_id)
            .first()
        )

    def get_by_email(self, email: str) -> Optional[Profile]:
        return self.db.query(Profile).filter(Profile.email == email).first()


class RoleRepository(BaseRepository[Role]):
    def __init__(self, db: Session):
        super().__init__(db, Role)

    def get_by_name(self, name: str) -> Optional[Role]:
        return self.db.query(Role).filter(Role.name == name).first()

    def list_all(self) -> List[Role]:
        return self.db.query(Role).order_by(Role.name).all()


class UserRoleRepository(BaseRepository[UserRole]):
    def __init__(self, db: Session):
        super().__init__(db, UserRole)

    def get_assignment(self, user_id: UUID, role_id: UUID) -> Optional[UserRole]:
        return (
            self.db.query(UserRole)
            .filter(UserRole.user_id == user_id, UserRole.role_id == role_id)
            .first()
        )

    def list_for_user(self, user_id: UUID) -> List[UserRole]:
        return self.db.query(UserRole).filter(UserRole.user_id == user_id).all()


class PreferenceRepository(BaseRepository[UserPreference]):
    def __init__(self, db: Session):
        super().__init__(db, UserPreference)

    def get_by_user_id(self, user_id: UUID) -> Optional[UserPreference]:
        return (
            self.db.query(UserPreference)
            .filter(UserPreference.user_id == user_id)
            .first()
        )


class FamilyMemberRepository(BaseRepository[FamilyMember]):
    def __init__(self, db: Session):
        super().__init__(db, FamilyMember)

    def list_by_family(
        self, family_id: UUID, include_inactive: bool = False
    ) -> List[FamilyMember]:
        query = self.db.query(FamilyMember).filter(FamilyMember.family_id == family_id)
        if not include_inactive:
            query = query.filter(FamilyMember.is_active.is_(True))
        return query.order_by(FamilyMember.created_at).all()

    def get_by_id_and_family(
        self, member_id: UUID, family_id: UUID
    ) -> Optional[FamilyMember]:
        return (
            self.db.query(FamilyMember)
            .filter(FamilyMember.id == member_id, FamilyMember.family_id == family_id)
            .first()
        )
