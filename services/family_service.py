"""Family member management, scoped to the caller's family"""

import logging
from typing import List
from uuid import UUID
from sqlalchemy.orm import Session

from domain.models import FamilyMember, Profile
from domain.schemas.profile_schemas import FamilyMemberCreate, FamilyMemberUpdate
from repositories import FamilyMemberRepository
from app.exceptions import NotFoundError, ServiceValidationError
from services.webhook_service import WebhookService

logger = logging.getLogger("mealprep.family")


class FamilyService:
    @staticmethod
    def _family_id(profile: Profile) -> UUID:
        if profile.family_id is None:
            raise ServiceValidationError("Profile is not part of a family")
        return profile.family_id

    @staticmethod
    def list_members(
        db: Session, profile: Profile, include_inactive: bool = False
    ) -> List[FamilyMember]:
        return FamilyMemberRepository(db).list_by_family(
            FamilyService._family_id(profile), include_inactive=include_inactive
        )

    @staticmethod
    def get_member(db: Session, profile: Profile, member_id: UUID) -> FamilyMember:
        member = FamilyMemberRepository(db).get_by_id_and_family(
            member_id, FamilyService._family_id(profile)
        )
        if not member:
            raise NotFoundError(f"Family member {member_id} not found")
        return member

    @staticmethod
    def add_member(db: Session, profile: Profile, data: FamilyMemberCreate) -> FamilyMember:
        member = FamilyMember(
            family_id=FamilyService._family_id(profile),
            name=data.name.strip(),
            relationship_=data.relationship,
            age=data.age,
            dietary_restrictions=data.dietary_restrictions,
            allergies=data.allergies,
            preferences=data.preferences,
            is_active=True,
        )
        member = FamilyMemberRepository(db).create(member)
        logger.info(f"family_member_added member_id={member.id} family_id={member.family_id}")
        WebhookService.family_member_added(member, profile)
        return member

    @staticmethod
    def update_member(
        db: Session, profile: Profile, member_id: UUID, data: FamilyMemberUpdate
    ) -> FamilyMember:
        member = FamilyService.get_member(db, profile, member_id)
        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            if field == "relationship":
                member.relationship_ = value
            else:
                setattr(member, field, value)
        member = FamilyMemberRepository(db).update(member)
        logger.info(f"family_member_updated member_id={member.id} fields={sorted(changes)}")
        WebhookService.family_member_updated(member, profile, changes)
        return member

    @staticmethod
    def remove_member(db: Session, profile: Profile, member_id: UUID) -> None:
        """Soft delete: the row stays with ``is_active`` false."""
        member = FamilyService.get_member(db, profile, member_id)
        member.is_active = False
        FamilyMemberRepository(db).update(member)
        logger.info(f"family_member_removed member_id={member_id}")
        WebhookService.family_member_removed(member_id, profile)
