from typing import Any, Dict, Optional, Tuple
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
import logging

from app.config import settings
from domain.models import Profile, UserRole
from domain.schemas.profile_schemas import ProfileUpdate
from repositories import ProfileRepository, RoleRepository
from services.webhook_service import WebhookService

logger = logging.getLogger("mealprep.profile")


def derive_names(email: str, metadata: Optional[Dict[str, Any]]) -> Tuple[str, str, str]:
    """
    Work out (display_name, first_name, last_name) for a new profile.

    First/last come from explicit metadata, else from splitting ``full_name``
    or ``name``. The display name falls back from metadata ``display_name``
    to "first last" and finally to the local part of the email.
    """
    meta = metadata or {}
    full = (meta.get("full_name") or meta.get("name") or "").strip()
    parts = full.split()
    first = (meta.get("first_name") or (parts[0] if parts else "")).strip()
    last = (meta.get("last_name") or " ".join(parts[1:])).strip()

    display = (meta.get("display_name") or "").strip()
    if not display:
        display = f"{first} {last}".strip()
    if not display:
        display = (email or "").split("@")[0] or "User"
    return display, first, last


class ProfileService:
    """Business logic for profile management"""

    @staticmethod
    def ensure_profile(db: Session, auth_user: Dict[str, Any]) -> Profile:
        """
        Return the profile for an authenticated user, creating it (with the
        default role) when the database trigger has not done so yet.
        """
        repo = ProfileRepository(db)
        user_id = UUID(str(auth_user["id"]))
        profile = repo.get_by_id(user_id)
        if profile:
            return profile

        email = auth_user.get("email") or ""
        display_name, first, last = derive_names(email, auth_user.get("user_metadata"))
        profile = Profile(
            id=user_id,
            email=email,
            display_name=display_name,
            first_name=first,
            last_name=last,
            avatar_url=(auth_user.get("user_metadata") or {}).get("avatar_url"),
        )
        try:
            db.add(profile)
            db.flush()
            role = RoleRepository(db).get_by_name(settings.default_role)
            if role:
                db.add(UserRole(user_id=user_id, role_id=role.id))
            db.commit()
        except IntegrityError:
            # created concurrently (trigger or parallel request)
            db.rollback()
            profile = repo.get_by_id(user_id)
            if profile:
                return profile
            raise

        profile = repo.get_by_id(user_id)
        logger.info(f"profile_created user_id={user_id} role={settings.default_role}")
        WebhookService.user_registered(profile)
        return profile

    @staticmethod
    def update_profile(db: Session, profile: Profile, data: ProfileUpdate) -> Profile:
        changes = data.model_dump(exclude_unset=True)
        for field, value in changes.items():
            setattr(profile, field, value)
        db.commit()
        db.refresh(profile)
        logger.info(f"profile_updated user_id={profile.id} fields={sorted(changes)}")
        return profile
