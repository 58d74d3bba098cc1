"""User preferences, measurement system and theme"""

import logging
from sqlalchemy.orm import Session

from domain.models import Profile, UserPreference
from domain.schemas.profile_schemas import PreferencesUpdate, ThemeUpdate
from repositories import PreferenceRepository
from app.exceptions import ServiceValidationError
from services.webhook_service import WebhookService

logger = logging.getLogger("mealprep.preferences")


class PreferenceService:
    @staticmethod
    def get_preferences(db: Session, profile: Profile) -> UserPreference:
        """Return the caller's preferences, creating the default row on first read."""
        repo = PreferenceRepository(db)
        prefs = repo.get_by_user_id(profile.id)
        if prefs is None:
            prefs = repo.create(
                UserPreference(
                    user_id=profile.id,
                    dietary_restrictions=[],
                    allergies=[],
                    favorite_ingredients=[],
                    disliked_ingredients=[],
                    cuisine_preferences=[],
                    measurement_system="metric",
                    theme="system",
                    color_scheme="default",
                )
            )
            logger.info(f"preferences_created user_id={profile.id}")
        return prefs

    @staticmethod
    def update_preferences(
        db: Session, profile: Profile, data: PreferencesUpdate
    ) -> UserPreference:
        prefs = PreferenceService.get_preferences(db, profile)
        changes = data.model_dump(exclude_unset=True, mode="json")

        household_size = changes.pop("household_size", None)
        if household_size is not None:
            profile.household_size = household_size
        for field, value in changes.items():
            if value is not None:
                setattr(prefs, field, value)

        db.commit()
        db.refresh(prefs)
        logger.info(f"preferences_updated user_id={profile.id} fields={sorted(changes)}")
        WebhookService.preferences_updated(prefs, profile)
        return prefs

    @staticmethod
    def update_theme(db: Session, profile: Profile, data: ThemeUpdate) -> UserPreference:
        changes = data.model_dump(exclude_none=True, mode="json")
        if not changes:
            raise ServiceValidationError("Provide theme and/or color_scheme")
        prefs = PreferenceService.get_preferences(db, profile)
        for field, value in changes.items():
            setattr(prefs, field, value)
        db.commit()
        db.refresh(prefs)
        logger.info(
            f"theme_updated user_id={profile.id} theme={prefs.theme} "
            f"color_scheme={prefs.color_scheme}"
        )
        WebhookService.preferences_updated(prefs, profile)
        return prefs
