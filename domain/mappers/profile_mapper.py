"""
Profile domain mappers.
Handles transformation between ORM models and DTOs for profile-related entities.
"""

from typing import Optional

from domain.models import Profile, UserPreference, FamilyMember
from domain.schemas.profile_schemas import (
    ProfileResponse,
    PreferencesResponse,
    FamilyMemberResponse,
)


class ProfileMapper:
    """Mapper for profile and preference transformations."""

    @staticmethod
    def to_response(profile: Profile) -> ProfileResponse:
        """
        Convert Profile ORM model to ProfileResponse DTO.

        Args:
            profile: Profile ORM instance with roles loaded

        Returns:
            ProfileResponse DTO including role names
        """
        return ProfileResponse(
            id=profile.id,
            email=profile.email,
            display_name=profile.display_name,
            first_name=profile.first_name or "",
            last_name=profile.last_name or "",
            avatar_url=profile.avatar_url,
            timezone=profile.timezone or "UTC",
            household_size=profile.household_size or 1,
            family_id=profile.family_id,
            roles=profile.role_names,
            created_at=profile.created_at,
            updated_at=profile.updated_at,
        )

    @staticmethod
    def preferences_to_response(
        prefs: UserPreference, household_size: Optional[int] = None
    ) -> PreferencesResponse:
        """Household size lives on the profile; pass it in alongside the row."""
        return PreferencesResponse(
            dietary_restrictions=prefs.dietary_restrictions or [],
            allergies=prefs.allergies or [],
            favorite_ingredients=prefs.favorite_ingredients or [],
            disliked_ingredients=prefs.disliked_ingredients or [],
            cuisine_preferences=prefs.cuisine_preferences or [],
            household_size=household_size or 1,
            measurement_system=prefs.measurement_system or "metric",
            theme=prefs.theme or "system",
            color_scheme=prefs.color_scheme or "default",
            updated_at=prefs.updated_at,
        )


class FamilyMemberMapper:
    @staticmethod
    def to_response(member: FamilyMember) -> FamilyMemberResponse:
        return FamilyMemberResponse(
            id=member.id,
            family_id=member.family_id,
            name=member.name,
            relationship=member.relationship_,
            age=member.age,
            dietary_restrictions=member.dietary_restrictions or [],
            allergies=member.allergies or [],
            preferences=member.preferences or {},
            is_active=member.is_active if member.is_active is not None else True,
            created_at=member.created_at,
            updated_at=member.updated_at,
        )
