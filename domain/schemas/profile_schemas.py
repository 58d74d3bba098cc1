from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from uuid import UUID

from domain.enums import MeasurementSystem, Theme, ColorScheme


class AuthUser(BaseModel):
    """User resolved from a Supabase access token"""

    id: UUID
    email: str
    user_metadata: dict = {}


class ProfileResponse(BaseModel):
    id: UUID
    email: str
    display_name: str
    first_name: Optional[str] = ""
    last_name: Optional[str] = ""
    avatar_url: Optional[str] = None
    timezone: Optional[str] = "UTC"
    household_size: Optional[int] = 1
    family_id: Optional[UUID] = None
    roles: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class ProfileUpdate(BaseModel):
    display_name: Optional[str] = Field(None, min_length=1, max_length=255)
    first_name: Optional[str] = Field(None, max_length=255)
    last_name: Optional[str] = Field(None, max_length=255)
    avatar_url: Optional[str] = None
    timezone: Optional[str] = Field(None, max_length=50)
    household_size: Optional[int] = Field(None, ge=1, le=20)


class RoleResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    permissions: dict = {}

    model_config = {"from_attributes": True}


class RoleAssignment(BaseModel):
    role: str = Field(..., min_length=1, max_length=100)


class SessionResponse(BaseModel):
    user: AuthUser
    profile: ProfileResponse


class OAuthCallbackRequest(BaseModel):
    code: str = Field(..., min_length=1)
    code_verifier: Optional[str] = None


class OAuthCallbackResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"
    profile: ProfileResponse
    attempts: int


def _clean_list(values: Optional[List[str]]) -> List[str]:
    seen = []
    for value in values or []:
        v = value.strip()
        if v and v.lower() not in [s.lower() for s in seen]:
            seen.append(v)
    return seen


class PreferencesUpdate(BaseModel):
    dietary_restrictions: Optional[List[str]] = None
    allergies: Optional[List[str]] = None
    favorite_ingredients: Optional[List[str]] = None
    disliked_ingredients: Optional[List[str]] = None
    cuisine_preferences: Optional[List[str]] = None
    household_size: Optional[int] = Field(None, ge=1, le=20)
    measurement_system: Optional[MeasurementSystem] = None
    theme: Optional[Theme] = None
    color_scheme: Optional[ColorScheme] = None

    @field_validator(
        "dietary_restrictions",
        "allergies",
        "favorite_ingredients",
        "disliked_ingredients",
        "cuisine_preferences",
    )
    @classmethod
    def dedupe(cls, v):
        if v is None:
            return v
        return _clean_list(v)


class ThemeUpdate(BaseModel):
    theme: Optional[Theme] = None
    color_scheme: Optional[ColorScheme] = None


class PreferencesResponse(BaseModel):
    dietary_restrictions: List[str] = []
    allergies: List[str] = []
    favorite_ingredients: List[str] = []
    disliked_ingredients: List[str] = []
    cuisine_preferences: List[str] = []
    household_size: int = 1
    measurement_system: MeasurementSystem = MeasurementSystem.METRIC
    theme: Theme = Theme.SYSTEM
    color_scheme: ColorScheme = ColorScheme.DEFAULT
    updated_at: Optional[datetime] = None


class FamilyMemberCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    relationship: Optional[str] = Field(None, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=130)
    dietary_restrictions: List[str] = []
    allergies: List[str] = []
    preferences: dict = {}

    @field_validator("dietary_restrictions", "allergies")
    @classmethod
    def dedupe(cls, v):
        return _clean_list(v)


class FamilyMemberUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    relationship: Optional[str] = Field(None, max_length=100)
    age: Optional[int] = Field(None, ge=0, le=130)
    dietary_restrictions: Optional[List[str]] = None
    allergies: Optional[List[str]] = None
    preferences: Optional[dict] = None
    is_active: Optional[bool] = None


class FamilyMemberResponse(BaseModel):
    id: UUID
    family_id: UUID
    name: str
    relationship: Optional[str] = None
    age: Optional[int] = None
    dietary_restrictions: List[str] = []
    allergies: List[str] = []
    preferences: dict = {}
    is_active: bool = True
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
