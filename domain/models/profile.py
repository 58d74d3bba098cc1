"""
Profile, role, family and preference models.
"""

from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Boolean,
    TIMESTAMP,
    ForeignKey,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import UUID, JSONB, ARRAY
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class Profile(Base):
    """Application profile; ``id`` equals the Supabase auth user id"""

    __tablename__ = "profiles"

    id = Column(UUID(as_uuid=True), primary_key=True)
    email = Column(String(255), unique=True, nullable=False)
    display_name = Column(String(255), nullable=False)
    first_name = Column(String(255), default="")
    last_name = Column(String(255), default="")
    avatar_url = Column(Text)
    timezone = Column(String(50), default="UTC")
    household_size = Column(Integer, default=1)
    family_id = Column(UUID(as_uuid=True), default=uuid.uuid4, index=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    roles = relationship(
        "UserRole",
        back_populates="user",
        cascade="all, delete-orphan",
        foreign_keys="UserRole.user_id",
    )
    preferences = relationship(
        "UserPreference",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
    )

    @property
    def role_names(self) -> list[str]:
        return sorted(ur.role.name for ur in self.roles if ur.role is not None)


class Role(Base):
    __tablename__ = "roles"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text)
    permissions = Column(JSONB, default=dict)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class UserRole(Base):
    __tablename__ = "user_roles"
    __table_args__ = (UniqueConstraint("user_id", "role_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role_id = Column(
        UUID(as_uuid=True),
        ForeignKey("roles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    assigned_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    assigned_by = Column(
        UUID(as_uuid=True), ForeignKey("profiles.id", ondelete="SET NULL")
    )

    user = relationship("Profile", back_populates="roles", foreign_keys=[user_id])
    role = relationship("Role", lazy="joined")


class FamilyMember(Base):
    """A household member sharing the owner's ``family_id``"""

    __tablename__ = "family_members"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    family_id = Column(UUID(as_uuid=True), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    relationship_ = Column("relationship", String(100))
    age = Column(Integer)
    dietary_restrictions = Column(ARRAY(Text), default=list)
    allergies = Column(ARRAY(Text), default=list)
    preferences = Column(JSONB, default=dict)
    is_active = Column(Boolean, default=True)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class UserPreference(Base):
    """Dietary, measurement and theme preferences for a profile"""

    __tablename__ = "user_preferences"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    dietary_restrictions = Column(ARRAY(Text), default=list)
    allergies = Column(ARRAY(Text), default=list)
    favorite_ingredients = Column(ARRAY(Text), default=list)
    disliked_ingredients = Column(ARRAY(Text), default=list)
    cuisine_preferences = Column(ARRAY(Text), default=list)
    measurement_system = Column(String(20), default="metric", nullable=False)
    theme = Column(String(20), default="system", nullable=False)
    color_scheme = Column(String(50), default="default", nullable=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    user = relationship("Profile", back_populates="preferences")
