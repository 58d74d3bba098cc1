"""
Recipe, recipe embedding and ingredient catalog models.
"""

from sqlalchemy import (
    Column,
    String,
    Text,
    Integer,
    Boolean,
    Numeric,
    Float,
    TIMESTAMP,
    ForeignKey,
)
from sqlalchemy.dialects.postgresql import UUID, JSONB, ARRAY
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from domain.models.database import Base


class Recipe(Base):
    """A user's saved recipe"""

    __tablename__ = "recipes"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    title = Column(String(255), nullable=False)
    slug = Column(String(255))
    description = Column(Text)
    ingredients = Column(JSONB, nullable=False, default=list)
    instructions = Column(JSONB, nullable=False, default=list)
    prep_time = Column(Integer)
    cook_time = Column(Integer)
    total_time = Column(Integer)
    servings = Column(Integer, default=4)
    difficulty = Column(String(20), default="medium")
    tags = Column(ARRAY(Text), default=list)
    cuisine = Column(String(100))
    image_url = Column(Text)
    rating = Column(Numeric(3, 2))
    nutrition_info = Column(JSONB)
    source_url = Column(Text)
    is_public = Column(Boolean, default=False)
    searchable_text = Column(Text)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    embeddings = relationship(
        "RecipeEmbedding", back_populates="recipe", cascade="all, delete-orphan"
    )


class RecipeEmbedding(Base):
    """Embedding of a recipe's searchable text, read by the n8n RAG workflow"""

    __tablename__ = "recipe_embeddings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    recipe_id = Column(
        UUID(as_uuid=True),
        ForeignKey("recipes.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    embedding = Column(ARRAY(Float))
    text_content = Column(Text, nullable=False)
    embedding_type = Column(String(50), default="recipe_content")
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    recipe = relationship("Recipe", back_populates="embeddings")


class Ingredient(Base):
    """Global ingredient catalog"""

    __tablename__ = "ingredients"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), unique=True, nullable=False)
    category = Column(String(100))
    subcategory = Column(String(100))
    common_names = Column(ARRAY(Text), default=list)
    nutrition_info = Column(JSONB)
    typical_unit = Column(String(50))
    typical_price = Column(Numeric(10, 2))
    is_common = Column(Boolean, default=False)
    created_at = Column(TIMESTAMP(timezone=True), server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True), server_default=func.now(), onupdate=func.now()
    )
