"""
Recipe Repository - Data access layer for recipes, embeddings and the ingredient catalog
"""

from typing import List, Optional, Tuple
from uuid import UUID
from sqlalchemy import func, or_, case
from sqlalchemy.orm import Session

from repositories.base import BaseRepository
from domain.models import Recipe, RecipeEmbedding, Ingredient
from utils.sanitize import LIKE_ESCAPE, contains_pattern


class RecipeRepository(BaseRepository[Recipe]):
    """Repository for recipe data access"""

    def __init__(self, db: Session):
        super().__init__(db, Recipe)

    def list_by_user(
        self, user_id: UUID, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Recipe], int]:
        """Newest first, with total count for pagination"""
        query = self.db.query(Recipe).filter(Recipe.user_id == user_id)
        total = query.count()
        recipes = (
            query.order_by(Recipe.created_at.desc()).offset(offset).limit(limit).all()
        )
        return recipes, total

    def list_public(self, limit: int = 20, offset: int = 0) -> Tuple[List[Recipe], int]:
        query = self.db.query(Recipe).filter(Recipe.is_public.is_(True))
        total = query.count()
        recipes = (
            query.order_by(Recipe.created_at.desc()).offset(offset).limit(limit).all()
        )
        return recipes, total

    def search(self, user_id: UUID, text: str, limit: int = 20) -> List[Recipe]:
        """
        Case-insensitive match in title, description or searchable text.
        Title matches sort ahead of the rest, then newest first.
        """
        pattern = contains_pattern(text)
        title_match = Recipe.title.ilike(pattern, escape=LIKE_ESCAPE)
        return (
            self.db.query(Recipe)
            .filter(
                Recipe.user_id == user_id,
                or_(
                    title_match,
                    Recipe.description.ilike(pattern, escape=LIKE_ESCAPE),
                    Recipe.searchable_text.ilike(pattern, escape=LIKE_ESCAPE),
                ),
            )
            .order_by(case((title_match, 0), else_=1), Recipe.created_at.desc())
            .limit(limit)
            .all()
        )

    def find_by_title(
        self, user_id: UUID, title: str, exclude_id: Optional[UUID] = None
    ) -> Optional[Recipe]:
        """Title lookup that ignores case and surrounding whitespace"""
        query = self.db.query(Recipe).filter(
            Recipe.user_id == user_id,
            func.lower(func.trim(Recipe.title)) == title.strip().lower(),
        )
        if exclude_id is not None:
            query = query.filter(Recipe.id != exclude_id)
        return query.first()

    def slugs_for_user(self, user_id: UUID, exclude_id: Optional[UUID] = None) -> List[str]:
        query = self.db.query(Recipe.slug).filter(
            Recipe.user_id == user_id, Recipe.slug.isnot(None)
        )
        if exclude_id is not None:
            query = query.filter(Recipe.id != exclude_id)
        return [row[0] for row in query.all()]

    def get_many_for_user(self, recipe_ids: List[UUID], user_id: UUID) -> List[Recipe]:
        """Recipes the user may read (own or public) among ``recipe_ids``"""
        if not recipe_ids:
            return []
        return (
            self.db.query(Recipe)
            .filter(
                Recipe.id.in_(recipe_ids),
                or_(Recipe.user_id == user_id, Recipe.is_public.is_(True)),
            )
            .all()
        )


class RecipeEmbeddingRepository(BaseRepository[RecipeEmbedding]):
    def __init__(self, db: Session):
        super().__init__(db, RecipeEmbedding)

    def get_for_recipe(
        self, recipe_id: UUID, embedding_type: str = "recipe_content"
    ) -> Optional[RecipeEmbedding]:
        return (
            self.db.query(RecipeEmbedding)
            .filter(
                RecipeEmbedding.recipe_id == recipe_id,
                RecipeEmbedding.embedding_type == embedding_type,
            )
            .first()
        )


class IngredientRepository(BaseRepository[Ingredient]):
    """Repository for the global ingredient catalog"""

    def __init__(self, db: Session):
        super().__init__(db, Ingredient)

    def get_by_name(self, name: str) -> Optional[Ingredient]:
        return (
            self.db.query(Ingredient)
            .filter(func.lower(Ingredient.name) == name.strip().lower())
            .first()
        )

    def search(
        self,
        query: Optional[str] = None,
        category: Optional[str] = None,
        limit: int = 50,
    ) -> List[Ingredient]:
        q = self.db.query(Ingredient)
        if query:
            q = q.filter(Ingredient.name.ilike(contains_pattern(query), escape=LIKE_ESCAPE))
        if category:
            q = q.filter(func.lower(Ingredient.category) == category.lower())
        return q.order_by(Ingredient.name).limit(limit).all()
