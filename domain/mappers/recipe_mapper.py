"""
Recipe domain mappers.
"""

from typing import Optional

from domain.models import Recipe
from domain.schemas.recipe_schemas import RecipeResponse
from utils.units import convert_ingredient


class RecipeMapper:
    """Mapper for recipe transformations."""

    @staticmethod
    def to_response(
        recipe: Recipe, measurement_system: Optional[str] = None
    ) -> RecipeResponse:
        """
        Convert Recipe ORM model to RecipeResponse DTO.

        Args:
            recipe: Recipe ORM instance
            measurement_system: 'metric' or 'imperial' to convert ingredient
                amounts for display; stored values are never modified

        Returns:
            RecipeResponse DTO
        """
        ingredients = list(recipe.ingredients or [])
        if measurement_system:
            ingredients = [
                convert_ingredient(i, measurement_system) if isinstance(i, dict) else i
                for i in ingredients
            ]
        ingredients = [i if isinstance(i, dict) else {"name": str(i)} for i in ingredients]

        return RecipeResponse(
            id=recipe.id,
            user_id=recipe.user_id,
            title=recipe.title,
            slug=recipe.slug,
            description=recipe.description,
            ingredients=ingredients,
            instructions=list(recipe.instructions or []),
            prep_time=recipe.prep_time,
            cook_time=recipe.cook_time,
            total_time=recipe.total_time,
            servings=recipe.servings,
            difficulty=recipe.difficulty,
            tags=recipe.tags or [],
            cuisine=recipe.cuisine,
            image_url=recipe.image_url,
            rating=float(recipe.rating) if recipe.rating is not None else None,
            nutrition_info=recipe.nutrition_info,
            source_url=recipe.source_url,
            is_public=bool(recipe.is_public),
            created_at=recipe.created_at,
            updated_at=recipe.updated_at,
        )
