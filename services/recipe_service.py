from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID
import logging

from pydantic import ValidationError
from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from domain.enums import Difficulty
from domain.models import Profile, Recipe
from domain.schemas.recipe_schemas import RecipeCreate, RecipeUpdate
from repositories import RecipeRepository
from app.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    ServiceValidationError,
)
from services.embedding_service import EmbeddingService
from services.webhook_service import WebhookService
from utils.sanitize import strip_html
from utils.slugify import generate_unique_slug

logger = logging.getLogger("mealprep.recipe")

DUPLICATE_TITLE_MESSAGE = "A recipe with this title already exists"

# NOT NULL columns an update may not clear
REQUIRED_RECIPE_FIELDS = ("title", "ingredients", "instructions")

# model output keys -> column names
_EXTRACTED_KEYS = {
    "prepTime": "prep_time",
    "cookTime": "cook_time",
    "totalTime": "total_time",
    "imageUrl": "image_url",
    "sourceUrl": "source_url",
    "nutrition": "nutrition_info",
}


def build_searchable_text(recipe: Recipe) -> str:
    """Flattened lowercase text used by keyword search and embeddings."""
    parts: List[str] = [recipe.title or "", recipe.description or "", recipe.cuisine or ""]
    for ingredient in recipe.ingredients or []:
        if isinstance(ingredient, dict):
            parts.append(ingredient.get("name") or "")
        else:
            parts.append(str(ingredient))
    parts.extend(recipe.tags or [])
    return " ".join(p.strip() for p in parts if p and p.strip()).lower()


def _to_number(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def normalize_extracted_recipe(raw: Dict[str, Any]) -> RecipeCreate:
    """
    Turn a model-extracted recipe dict into a validated ``RecipeCreate``.

    Accepts camelCase keys, string ingredients and step objects, and drops
    values that cannot be coerced instead of failing the whole recipe.
    """
    data: Dict[str, Any] = {}
    for key, value in raw.items():
        data[_EXTRACTED_KEYS.get(key, key)] = value

    ingredients = []
    for item in data.get("ingredients") or []:
        if isinstance(item, str):
            ingredients.append({"name": item})
        elif isinstance(item, dict):
            name = item.get("name") or item.get("item")
            if not name:
                continue
            ingredients.append(
                {
                    "name": str(name),
                    "amount": _to_number(item.get("amount")),
                    "unit": item.get("unit"),
                    "category": item.get("category"),
                    "notes": item.get("notes"),
                }
            )
    data["ingredients"] = ingredients

    steps = []
    for step in data.get("instructions") or []:
        if isinstance(step, dict):
            step = step.get("text") or step.get("instruction") or step.get("step")
        if step:
            steps.append(str(step))
    data["instructions"] = steps

    for key in ("prep_time", "cook_time", "total_time", "servings"):
        number = _to_number(data.get(key))
        data[key] = int(number) if number is not None and number >= 0 else None
    if not data.get("servings"):
        data["servings"] = 4

    if data.get("difficulty") not in {d.value for d in Difficulty}:
        data["difficulty"] = Difficulty.MEDIUM.value
    if not isinstance(data.get("nutrition_info"), dict):
        data["nutrition_info"] = None
    data["tags"] = [str(t) for t in data.get("tags") or [] if t]

    allowed = set(RecipeCreate.model_fields)
    try:
        return RecipeCreate(**{k: v for k, v in data.items() if k in allowed})
    except ValidationError as e:
        raise ServiceValidationError(
            "Extracted recipe is incomplete", details={"errors": e.errors(include_url=False)}
        )


class RecipeService:
    """Business logic for recipes"""

    @staticmethod
    def list_recipes(
        db: Session, user_id: UUID, limit: int = 20, offset: int = 0
    ) -> Tuple[List[Recipe], int]:
        return RecipeRepository(db).list_by_user(user_id, limit=limit, offset=offset)

    @staticmethod
    def list_public(db: Session, limit: int = 20, offset: int = 0) -> Tuple[List[Recipe], int]:
        return RecipeRepository(db).list_public(limit=limit, offset=offset)

    @staticmethod
    def search_recipes(db: Session, user_id: UUID, query: str, limit: int = 20) -> List[Recipe]:
        text = strip_html(query or "")
        if not text:
            raise ServiceValidationError("Search query is required")
        results = RecipeRepository(db).search(user_id, text, limit=limit)
        logger.info(f"recipe_search user_id={user_id} q={text!r} results={len(results)}")
        return results

    @staticmethod
    def get_recipe(db: Session, recipe_id: UUID, user_id: UUID) -> Recipe:
        """Owner or anyone for public recipes."""
        recipe = RecipeRepository(db).get_by_id(recipe_id)
        if not recipe:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        if recipe.user_id != user_id and not recipe.is_public:
            raise ForbiddenError("You do not have access to this recipe")
        return recipe

    @staticmethod
    def _get_owned(db: Session, recipe_id: UUID, user_id: UUID) -> Recipe:
        recipe = RecipeRepository(db).get_by_id(recipe_id)
        if not recipe:
            raise NotFoundError(f"Recipe {recipe_id} not found")
        if recipe.user_id != user_id:
            raise ForbiddenError("Only the owner can modify this recipe")
        return recipe

    @staticmethod
    def create_recipe(db: Session, profile: Profile, data: RecipeCreate) -> Recipe:
        repo = RecipeRepository(db)
        if repo.find_by_title(profile.id, data.title):
            raise ConflictError(DUPLICATE_TITLE_MESSAGE, details={"title": data.title})

        fields = data.model_dump(mode="json")
        recipe = Recipe(user_id=profile.id, **fields)
        recipe.tags = fields.get("tags") or []
        recipe.slug = generate_unique_slug(data.title, repo.slugs_for_user(profile.id))
        recipe.searchable_text = build_searchable_text(recipe)

        try:
            recipe = repo.create(recipe)
        except IntegrityError:
            db.rollback()
            raise ConflictError(DUPLICATE_TITLE_MESSAGE, details={"title": data.title})

        logger.info(f"recipe_created recipe_id={recipe.id} user_id={profile.id} slug={recipe.slug}")
        EmbeddingService.store_recipe_embedding(db, recipe)
        WebhookService.recipe_created(recipe, profile)
        return recipe

    @staticmethod
    def create_from_extracted(db: Session, profile: Profile, raw: Dict[str, Any]) -> Recipe:
        return RecipeService.create_recipe(db, profile, normalize_extracted_recipe(raw))

    @staticmethod
    def update_recipe(
        db: Session, profile: Profile, recipe_id: UUID, data: RecipeUpdate
    ) -> Recipe:
        repo = RecipeRepository(db)
        recipe = RecipeService._get_owned(db, recipe_id, profile.id)
        changes = data.model_dump(exclude_unset=True, mode="json")
        nulled = sorted(f for f in REQUIRED_RECIPE_FIELDS if f in changes and changes[f] is None)
        if nulled:
            raise ServiceValidationError(
                f"{', '.join(nulled)} cannot be null", details={"fields": nulled}
            )

        new_title = changes.get("title")
        if new_title is not None:
            new_title = new_title.strip()
            if not new_title:
                raise ServiceValidationError("title must not be blank")
            changes["title"] = new_title
            if repo.find_by_title(profile.id, new_title, exclude_id=recipe.id):
                raise ConflictError(DUPLICATE_TITLE_MESSAGE, details={"title": new_title})
            if new_title.lower() != (recipe.title or "").strip().lower():
                recipe.slug = generate_unique_slug(
                    new_title, repo.slugs_for_user(profile.id, exclude_id=recipe.id)
                )

        for field, value in changes.items():
            setattr(recipe, field, value)
        recipe.searchable_text = build_searchable_text(recipe)

        try:
            recipe = repo.update(recipe)
        except IntegrityError:
            db.rollback()
            raise ConflictError(DUPLICATE_TITLE_MESSAGE)

        logger.info(f"recipe_updated recipe_id={recipe.id} fields={sorted(changes)}")
        EmbeddingService.store_recipe_embedding(db, recipe)
        WebhookService.recipe_updated(recipe, profile, changes)
        return recipe

    @staticmethod
    def delete_recipe(db: Session, profile: Profile, recipe_id: UUID) -> None:
        recipe = RecipeService._get_owned(db, recipe_id, profile.id)
        RecipeRepository(db).delete(recipe)
        logger.info(f"recipe_deleted recipe_id={recipe_id} user_id={profile.id}")
        WebhookService.recipe_deleted(recipe_id, profile)
