"""
Recipe tests: CRUD routes, per-user ownership, duplicate titles, slugs,
measurement conversion and normalization of model-extracted recipes.
"""

import uuid
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from pydantic import ValidationError
from sqlalchemy.dialects import postgresql

from test_fixtures import (
    API,
    client,
    current_profile,
    make_profile,
    make_recipe,
)
from app.exceptions import ConflictError, ForbiddenError, ServiceValidationError
from domain.schemas.recipe_schemas import IngredientCreate, RecipeCreate, RecipeUpdate
from repositories.recipe_repository import IngredientRepository, RecipeRepository
from services import ingredient_service, recipe_service
from services.ingredient_service import IngredientService
from services.recipe_service import (
    RecipeService,
    build_searchable_text,
    normalize_extracted_recipe,
)

NEW_RECIPE = {
    "title": "Lemon Garlic Chicken",
    "ingredients": [{"name": "chicken thighs", "amount": 800, "unit": "g"}],
    "instructions": ["Roast for 35 minutes"],
    "tags": ["Dinner", "dinner ", "Chicken"],
}


# =============================================================================
# ROUTES
# =============================================================================


def test_list_recipes(monkeypatch, current_profile):
    recipes = [make_recipe(user_id=current_profile.id), make_recipe(user_id=current_profile.id, title="Tomato Soup")]
    monkeypatch.setattr(
        RecipeService, "list_recipes", lambda db, uid, limit=20, offset=0: (recipes, 7)
    )

    r = client.get(f"{API}/recipes?limit=2&offset=4")
    assert r.status_code == 200
    body = r.json()
    assert body["total"] == 7
    assert body["limit"] == 2 and body["offset"] == 4
    assert [x["title"] for x in body["recipes"]] == ["Lemon Garlic Chicken", "Tomato Soup"]


def test_get_recipe_in_imperial_units(monkeypatch, current_profile):
    recipe = make_recipe(user_id=current_profile.id)
    monkeypatch.setattr(RecipeService, "get_recipe", lambda db, rid, uid: recipe)

    r = client.get(f"{API}/recipes/{recipe.id}?measurement_system=imperial")
    assert r.status_code == 200
    ingredients = r.json()["ingredients"]
    assert ingredients[0]["amount"] == 28.2
    assert ingredients[0]["unit"] == "oz"
    # countable and already-imperial units are untouched
    assert ingredients[1] == recipe.ingredients[1]
    assert ingredients[2]["unit"] == "tbsp"
    # stored values are never modified
    assert recipe.ingredients[0]["amount"] == 800


def test_get_recipe_rejects_unknown_measurement_system(current_profile):
    r = client.get(f"{API}/recipes/{uuid.uuid4()}?measurement_system=cubits")
    assert r.status_code == 422


def test_create_recipe_route(monkeypatch, current_profile):
    seen = {}

    def create(db, profile, data):
        seen["data"] = data
        return make_recipe(user_id=profile.id, title=data.title)

    monkeypatch.setattr(RecipeService, "create_recipe", create)
    r = client.post(f"{API}/recipes", json=NEW_RECIPE)
    assert r.status_code == 201
    assert r.json()["user_id"] == str(current_profile.id)
    assert seen["data"].tags == ["chicken", "dinner"]


def test_create_recipe_requires_ingredients(current_profile):
    r = client.post(f"{API}/recipes", json={**NEW_RECIPE, "ingredients": []})
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


def test_duplicate_title_is_409(monkeypatch, current_profile):
    def conflict(db, profile, data):
        raise ConflictError(recipe_service.DUPLICATE_TITLE_MESSAGE, details={"title": data.title})

    monkeypatch.setattr(RecipeService, "create_recipe", conflict)
    r = client.post(f"{API}/recipes", json=NEW_RECIPE)
    assert r.status_code == 409
    assert r.json()["error"]["message"] == "A recipe with this title already exists"


def test_search_requires_query(current_profile):
    assert client.get(f"{API}/recipes/search").status_code == 422


def test_delete_recipe_of_another_user_is_403(monkeypatch, current_profile):
    def forbidden(db, profile, rid):
        raise ForbiddenError("Only the owner can modify this recipe")

    monkeypatch.setattr(RecipeService, "delete_recipe", forbidden)
    r = client.delete(f"{API}/recipes/{uuid.uuid4()}")
    assert r.status_code == 403


def test_delete_recipe(monkeypatch, current_profile):
    monkeypatch.setattr(RecipeService, "delete_recipe", lambda db, profile, rid: None)
    rid = uuid.uuid4()
    r = client.delete(f"{API}/recipes/{rid}")
    assert r.status_code == 200
    assert r.json()["deleted"] == str(rid)


# =============================================================================
# SERVICE
# =============================================================================


class _FakeRecipeRepo:
    def __init__(self, existing_title=None, slugs=(), stored=None):
        self.existing_title = existing_title
        self.slugs = list(slugs)
        self.stored = stored
        self.created = []
        self.updated = []
        self.deleted = []

    def find_by_title(self, user_id, title, exclude_id=None):
        if self.existing_title and title.strip().lower() == self.existing_title.lower():
            return make_recipe(user_id=user_id, title=self.existing_title)
        return None

    def slugs_for_user(self, user_id, exclude_id=None):
        return self.slugs

    def create(self, recipe):
        self.created.append(recipe)
        return recipe

    def get_by_id(self, recipe_id):
        if self.stored is not None and self.stored.id == recipe_id:
            return self.stored
        return None

    def update(self, recipe):
        self.updated.append(recipe)
        return recipe

    def delete(self, recipe):
        self.deleted.append(recipe)

    def search(self, user_id, text, limit=20):
        self.searched = text
        return []


@pytest.fixture
def quiet_side_effects(monkeypatch):
    events = []
    monkeypatch.setattr(recipe_service.EmbeddingService, "store_recipe_embedding", lambda db, r: None)
    monkeypatch.setattr(recipe_service.WebhookService, "recipe_created", lambda r, u: None)
    monkeypatch.setattr(
        recipe_service.WebhookService,
        "recipe_updated",
        lambda r, u, changes: events.append(("recipe.updated", r.id, changes)),
    )
    monkeypatch.setattr(
        recipe_service.WebhookService,
        "recipe_deleted",
        lambda rid, u: events.append(("recipe.deleted", rid, None)),
    )
    return events


def test_create_recipe_rejects_duplicate_title(monkeypatch, quiet_side_effects):
    repo = _FakeRecipeRepo(existing_title="lemon garlic chicken")
    monkeypatch.setattr(recipe_service, "RecipeRepository", lambda db: repo)

    with pytest.raises(ConflictError):
        RecipeService.create_recipe(MagicMock(), make_profile(), RecipeCreate(**NEW_RECIPE))
    assert repo.created == []


def test_create_recipe_assigns_unique_slug(monkeypatch, quiet_side_effects):
    repo = _FakeRecipeRepo(slugs=["lemon-garlic-chicken"])
    monkeypatch.setattr(recipe_service, "RecipeRepository", lambda db: repo)
    profile = make_profile()

    recipe = RecipeService.create_recipe(MagicMock(), profile, RecipeCreate(**NEW_RECIPE))
    assert recipe.slug == "lemon-garlic-chicken-2"
    assert recipe.user_id == profile.id
    assert "chicken thighs" in recipe.searchable_text


def test_get_private_recipe_of_other_user_is_forbidden(monkeypatch):
    recipe = make_recipe(is_public=False)
    monkeypatch.setattr(
        recipe_service, "RecipeRepository", lambda db: SimpleNamespace(get_by_id=lambda rid: recipe)
    )
    with pytest.raises(ForbiddenError):
        RecipeService.get_recipe(MagicMock(), recipe.id, uuid.uuid4())


def test_public_recipe_is_readable_by_anyone(monkeypatch):
    recipe = make_recipe(is_public=True)
    monkeypatch.setattr(
        recipe_service, "RecipeRepository", lambda db: SimpleNamespace(get_by_id=lambda rid: recipe)
    )
    assert RecipeService.get_recipe(MagicMock(), recipe.id, uuid.uuid4()) is recipe


def test_search_rejects_blank_query():
    with pytest.raises(ServiceValidationError):
        RecipeService.search_recipes(MagicMock(), uuid.uuid4(), "   ")


def test_search_strips_markup_from_query(monkeypatch):
    repo = _FakeRecipeRepo()
    monkeypatch.setattr(recipe_service, "RecipeRepository", lambda db: repo)

    RecipeService.search_recipes(MagicMock(), uuid.uuid4(), "<b>soup</b> ")
    assert repo.searched == "soup"
    with pytest.raises(ServiceValidationError):
        RecipeService.search_recipes(MagicMock(), uuid.uuid4(), "<br/>")


def test_update_recipe_rename_regenerates_slug(monkeypatch, quiet_side_effects):
    profile = make_profile()
    stored = make_recipe(user_id=profile.id)
    repo = _FakeRecipeRepo(slugs=["tomato-soup"], stored=stored)
    monkeypatch.setattr(recipe_service, "RecipeRepository", lambda db: repo)

    recipe = RecipeService.update_recipe(
        MagicMock(), profile, stored.id, RecipeUpdate(title="  Tomato Soup ")
    )
    assert recipe.title == "Tomato Soup"
    assert recipe.slug == "tomato-soup-2"
    assert recipe.searchable_text.startswith("tomato soup")
    assert repo.updated == [stored]
    assert quiet_side_effects == [("recipe.updated", stored.id, {"title": "Tomato Soup"})]


def test_update_recipe_same_title_keeps_slug(monkeypatch, quiet_side_effects):
    profile = make_profile()
    stored = make_recipe(user_id=profile.id)
    repo = _FakeRecipeRepo(slugs=["lemon-garlic-chicken-2"], stored=stored)
    monkeypatch.setattr(recipe_service, "RecipeRepository", lambda db: repo)

    recipe = RecipeService.update_recipe(
        MagicMock(), profile, stored.id, RecipeUpdate(title="lemon garlic chicken", cuisine="Greek")
    )
    assert recipe.slug == "lemon-garlic-chicken"
    assert "greek" in recipe.searchable_text


def test_update_recipe_rename_to_existing_title_is_conflict(monkeypatch, quiet_side_effects):
    profile = make_profile()
    stored = make_recipe(user_id=profile.id)
    repo = _FakeRecipeRepo(existing_title="Tomato Soup", stored=stored)
    monkeypatch.setattr(recipe_service, "RecipeRepository", lambda db: repo)

    with pytest.raises(ConflictError):
        RecipeService.update_recipe(
            MagicMock(), profile, stored.id, RecipeUpdate(title="  TOMATO soup ")
        )
    assert stored.title == "Lemon Garlic Chicken"
    assert repo.updated == []
    assert quiet_side_effects == []


def test_update_recipe_rejects_null_required_fields(monkeypatch, quiet_side_effects):
    profile = make_profile()
    stored = make_recipe(user_id=profile.id)
    repo = _FakeRecipeRepo(stored=stored)
    monkeypatch.setattr(recipe_service, "RecipeRepository", lambda db: repo)

    with pytest.raises(ServiceValidationError) as exc:
        RecipeService.update_recipe(
            MagicMock(),
            profile,
            stored.id,
            RecipeUpdate.model_validate({"title": None, "ingredients": None}),
        )
    assert exc.value.details == {"fields": ["ingredients", "title"]}
    assert stored.title == "Lemon Garlic Chicken"
    assert stored.ingredients
    assert repo.updated == []


def test_update_recipe_of_another_user_is_forbidden(monkeypatch, quiet_side_effects):
    stored = make_recipe()
    monkeypatch.setattr(recipe_service, "RecipeRepository", lambda db: _FakeRecipeRepo(stored=stored))

    with pytest.raises(ForbiddenError):
        RecipeService.update_recipe(MagicMock(), make_profile(), stored.id, RecipeUpdate(title="Mine"))


def test_delete_recipe_emits_event(monkeypatch, quiet_side_effects):
    profile = make_profile()
    stored = make_recipe(user_id=profile.id)
    repo = _FakeRecipeRepo(stored=stored)
    monkeypatch.setattr(recipe_service, "RecipeRepository", lambda db: repo)

    RecipeService.delete_recipe(MagicMock(), profile, stored.id)
    assert repo.deleted == [stored]
    assert quiet_side_effects == [("recipe.deleted", stored.id, None)]


def test_put_null_title_is_400(monkeypatch, current_profile, quiet_side_effects):
    stored = make_recipe(user_id=current_profile.id)
    monkeypatch.setattr(recipe_service, "RecipeRepository", lambda db: _FakeRecipeRepo(stored=stored))

    r = client.put(f"{API}/recipes/{stored.id}", json={"title": None})
    assert r.status_code == 400
    assert r.json()["error"]["code"] == "SERVICE_VALIDATION_ERROR"
    assert stored.title == "Lemon Garlic Chicken"


def test_recipe_markup_is_stripped(monkeypatch, current_profile):
    seen = {}

    def create(db, profile, data):
        seen["data"] = data
        return make_recipe(user_id=profile.id, title=data.title)

    monkeypatch.setattr(RecipeService, "create_recipe", create)
    payload = {**NEW_RECIPE, "title": "<b>Apple</b> Pie", "description": "<script>x</script>Flaky crust"}
    r = client.post(f"{API}/recipes", json=payload)
    assert r.status_code == 201
    assert seen["data"].title == "Apple Pie"
    assert seen["data"].description == "xFlaky crust"


def test_update_title_of_only_markup_is_rejected():
    with pytest.raises(ValidationError):
        RecipeUpdate(title="<p></p>")


# =============================================================================
# REPOSITORY
# =============================================================================


def _compiled(clause):
    return clause.compile(dialect=postgresql.dialect())


def test_recipe_search_escapes_like_wildcards():
    db = MagicMock()
    RecipeRepository(db).search(uuid.uuid4(), "50%_off")

    _, text_filter = db.query.return_value.filter.call_args.args
    compiled = _compiled(text_filter)
    patterns = {v for v in compiled.params.values() if isinstance(v, str)}
    assert patterns == {"%50\\%\\_off%"}
    assert str(compiled).count("ESCAPE") == 3


def test_ingredient_search_escapes_like_wildcards():
    db = MagicMock()
    IngredientRepository(db).search(query="_")

    (name_filter,) = db.query.return_value.filter.call_args.args
    compiled = _compiled(name_filter)
    assert list(compiled.params.values()) == ["%\\_%"]
    assert "ESCAPE" in str(compiled)


def test_build_searchable_text():
    recipe = make_recipe(ingredients=[{"name": "Basil"}, "Tomatoes"])
    text = build_searchable_text(recipe)
    assert text.startswith("lemon garlic chicken")
    assert "basil" in text and "tomatoes" in text
    assert "mediterranean" in text


# =============================================================================
# EXTRACTED RECIPES
# =============================================================================


def test_normalize_extracted_recipe_maps_model_output():
    data = normalize_extracted_recipe(
        {
            "title": "Pancakes",
            "ingredients": ["2 eggs", {"name": "flour", "amount": "1.5", "unit": "cups"}, {"amount": 1}],
            "instructions": [{"text": "Mix"}, "Fry", ""],
            "prepTime": "10",
            "cookTime": -5,
            "difficulty": "impossible",
            "nutrition": "lots",
        }
    )
    assert [i.name for i in data.ingredients] == ["2 eggs", "flour"]
    assert data.ingredients[1].amount == 1.5
    assert data.instructions == ["Mix", "Fry"]
    assert data.prep_time == 10
    assert data.cook_time is None
    assert data.servings == 4
    assert data.difficulty.value == "medium"
    assert data.nutrition_info is None


def test_normalize_extracted_recipe_without_instructions_fails():
    with pytest.raises(ServiceValidationError) as exc:
        normalize_extracted_recipe({"title": "Toast", "ingredients": ["bread"], "instructions": []})
    assert exc.value.message == "Extracted recipe is incomplete"


# =============================================================================
# INGREDIENT CATALOG
# =============================================================================


def test_create_ingredient_normalizes_name(monkeypatch):
    created = []
    monkeypatch.setattr(
        ingredient_service,
        "IngredientRepository",
        lambda db: SimpleNamespace(get_by_name=lambda name: None, create=lambda i: created.append(i) or i),
    )
    ingredient = IngredientService.create_ingredient(
        MagicMock(), IngredientCreate(name="  Basil ", category="herbs")
    )
    assert ingredient.name == "basil"
    assert created == [ingredient]


def test_create_duplicate_ingredient_is_conflict(monkeypatch):
    monkeypatch.setattr(
        ingredient_service,
        "IngredientRepository",
        lambda db: SimpleNamespace(get_by_name=lambda name: SimpleNamespace(name=name)),
    )
    with pytest.raises(ConflictError):
        IngredientService.create_ingredient(MagicMock(), IngredientCreate(name="Basil"))


def test_search_ingredients_route(monkeypatch, current_profile):
    seen = {}

    def search(db, query=None, category=None, limit=50):
        seen.update(query=query, category=category, limit=limit)
        return [SimpleNamespace(id=uuid.uuid4(), name="basil", category="herbs", subcategory=None,
                                common_names=["sweet basil"], nutrition_info=None, typical_unit="bunch",
                                typical_price=1.5, is_common=True)]

    monkeypatch.setattr(IngredientService, "search", search)
    r = client.get(f"{API}/ingredients?q=bas&category=herbs&limit=5")
    assert r.status_code == 200
    assert r.json()[0]["name"] == "basil"
    assert seen == {"query": "bas", "category": "herbs", "limit": 5}
