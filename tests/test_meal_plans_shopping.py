"""
Meal plans, AI recipe suggestions and shopping lists.
"""

import uuid
from datetime import date, timedelta
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from test_fixtures import (
    API,
    client,
    current_profile,
    make_meal_plan,
    make_profile,
    make_recipe,
    make_shopping_list,
)
from adapters import openrouter_client
from app.exceptions import NotFoundError, ServiceValidationError, UpstreamServiceError
from domain.schemas.plan_schemas import MealPlanUpdate
from services import meal_plan_service, shopping_service
from services.meal_plan_service import MealPlanService, parse_suggestions
from services.shopping_service import ShoppingService, aggregate_ingredients


# =============================================================================
# INGREDIENT AGGREGATION
# =============================================================================


def test_aggregate_scales_and_merges_ingredients():
    chicken = make_recipe(servings=4)
    salad = make_recipe(
        title="Garlic Salad",
        servings=2,
        ingredients=[
            {"name": "Garlic", "amount": 2, "unit": "clove", "category": "produce"},
            {"name": "olive oil", "amount": 30, "unit": "ml", "category": "pantry"},
        ],
    )
    meals = [
        {"date": "2026-03-02", "recipe_id": str(chicken.id), "servings": 8},
        {"date": "2026-03-03", "recipe_id": str(salad.id)},
        {"date": "2026-03-04", "title": "Leftovers"},
    ]

    items = aggregate_ingredients(meals, {str(chicken.id): chicken, str(salad.id): salad})
    by_key = {(i["name"].lower(), i["unit"]): i for i in items}

    assert by_key[("chicken thighs", "g")]["amount"] == 1600
    assert by_key[("garlic", "clove")]["amount"] == 10
    assert sorted(by_key[("garlic", "clove")]["recipe_ids"]) == sorted([str(chicken.id), str(salad.id)])
    # different units stay separate lines
    assert by_key[("olive oil", "tbsp")]["amount"] == 4
    assert by_key[("olive oil", "ml")]["amount"] == 30
    assert [i["category"] for i in items] == ["pantry", "pantry", "produce", "protein"]
    assert all(i["checked"] is False for i in items)


def test_aggregate_skips_unknown_recipes():
    assert aggregate_ingredients([{"recipe_id": str(uuid.uuid4())}], {}) == []


def test_aggregate_keeps_lines_without_amounts():
    recipe = make_recipe(ingredients=["salt", {"name": "pepper", "amount": "a pinch"}])
    items = aggregate_ingredients([{"recipe_id": str(recipe.id)}], {str(recipe.id): recipe})
    assert {i["name"]: i["amount"] for i in items} == {"salt": None, "pepper": None}


# =============================================================================
# SUGGESTIONS
# =============================================================================


def test_parse_suggestions_maps_camel_case():
    text = """Here you go:
    [{"title": "Veggie Chili", "whyRecommended": "Vegetarian", "prepTime": 15, "cookTime": "long", "servings": 4}]
    """
    suggestions = parse_suggestions(text)
    assert suggestions[0].title == "Veggie Chili"
    assert suggestions[0].why_recommended == "Vegetarian"
    assert suggestions[0].prep_time == 15
    assert suggestions[0].cook_time is None


def test_parse_suggestions_rejects_objects_without_title():
    with pytest.raises(ValueError):
        parse_suggestions('[{"description": "mystery"}]')


def test_suggest_recipes_uses_preferences(monkeypatch):
    seen = {}

    def completion(messages, **kwargs):
        seen["prompt"] = messages[0]["content"]
        return '[{"title": "A"}, {"title": "B"}, {"title": "C"}, {"title": "D"}]'

    monkeypatch.setattr(openrouter_client, "chat_completion", completion)
    suggestions = MealPlanService.suggest_recipes(
        {"allergies": ["peanuts"], "household_size": 5}
    )
    assert [s.title for s in suggestions] == ["A", "B", "C"]
    assert "Allergies: peanuts" in seen["prompt"]
    assert "Household size: 5" in seen["prompt"]
    assert "Available ingredients: Any ingredients available" in seen["prompt"]


@pytest.mark.parametrize(
    "behaviour",
    ["upstream", "garbage"],
)
def test_suggest_recipes_falls_back_to_defaults(monkeypatch, behaviour):
    def completion(messages, **kwargs):
        if behaviour == "upstream":
            raise UpstreamServiceError("OpenRouter API error: 503")
        return "Sorry, I can't help with that."

    monkeypatch.setattr(openrouter_client, "chat_completion", completion)
    suggestions = MealPlanService.suggest_recipes({})
    assert [s.title for s in suggestions] == ["Simple Pasta Dish", "Sheet Pan Chicken", "Stir Fry"]


# =============================================================================
# MEAL PLAN SERVICE
# =============================================================================


def test_update_plan_rejects_inverted_dates(monkeypatch):
    plan = make_meal_plan(start=date(2026, 3, 2))
    monkeypatch.setattr(MealPlanService, "get_plan", lambda db, pid, uid: plan)

    with pytest.raises(ServiceValidationError):
        MealPlanService.update_plan(
            MagicMock(), make_profile(), plan.id, MealPlanUpdate(end_date=date(2026, 3, 1))
        )


def test_update_plan_rejects_null_dates(monkeypatch):
    plan = make_meal_plan(start=date(2026, 3, 2))
    monkeypatch.setattr(MealPlanService, "get_plan", lambda db, pid, uid: plan)
    updated = []
    monkeypatch.setattr(
        meal_plan_service, "MealPlanRepository", lambda db: SimpleNamespace(update=updated.append)
    )

    with pytest.raises(ServiceValidationError) as exc:
        MealPlanService.update_plan(
            MagicMock(), make_profile(), plan.id, MealPlanUpdate.model_validate({"start_date": None})
        )
    assert exc.value.details == {"fields": ["start_date"]}
    assert plan.start_date == date(2026, 3, 2)
    assert updated == []


def test_update_plan_ignores_null_status(monkeypatch):
    plan = make_meal_plan()
    monkeypatch.setattr(MealPlanService, "get_plan", lambda db, pid, uid: plan)
    monkeypatch.setattr(
        meal_plan_service, "MealPlanRepository", lambda db: SimpleNamespace(update=lambda p: p)
    )
    events = []
    monkeypatch.setattr(
        meal_plan_service.WebhookService,
        "meal_plan_updated",
        lambda p, u, changes: events.append(changes),
    )

    result = MealPlanService.update_plan(
        MagicMock(),
        make_profile(),
        plan.id,
        MealPlanUpdate.model_validate({"status": None, "title": "Spring week"}),
    )
    assert result.status == "draft"
    assert result.title == "Spring week"
    assert events == [{"status": None, "title": "Spring week"}]


def test_delete_plan_emits_event(monkeypatch):
    plan = make_meal_plan()
    monkeypatch.setattr(MealPlanService, "get_plan", lambda db, pid, uid: plan)
    deleted = []
    monkeypatch.setattr(
        meal_plan_service, "MealPlanRepository", lambda db: SimpleNamespace(delete=deleted.append)
    )
    events = []
    monkeypatch.setattr(
        meal_plan_service.WebhookService,
        "meal_plan_deleted",
        lambda pid, u: events.append(("meal_plan.deleted", pid)),
    )

    MealPlanService.delete_plan(MagicMock(), make_profile(), plan.id)
    assert deleted == [plan]
    assert events == [("meal_plan.deleted", plan.id)]


def test_get_plan_of_other_user_is_not_found(monkeypatch):
    monkeypatch.setattr(
        meal_plan_service,
        "MealPlanRepository",
        lambda db: SimpleNamespace(get_by_id_and_user=lambda pid, uid: None),
    )
    with pytest.raises(NotFoundError):
        MealPlanService.get_plan(MagicMock(), uuid.uuid4(), uuid.uuid4())


# =============================================================================
# MEAL PLAN ROUTES
# =============================================================================


def test_create_meal_plan_rejects_end_before_start(current_profile):
    r = client.post(
        f"{API}/meal-plans",
        json={"start_date": "2026-03-08", "end_date": "2026-03-02"},
    )
    assert r.status_code == 422
    assert r.json()["error"]["code"] == "VALIDATION_ERROR"


def test_create_meal_plan_with_suggestions(monkeypatch, current_profile):
    start = date(2026, 3, 2)
    plan = make_meal_plan(user_id=current_profile.id, start=start)

    def create(db, profile, data):
        assert data.suggest is True
        assert data.meals[0].meal_type == "dinner"
        return plan, MealPlanService.suggest_recipes({})

    monkeypatch.setattr(MealPlanService, "create_plan", create)
    monkeypatch.setattr(
        openrouter_client, "chat_completion", lambda *a, **k: '[{"title": "Veggie Chili"}]'
    )

    r = client.post(
        f"{API}/meal-plans",
        json={
            "start_date": start.isoformat(),
            "end_date": (start + timedelta(days=6)).isoformat(),
            "meals": [{"date": start.isoformat(), "title": "Tacos"}],
            "suggest": True,
        },
    )
    assert r.status_code == 201
    body = r.json()
    assert body["meal_plan"]["id"] == str(plan.id)
    assert [s["title"] for s in body["suggestions"]] == ["Veggie Chili"]


def test_put_meal_plan_with_null_end_date_is_400(monkeypatch, current_profile):
    plan = make_meal_plan(user_id=current_profile.id)
    monkeypatch.setattr(MealPlanService, "get_plan", lambda db, pid, uid: plan)

    r = client.put(f"{API}/meal-plans/{plan.id}", json={"end_date": None})
    assert r.status_code == 400
    assert r.json()["error"]["details"] == {"fields": ["end_date"]}


def test_get_missing_meal_plan_is_404(monkeypatch, current_profile):
    def missing(db, pid, uid):
        raise NotFoundError(f"Meal plan {pid} not found")

    monkeypatch.setattr(MealPlanService, "get_plan", missing)
    r = client.get(f"{API}/meal-plans/{uuid.uuid4()}")
    assert r.status_code == 404
    assert r.json()["error"]["code"] == "NOT_FOUND"


# =============================================================================
# SHOPPING LISTS
# =============================================================================


def test_build_list_from_meal_plan(monkeypatch):
    profile = make_profile()
    recipe = make_recipe(user_id=profile.id)
    plan = make_meal_plan(
        user_id=profile.id,
        meals=[
            {"date": "2026-03-02", "recipe_id": str(recipe.id), "servings": 2},
            {"date": "2026-03-03", "recipe_id": "not-a-uuid"},
        ],
    )
    created = []

    monkeypatch.setattr(MealPlanService, "get_plan", lambda db, pid, uid: plan)
    monkeypatch.setattr(
        shopping_service,
        "RecipeRepository",
        lambda db: SimpleNamespace(get_many_for_user=lambda ids, uid: [recipe]),
    )
    monkeypatch.setattr(
        shopping_service,
        "ShoppingListRepository",
        lambda db: SimpleNamespace(create=lambda sl: created.append(sl) or sl),
    )

    shopping_list = ShoppingService.build_list(MagicMock(), profile, plan.id)
    assert shopping_list.meal_plan_id == plan.id
    assert shopping_list.name == "Shopping list for Week of family dinners"
    amounts = {i["name"]: i["amount"] for i in shopping_list.items}
    assert amounts["chicken thighs"] == 400
    assert created == [shopping_list]


def test_update_item_status_out_of_range(monkeypatch):
    monkeypatch.setattr(
        ShoppingService, "get_shopping_list", lambda db, lid, uid: make_shopping_list()
    )
    with pytest.raises(ServiceValidationError):
        ShoppingService.update_item_status(MagicMock(), make_profile(), uuid.uuid4(), 5, True)


def test_check_item_route(monkeypatch, current_profile):
    shopping_list = make_shopping_list(user_id=current_profile.id)
    monkeypatch.setattr(ShoppingService, "get_shopping_list", lambda db, lid, uid: shopping_list)
    monkeypatch.setattr(
        shopping_service,
        "ShoppingListRepository",
        lambda db: SimpleNamespace(update=lambda sl: sl),
    )

    r = client.patch(f"{API}/shopping-lists/{shopping_list.id}/items/0", json={"checked": True})
    assert r.status_code == 200
    assert r.json()["items"][0]["checked"] is True


def test_create_shopping_list_route(monkeypatch, current_profile):
    def create(db, profile, data):
        return make_shopping_list(
            user_id=profile.id, items=[i.model_dump(mode="json") for i in data.items]
        )

    monkeypatch.setattr(ShoppingService, "create_list", create)
    r = client.post(
        f"{API}/shopping-lists",
        json={"name": "Weekend", "items": [{"name": "eggs", "amount": 12}]},
    )
    assert r.status_code == 201
    assert r.json()["items"][0]["name"] == "eggs"


def test_generate_from_meal_plan_route(monkeypatch, current_profile):
    plan_id = uuid.uuid4()
    seen = {}

    def build(db, profile, pid, name=None):
        seen.update(pid=pid, name=name)
        return make_shopping_list(user_id=profile.id, meal_plan_id=pid)

    monkeypatch.setattr(ShoppingService, "build_list", build)
    r = client.post(f"{API}/shopping-lists/from-meal-plan/{plan_id}?name=Week%2010")
    assert r.status_code == 201
    assert r.json()["meal_plan_id"] == str(plan_id)
    assert seen == {"pid": plan_id, "name": "Week 10"}
