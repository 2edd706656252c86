"""
Pytest configuration and shared fixtures.

The Gemini client is never contacted: `fake_gemini` swaps the module-level
client in llm_service for a scripted stand-in that records every call.
"""

import json
from types import SimpleNamespace

import pytest
from async_lru import alru_cache

from app.schemas.recipe_schemas import Recipe
from app.services import llm_service


class FakeModels:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def generate_content(self, *, model, contents, config):
        self.calls.append({"model": model, "contents": contents, "config": config})
        if not self.replies:
            raise AssertionError("unexpected call to generate_content")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(text=reply)


class FakeGeminiClient:
    def __init__(self, replies):
        self.models = FakeModels(replies)

    @property
    def calls(self):
        return self.models.calls


@pytest.fixture
def fake_gemini(monkeypatch):
    """
    Usage:
        client = fake_gemini(json.dumps(recipe_dict), ConnectionError("down"))
    Each positional reply is consumed by one generate_content call; exceptions are raised.
    The rescale cache is rebuilt per test so results never leak between tests or event loops.
    """
    monkeypatch.setattr(
        llm_service,
        "_cached_scale",
        alru_cache(maxsize=8)(llm_service._cached_scale.__wrapped__),
    )

    def install(*replies):
        client = FakeGeminiClient(replies)
        monkeypatch.setattr(llm_service, "_client", client)
        return client

    return install


@pytest.fixture
def recipe_dict():
    return {
        "recipeName": "Lemon Garlic Chicken with Rice",
        "description": "Juicy pan-seared chicken over fluffy rice with a bright lemon sauce.",
        "difficulty": "Easy",
        "totalTime": "35 minutes",
        "servings": 2,
        "ingredients": [
            "2 chicken breasts",
            "1 cup rice",
            "2 cloves garlic, minced",
            "1 lemon",
            "1 tbsp olive oil",
            "Salt and pepper to taste",
        ],
        "instructions": [
            {"text": "Rinse the rice and simmer it in 2 cups of water.", "durationMinutes": 18},
            {"text": "Season the chicken with salt and pepper."},
            {"text": "Sear the chicken in olive oil until golden.", "durationMinutes": 6},
            {"text": "Add garlic and lemon juice, then serve over the rice."},
        ],
        "substitutions": [
            {"missingIngredient": "olive oil", "suggestion": "Use butter or any neutral oil."},
        ],
        "nutrition": {"calories": "520 kcal", "protein": "42 g", "carbs": "55 g", "fat": "12 g"},
    }


@pytest.fixture
def recipe_json(recipe_dict):
    return json.dumps(recipe_dict)


@pytest.fixture
def recipe(recipe_dict):
    return Recipe.model_validate(recipe_dict)
