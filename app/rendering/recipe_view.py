# app/rendering/recipe_view.py
from __future__ import annotations

import re
from typing import Dict, List, Optional

from pydantic import BaseModel

from app.schemas.recipe_schemas import Nutrition, Recipe, Substitution

DIFFICULTY_TIERS: Dict[str, str] = {
    "Easy": "green",
    "Medium": "amber",
    "Hard": "red",
}

_FIRST_INT = re.compile(r"\d+")


class RenderError(Exception):
    pass


class InstructionView(BaseModel):
    number: int
    text: str
    timerMinutes: Optional[int] = None
    timerLabel: Optional[str] = None


class RecipeView(BaseModel):
    name: str
    description: str
    difficulty: str
    difficultyTier: str
    totalTime: str
    timerSeconds: int
    showTimer: bool
    servings: int
    ingredients: List[str]
    instructions: List[InstructionView]
    substitutions: Optional[List[Substitution]] = None
    nutrition: Optional[Nutrition] = None


def difficulty_tier(difficulty: str) -> str:
    try:
        return DIFFICULTY_TIERS[difficulty]
    except KeyError:
        raise RenderError(f"Unknown difficulty: {difficulty!r}") from None


def parse_total_minutes(total_time: str) -> int:
    """First integer in the free-text total time, units ignored. 0 when there is none."""
    m = _FIRST_INT.search(total_time or "")
    return int(m.group(0)) if m else 0


def timer_label(minutes: int) -> str:
    return f"Start {minutes}-minute timer"


def _has_nutrition(nutrition: Optional[Nutrition]) -> bool:
    if nutrition is None:
        return False
    return any(v.strip() for v in (nutrition.calories, nutrition.protein, nutrition.carbs, nutrition.fat))


def render_recipe(recipe: Recipe, scaled_ingredients: Optional[List[str]] = None) -> RecipeView:
    tier = difficulty_tier(recipe.difficulty)
    timer_seconds = parse_total_minutes(recipe.totalTime) * 60

    instructions = []
    for number, step in enumerate(recipe.instructions, start=1):
        minutes = step.durationMinutes or None   # a 0-minute step gets no timer
        instructions.append(
            InstructionView(
                number=number,
                text=step.text,
                timerMinutes=minutes,
                timerLabel=timer_label(minutes) if minutes else None,
            )
        )

    return RecipeView(
        name=recipe.recipeName,
        description=recipe.description,
        difficulty=recipe.difficulty,
        difficultyTier=tier,
        totalTime=recipe.totalTime,
        timerSeconds=timer_seconds,
        showTimer=timer_seconds > 0,
        servings=recipe.servings,
        ingredients=list(scaled_ingredients if scaled_ingredients is not None else recipe.ingredients),
        instructions=instructions,
        substitutions=list(recipe.substitutions) if recipe.substitutions else None,
        nutrition=recipe.nutrition if _has_nutrition(recipe.nutrition) else None,
    )
