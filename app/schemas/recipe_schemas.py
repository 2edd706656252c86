# app/schemas/recipe_schemas.py
from __future__ import annotations

from typing import Literal, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

# ─── Domain enums ─────────────────────────────────────────────
DifficultyType = Literal["Easy", "Medium", "Hard"]

DIETARY_OPTIONS: tuple[str, ...] = (
    "Vegetarian",
    "Vegan",
    "Gluten-Free",
    "Dairy-Free",
    "Nut-Free",
    "Low-Carb",
    "Keto",
    "Paleo",
)

# ─── Pydantic models (shape the LLM is asked to produce) ─────
class Instruction(BaseModel):
    text: str
    durationMinutes: Optional[int] = Field(default=None, ge=0)

    @model_validator(mode="before")
    @classmethod
    def _coerce_plain_step(cls, data):
        # Older prompts produced bare strings per step
        if isinstance(data, str):
            return {"text": data}
        return data

class Substitution(BaseModel):
    missingIngredient: str
    suggestion: str

class Nutrition(BaseModel):
    calories: str
    protein: str
    carbs: str
    fat: str

class Recipe(BaseModel):
    recipeName: str
    description: str
    difficulty: DifficultyType
    totalTime: str
    servings: int = Field(..., ge=1)
    ingredients: List[str]
    instructions: List[Instruction]
    substitutions: Optional[List[Substitution]] = None
    nutrition: Optional[Nutrition] = None

# Passed straight to Gemini as the response_schema
RECIPE_SCHEMA = Recipe
SCALED_INGREDIENTS_SCHEMA = list[str]


# ─── Request bodies ───────────────────────────────────────────
class RecipeRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ingredients: str
    dietary: list[str] = Field(default_factory=list)

    @field_validator("dietary")
    @classmethod
    def _dedupe_dietary(cls, tags: list[str]) -> list[str]:
        seen: list[str] = []
        for tag in tags:
            tag = tag.strip()
            if tag and tag not in seen:
                seen.append(tag)
        return seen

class MarkdownRecipeRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ingredients: str

class ScaleRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ingredients: list[str] = Field(..., min_length=1)
    originalServings: int = Field(..., ge=1)
    targetServings: int = Field(..., ge=1)

    @model_validator(mode="after")
    def _target_differs(self):
        if self.targetServings == self.originalServings:
            raise ValueError("targetServings must differ from originalServings")
        return self

class RecipeViewRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    recipe: Recipe
    scaledIngredients: Optional[list[str]] = None


# ─── Response bodies ──────────────────────────────────────────
class ScaleResponse(BaseModel):
    ingredients: list[str]

class ShareText(BaseModel):
    title: str
    text: str
