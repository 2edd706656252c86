# app/services/prompts.py
from __future__ import annotations

from typing import Iterable

ASSUMED_STAPLES = "salt, black pepper, water, cooking oil"


def _dietary_clause(dietary: Iterable[str]) -> str:
    tags = [t.strip() for t in dietary if t and t.strip()]
    if tags:
        return (
            f"The recipe MUST respect these dietary restrictions: {', '.join(tags)}. "
            "Do not use any ingredient that violates them."
        )
    return "The user has no dietary restrictions."


def build_recipe_prompt(ingredients: str, dietary: Iterable[str] = ()) -> str:
    return f"""
You are an expert chef with a talent for creating delicious and easy-to-follow recipes.
A user has the following ingredients and wants a recipe.

Ingredients provided: "{ingredients}"

{_dietary_clause(dietary)}

Your task is to:
1.  Create a creative and appealing name for the recipe ("recipeName").
2.  Write a short, appetising description of the dish (1-2 sentences).
3.  Rate the difficulty as exactly one of: Easy, Medium, Hard.
4.  Estimate the total time, e.g. "35 minutes" ("totalTime").
5.  State how many people the recipe serves as a whole number ("servings").
6.  List every ingredient needed, including the ones provided and any common pantry staples the recipe assumes (like {ASSUMED_STAPLES}), with quantities.
7.  Provide clear, step-by-step instructions.
8.  For every step that involves waiting or cooking for a specific time, put that time in minutes in "durationMinutes". Leave it out for steps without a duration.
9.  For each pantry staple you assumed, suggest a substitution in case the user does not have it ("substitutions").
10. Give an estimated nutrition breakdown per serving: calories, protein, carbs and fat.

Respond with ONLY the JSON object.
""".strip()


def build_scale_prompt(ingredients: list[str], original_servings: int, target_servings: int) -> str:
    listed = "\n".join(f"- {item}" for item in ingredients)
    return f"""
You are a precise kitchen assistant. The following ingredient list serves {original_servings}.
Rewrite it so it serves {target_servings}.

Ingredients:
{listed}

Rules:
- Adjust every quantity for {target_servings} servings (e.g. "1 egg" for 2 servings becomes "2 eggs" for 4 servings).
- Small or vague quantities such as "a pinch of salt" or "to taste" may be rounded sensibly instead of scaled linearly.
- Keep the same order and return exactly {len(ingredients)} items, one per original ingredient.
- Respond with ONLY a JSON array of strings.
""".strip()


def build_markdown_prompt(ingredients: str) -> str:
    return f"""
You are an expert chef with a talent for creating delicious and easy-to-follow recipes.
A user has the following ingredients and wants a recipe.

Ingredients provided: "{ingredients}"

Your task is to:
1.  Create a creative and appealing name for the recipe.
2.  List out the ingredients needed for the recipe, including the ones provided and any common pantry staples that might be required (like salt, pepper, oil).
3.  Provide clear, step-by-step instructions for preparing the dish.
4.  Format the entire response in simple Markdown. Use a main '##' heading for the recipe name, and '###' subheadings for 'Ingredients' and 'Instructions'. Use bullet points for lists of ingredients and numbered lists for instructions.

Example Format:
## Cheesy Garlic Bread
### Ingredients
- 1 loaf of French bread
- 1/2 cup butter, softened
- 2 cloves garlic, minced

### Instructions
1. Preheat your oven to 375°F (190°C).
2. Spread the garlic butter evenly on both halves of the bread.
3. Bake for 10-12 minutes, or until golden brown.
""".strip()
