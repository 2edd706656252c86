from fastapi import APIRouter
from pydantic import BaseModel

from app.rendering.markdown_parser import Block, parse_markdown
from app.rendering.recipe_view import RecipeView, render_recipe
from app.rendering.share import format_recipe_text
from app.schemas.recipe_schemas import (
    DIETARY_OPTIONS,
    MarkdownRecipeRequest,
    Recipe,
    RecipeRequest,
    RecipeViewRequest,
    ScaleRequest,
    ScaleResponse,
    ShareText,
)
from app.services.llm_service import (
    generate_recipe,
    generate_recipe_markdown,
    scale_ingredients,
)

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


class MarkdownRecipeResponse(BaseModel):
    markdown: str
    blocks: list[Block]


# ─── 1. structured recipe ────────────────────────────────────
@router.post("/", response_model=Recipe)
async def create_recipe(body: RecipeRequest):
    return await generate_recipe(body.ingredients, body.dietary)


# ─── 2. free-text markdown recipe ────────────────────────────
@router.post("/markdown", response_model=MarkdownRecipeResponse)
async def create_markdown_recipe(body: MarkdownRecipeRequest):
    markdown = await generate_recipe_markdown(body.ingredients)
    return MarkdownRecipeResponse(markdown=markdown, blocks=parse_markdown(markdown))


# ─── 3. rescale ingredient quantities ────────────────────────
@router.post("/scale", response_model=ScaleResponse)
async def rescale_ingredients(body: ScaleRequest):
    scaled = await scale_ingredients(body.ingredients, body.originalServings, body.targetServings)
    return ScaleResponse(ingredients=scaled)


# ─── 4. view model + share text (no model call) ──────────────
@router.post("/view", response_model=RecipeView)
async def recipe_view(body: RecipeViewRequest):
    return render_recipe(body.recipe, body.scaledIngredients)


@router.post("/share-text", response_model=ShareText)
async def share_text(body: RecipeViewRequest):
    return ShareText(
        title=body.recipe.recipeName,
        text=format_recipe_text(body.recipe, body.scaledIngredients),
    )


@router.get("/dietary-options")
async def dietary_options():
    return {"options": list(DIETARY_OPTIONS)}
