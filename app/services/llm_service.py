from __future__ import annotations

import asyncio
import json
import re
import time
from typing import Any, Iterable, List, Optional

from async_lru import alru_cache
from google import genai                               # new SDK entrypoint
from google.genai import errors as genai_errors        # error classes
from google.genai import types                         # GenerateContentConfig, etc.
from pydantic import ValidationError as PydanticValidationError

from core.config import get_settings
from core.log import json_log, summarize_exc
from app.schemas.recipe_schemas import (
    Recipe,
    RECIPE_SCHEMA,
    SCALED_INGREDIENTS_SCHEMA,
)
from app.services.errors import (
    MalformedResponseError,
    ServiceUnavailableError,
    ValidationError,
)
from app.services.prompts import (
    build_markdown_prompt,
    build_recipe_prompt,
    build_scale_prompt,
)

settings = get_settings()

# ─── Client init (new SDK) ───────────────────────────────────
_client: genai.Client | None = None
try:
    _client = genai.Client(api_key=settings.GEMINI_API_KEY)
    print("Gemini client initialized.")
except Exception as e:
    # No key yet: the first generation attempt reports it
    json_log("warn", event="gemini_client_init_failed", error=summarize_exc(e))
    _client = None

# Strip ```json fences defensively
_fence = re.compile(r"^```(\w+)?\s*\n?(.*?)\n?```$", re.S)

SCALE_FAILED_MESSAGE = "Could not rescale the ingredients. Please try again."


def _strip_fence(raw: str) -> str:
    raw = (raw or "").strip()
    m = _fence.match(raw)
    if m:
        raw = m.group(2).strip()
    return raw


# ─── Single round-trip to Gemini ─────────────────────────────
async def _call_model(prompt: str, schema: Any = None) -> str:
    """
    One generate_content call, run in a worker thread so the event loop stays free.
    Every failure on the way out is a ServiceUnavailableError; nothing is retried.
    """
    if _client is None:
        json_log("error", event="llm_error", error="Gemini client not initialized (check GEMINI_API_KEY)")
        raise ServiceUnavailableError()

    if schema is not None:
        cfg = types.GenerateContentConfig(
            response_mime_type="application/json",
            response_schema=schema,
            temperature=settings.GEMINI_TEMP,
        )
    else:
        cfg = types.GenerateContentConfig(temperature=settings.GEMINI_TEMP)

    start = time.perf_counter()
    try:
        response = await asyncio.to_thread(
            _client.models.generate_content,
            model=settings.GEMINI_MODEL_NAME,
            contents=prompt,
            config=cfg,
        )
        text = response.text
    except genai_errors.APIError as e:
        json_log("error", event="llm_error", error=summarize_exc(e))
        raise ServiceUnavailableError() from e
    except Exception as e:
        json_log("error", event="llm_error", unclassified=True, error=summarize_exc(e))
        raise ServiceUnavailableError() from e

    json_log(
        "info",
        event="llm_call",
        model=settings.GEMINI_MODEL_NAME,
        structured=schema is not None,
        latency=round((time.perf_counter() - start) * 1000.0, 2),
    )
    return _strip_fence(text or "")


def _parse_json(raw: str, message: Optional[str] = None) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        json_log("warn", event="malformed_response", reason=f"bad json: {e}")
        raise MalformedResponseError(message) from e


def _shape_problem(parsed: Any) -> Optional[str]:
    # Smoke test only; pydantic does the full field check afterwards
    if not isinstance(parsed, dict):
        return "top-level value is not an object"
    name = parsed.get("recipeName")
    if not isinstance(name, str) or not name.strip():
        return "missing recipeName"
    for key in ("ingredients", "instructions"):
        value = parsed.get(key)
        if not isinstance(value, list) or not value:
            return f"'{key}' is not a non-empty array"
    return None


def _require_ingredients(ingredients: str) -> None:
    if not ingredients or not ingredients.strip():
        raise ValidationError()


# ─── Public API ──────────────────────────────────────────────
async def generate_recipe(ingredients: str, dietary: Iterable[str] = ()) -> Recipe:
    _require_ingredients(ingredients)

    prompt = build_recipe_prompt(ingredients.strip(), dietary)
    raw = await _call_model(prompt, RECIPE_SCHEMA)
    parsed = _parse_json(raw)

    problem = _shape_problem(parsed)
    if problem:
        json_log("warn", event="malformed_response", reason=problem)
        raise MalformedResponseError()

    try:
        recipe = Recipe.model_validate(parsed)
    except PydanticValidationError as e:
        json_log("warn", event="malformed_response", reason=f"schema validation failed: {e.error_count()} errors")
        raise MalformedResponseError() from e

    json_log("info", event="recipe_generated", recipe=recipe.recipeName, steps=len(recipe.instructions))
    return recipe


async def generate_recipe_markdown(ingredients: str) -> str:
    """Free-text variant: the model answers in markdown, rendered by markdown_parser."""
    _require_ingredients(ingredients)

    text = await _call_model(build_markdown_prompt(ingredients.strip()))
    if not text:
        json_log("warn", event="malformed_response", reason="empty markdown body")
        raise MalformedResponseError()
    return text


# ─── Rescale: async in-memory TTL cache (async-lru) ──────────
@alru_cache(maxsize=settings.GEMINI_CACHE_MAXSIZE, ttl=settings.GEMINI_CACHE_TTL)
async def _cached_scale(
        ingredients: tuple[str, ...],
        original_servings: int,
        target_servings: int,
) -> tuple[str, ...]:
    prompt = build_scale_prompt(list(ingredients), original_servings, target_servings)
    raw = await _call_model(prompt, SCALED_INGREDIENTS_SCHEMA)
    parsed = _parse_json(raw, SCALE_FAILED_MESSAGE)

    if not isinstance(parsed, list) or not all(isinstance(item, str) for item in parsed):
        json_log("warn", event="malformed_response", reason="scaled ingredients are not an array of strings")
        raise MalformedResponseError(SCALE_FAILED_MESSAGE)
    if len(parsed) != len(ingredients):
        json_log("warn", event="malformed_response", reason=f"expected {len(ingredients)} items, got {len(parsed)}")
        raise MalformedResponseError(SCALE_FAILED_MESSAGE)
    return tuple(parsed)


async def scale_ingredients(
        ingredients: List[str],
        original_servings: int,
        target_servings: int,
) -> List[str]:
    scaled = await _cached_scale(tuple(ingredients), original_servings, target_servings)
    json_log("info", event="ingredients_scaled", original=original_servings, target=target_servings)
    return list(scaled)
