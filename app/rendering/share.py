# app/rendering/share.py
from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Protocol

from core.log import json_log, summarize_exc
from app.schemas.recipe_schemas import Recipe

ATTRIBUTION = "Recipe generated by Pantry Chef (powered by Gemini AI)"
COPIED_MESSAGE = "Copied!"
COPY_FAILED_MESSAGE = "Could not copy the recipe. Please copy it manually."


class ShareTarget(Protocol):
    def share(self, title: str, text: str) -> None: ...


class Clipboard(Protocol):
    def copy(self, text: str) -> None: ...


class ShareOutcome(str, Enum):
    SHARED = "shared"
    COPIED = "copied"
    FAILED = "failed"


@dataclass
class ShareResult:
    outcome: ShareOutcome
    message: Optional[str] = None


class CopyNotice:
    """
    Transient "Copied!" confirmation. It is visible for `duration` seconds
    after `show()` and clears itself; nothing has to call a timer.
    """

    def __init__(self, duration: float = 2.0, clock: Callable[[], float] = time.monotonic):
        self.duration = duration
        self._clock = clock
        self._shown_at: Optional[float] = None

    def show(self) -> None:
        self._shown_at = self._clock()

    def clear(self) -> None:
        self._shown_at = None

    @property
    def visible(self) -> bool:
        if self._shown_at is None:
            return False
        if self._clock() - self._shown_at >= self.duration:
            self._shown_at = None
            return False
        return True

    @property
    def text(self) -> Optional[str]:
        return COPIED_MESSAGE if self.visible else None


def format_recipe_text(recipe: Recipe, ingredients: Optional[List[str]] = None) -> str:
    lines = [recipe.recipeName, "", recipe.description, "", "Ingredients:"]
    lines += [f"- {item}" for item in (ingredients if ingredients is not None else recipe.ingredients)]
    lines += ["", "Instructions:"]
    lines += [f"{n}. {step.text}" for n, step in enumerate(recipe.instructions, start=1)]
    lines += ["", ATTRIBUTION]
    return "\n".join(lines)


def share_recipe(
        recipe: Recipe,
        *,
        share_target: Optional[ShareTarget],
        clipboard: Optional[Clipboard],
        notice: CopyNotice,
        ingredients: Optional[List[str]] = None,
) -> ShareResult:
    text = format_recipe_text(recipe, ingredients)

    if share_target is not None:
        try:
            share_target.share(recipe.recipeName, text)
            return ShareResult(ShareOutcome.SHARED)
        except Exception as e:
            json_log("warn", event="share_failed", error=summarize_exc(e))

    if clipboard is None:
        json_log("warn", event="copy_failed", error="no clipboard available")
        return ShareResult(ShareOutcome.FAILED, COPY_FAILED_MESSAGE)
    try:
        clipboard.copy(text)
    except Exception as e:
        json_log("warn", event="copy_failed", error=summarize_exc(e))
        return ShareResult(ShareOutcome.FAILED, COPY_FAILED_MESSAGE)

    notice.show()
    return ShareResult(ShareOutcome.COPIED, COPIED_MESSAGE)
