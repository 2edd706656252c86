# app/shell.py
"""
Application shell: the state a recipe front end keeps between user actions.

`ViewState` is the top-level screen state (Idle, Loading, Success, Failed)
with pure transition functions, so "loading and failed at once" cannot be
represented. `RecipeSession` wires user actions to the recipe service, the
cooking timer, dictation and sharing.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from core.config import get_settings
from core.log import json_log
from app.cooking.dictation import DictationSession, SpeechCapability, append_transcript, open_dictation
from app.cooking.timer import CookingTimer, TimerDriver
from app.rendering.recipe_view import RecipeView, parse_total_minutes, render_recipe
from app.rendering.share import Clipboard, CopyNotice, ShareResult, ShareTarget, share_recipe
from app.schemas.recipe_schemas import Recipe
from app.services import llm_service
from app.services.errors import RecipeServiceError


# ─── View state container ────────────────────────────────────
@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Loading:
    pass


@dataclass(frozen=True)
class Success:
    recipe: Recipe


@dataclass(frozen=True)
class Failed:
    message: str
    code: str


ViewState = Union[Idle, Loading, Success, Failed]


class InvalidTransition(Exception):
    pass


def begin_loading(state: ViewState) -> Loading:
    if isinstance(state, Loading):
        raise InvalidTransition("a recipe is already being generated")
    return Loading()


def succeed(state: ViewState, recipe: Recipe) -> Success:
    if not isinstance(state, Loading):
        raise InvalidTransition(f"cannot succeed from {type(state).__name__}")
    return Success(recipe)


def fail(state: ViewState, error: RecipeServiceError) -> Failed:
    if not isinstance(state, Loading):
        raise InvalidTransition(f"cannot fail from {type(state).__name__}")
    return Failed(message=error.message, code=error.code)


# ─── Session ─────────────────────────────────────────────────
class RecipeSession:
    def __init__(
            self,
            speech: Optional[SpeechCapability] = None,
            share_target: Optional[ShareTarget] = None,
            clipboard: Optional[Clipboard] = None,
            on_timer_finished: Optional[Callable[[], None]] = None,
            tick_interval: Optional[float] = None,
            notice: Optional[CopyNotice] = None,
    ):
        settings = get_settings()
        self.ingredients = ""
        self.dietary: List[str] = []
        self.view: ViewState = Idle()

        self.scaled_ingredients: List[str] = []
        self.target_servings: Optional[int] = None
        self.scaling = False
        self.scale_error: Optional[str] = None

        self.timer = CookingTimer(on_finish=self._timer_finished)
        self.timer_driver = TimerDriver(
            self.timer,
            interval=tick_interval if tick_interval is not None else settings.TIMER_TICK_SECONDS,
        )
        self._on_timer_finished = on_timer_finished

        self.dictation: Optional[DictationSession] = open_dictation(speech, self._append_dictated)
        self.share_target = share_target
        self.clipboard = clipboard
        self.notice = notice or CopyNotice(duration=settings.COPY_NOTICE_SECONDS)

    # ── inputs ──
    def toggle_dietary(self, tag: str) -> None:
        if tag in self.dietary:
            self.dietary.remove(tag)
        else:
            self.dietary.append(tag)

    def clear_dietary(self) -> None:
        self.dietary = []

    @property
    def loading(self) -> bool:
        return isinstance(self.view, Loading)

    @property
    def recipe(self) -> Optional[Recipe]:
        return self.view.recipe if isinstance(self.view, Success) else None

    @property
    def can_generate(self) -> bool:
        return not self.loading and bool(self.ingredients.strip())

    # ── generation ──
    async def generate(self) -> ViewState:
        if self.loading:
            json_log("info", event="generate_ignored", reason="already loading")
            return self.view

        self.view = begin_loading(self.view)
        try:
            recipe = await llm_service.generate_recipe(self.ingredients, self.dietary)
        except RecipeServiceError as e:
            self.view = fail(self.view, e)
            return self.view

        self.view = succeed(self.view, recipe)
        self._load_recipe(recipe)
        return self.view

    def _load_recipe(self, recipe: Recipe) -> None:
        self.scaled_ingredients = list(recipe.ingredients)
        self.target_servings = recipe.servings
        self.scale_error = None
        self.timer.seed(parse_total_minutes(recipe.totalTime), start=False)
        self.timer_driver.sync()

    def render(self) -> Optional[RecipeView]:
        recipe = self.recipe
        if recipe is None:
            return None
        return render_recipe(recipe, self.scaled_ingredients)

    # ── rescale ──
    def can_rescale(self, target_servings: int) -> bool:
        recipe = self.recipe
        return (
            recipe is not None
            and not self.scaling
            and target_servings >= 1
            and target_servings != recipe.servings
        )

    async def rescale(self, target_servings: int) -> List[str]:
        if not self.can_rescale(target_servings):
            return self.scaled_ingredients

        recipe = self.recipe
        self.scaling = True
        self.scale_error = None
        try:
            # Always scale from the recipe as generated, never from a previous rescale
            scaled = await llm_service.scale_ingredients(
                recipe.ingredients, recipe.servings, target_servings,
            )
        except RecipeServiceError as e:
            if self.recipe is recipe:
                self.scale_error = e.message
            return self.scaled_ingredients
        finally:
            self.scaling = False

        if self.recipe is not recipe:
            # A newer recipe replaced this one while the call was out
            json_log("info", event="rescale_discarded", recipe=recipe.recipeName)
            return self.scaled_ingredients
        self.scaled_ingredients = scaled
        self.target_servings = target_servings
        return self.scaled_ingredients

    # ── timer ──
    def start_step_timer(self, index: int) -> None:
        recipe = self.recipe
        if recipe is None:
            raise IndexError("no recipe loaded")
        minutes = recipe.instructions[index].durationMinutes
        if not minutes:
            raise ValueError(f"step {index + 1} has no duration")
        self.timer.seed(minutes, start=True)
        self.timer_driver.restart()

    def toggle_timer(self) -> None:
        self.timer.toggle()
        self.timer_driver.sync()

    def reset_timer(self) -> None:
        self.timer.reset()
        self.timer_driver.sync()

    def _timer_finished(self) -> None:
        json_log("info", event="timer_finished")
        if self._on_timer_finished is not None:
            self._on_timer_finished()

    # ── dictation ──
    @property
    def dictation_available(self) -> bool:
        return self.dictation is not None

    def start_dictation(self) -> None:
        if self.dictation is not None:
            self.dictation.start()

    def stop_dictation(self) -> None:
        if self.dictation is not None:
            self.dictation.stop()

    def _append_dictated(self, text: str) -> None:
        self.ingredients = append_transcript(self.ingredients, text)

    # ── share ──
    def share(self) -> Optional[ShareResult]:
        recipe = self.recipe
        if recipe is None:
            return None
        return share_recipe(
            recipe,
            share_target=self.share_target,
            clipboard=self.clipboard,
            notice=self.notice,
            ingredients=self.scaled_ingredients,
        )

    async def aclose(self) -> None:
        self.stop_dictation()
        await self.timer_driver.aclose()
