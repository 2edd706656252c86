from app.services.prompts import build_markdown_prompt, build_recipe_prompt, build_scale_prompt


def test_recipe_prompt_embeds_ingredients_verbatim():
    prompt = build_recipe_prompt("chicken breasts, rice,  broccoli", [])
    assert '"chicken breasts, rice,  broccoli"' in prompt


def test_recipe_prompt_joins_dietary_tags_with_commas():
    prompt = build_recipe_prompt("tofu", ["Vegan", "Gluten-Free"])
    assert "Vegan, Gluten-Free" in prompt
    assert "no dietary restrictions" not in prompt


def test_recipe_prompt_without_tags_has_neutral_clause():
    prompt = build_recipe_prompt("tofu", [])
    assert "no dietary restrictions" in prompt


def test_recipe_prompt_blank_tags_count_as_none():
    prompt = build_recipe_prompt("tofu", ["", "  "])
    assert "no dietary restrictions" in prompt


def test_recipe_prompt_asks_for_every_field():
    prompt = build_recipe_prompt("eggs", [])
    for phrase in ("recipeName", "Easy, Medium, Hard", "totalTime", "servings",
                   "pantry staples", "durationMinutes", "substitutions", "nutrition"):
        assert phrase in prompt


def test_scale_prompt_lists_ingredients_and_servings():
    prompt = build_scale_prompt(["1 egg", "a pinch of salt"], 2, 4)
    assert "- 1 egg" in prompt
    assert "- a pinch of salt" in prompt
    assert "serves 2" in prompt
    assert "serves 4" in prompt
    assert "exactly 2 items" in prompt
    assert "JSON array of strings" in prompt


def test_markdown_prompt_requests_headings_and_lists():
    prompt = build_markdown_prompt("bread, garlic")
    assert '"bread, garlic"' in prompt
    assert "'##' heading" in prompt
    assert "numbered lists" in prompt
