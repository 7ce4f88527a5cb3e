import pytest

from prompt_ab import prompts
from prompt_ab.config import config
from prompt_ab.models import PromptOverlay
from prompt_ab.prompts import (
    apply_overlay,
    clear_prompt_cache,
    load_prompt,
    load_prompt_with_vars,
)


@pytest.fixture
def prompts_dir(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "PROMPTS_DIR", str(tmp_path))
    clear_prompt_cache()
    yield tmp_path
    clear_prompt_cache()


def test_load_strips_trailing_whitespace(prompts_dir):
    (prompts_dir / "greeting.md").write_text("Hello there.\n\n", encoding="utf-8")
    assert load_prompt("greeting") == "Hello there."


def test_load_is_cached(prompts_dir):
    path = prompts_dir / "greeting.md"
    path.write_text("first", encoding="utf-8")
    assert load_prompt("greeting") == "first"

    path.write_text("second", encoding="utf-8")
    assert load_prompt("greeting") == "first"

    clear_prompt_cache()
    assert load_prompt("greeting") == "second"
    assert prompts._prompt_cache == {"greeting": "second"}


def test_variable_substitution(prompts_dir):
    (prompts_dir / "tpl.md").write_text("Hi {{name}}, {{name}}! {{unknown}}", encoding="utf-8")
    assert load_prompt_with_vars("tpl", {"name": "Sam"}) == "Hi Sam, Sam! {{unknown}}"


def test_missing_fragment(prompts_dir):
    with pytest.raises(FileNotFoundError):
        load_prompt("nope")


def test_missing_directory(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "PROMPTS_DIR", str(tmp_path / "missing"))
    clear_prompt_cache()
    with pytest.raises(FileNotFoundError, match="Could not locate prompt markdown files"):
        load_prompt("anything")


def test_bundled_default_template():
    clear_prompt_cache()
    text = load_prompt("default-system")
    assert "{{assistantName}}" in text
    assert "{{serviceName}}" in text


@pytest.mark.parametrize(
    "overlay, expected",
    [
        (None, "Base."),
        (PromptOverlay(system_prompt="Override."), "Override."),
        (PromptOverlay(prepend_context="Context."), "Context.\n\nBase."),
        (PromptOverlay(system_prompt="Override.", prepend_context="Context."), "Context.\n\nOverride."),
    ],
)
def test_apply_overlay(overlay, expected):
    assert apply_overlay("Base.", overlay) == expected
