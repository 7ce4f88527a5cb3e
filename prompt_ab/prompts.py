"""
Prompt fragment loading and overlay application.

Prompt fragments are markdown files in PROMPTS_DIR, addressed by name
without the .md extension.
"""
from pathlib import Path
from typing import Dict, Mapping, Optional

from prompt_ab.config import config
from prompt_ab.models import PromptOverlay

_prompt_cache: Dict[str, str] = {}


def _prompts_dir() -> Path:
    prompts_dir = Path(config.PROMPTS_DIR)
    if not prompts_dir.is_dir():
        raise FileNotFoundError(
            f"Could not locate prompt markdown files. Searched:\n  - {prompts_dir}"
        )
    return prompts_dir


def load_prompt(name: str) -> str:
    """Load a prompt fragment by name. Results are cached after first load."""
    cached = _prompt_cache.get(name)
    if cached is not None:
        return cached
    path = _prompts_dir() / f"{name}.md"
    if not path.is_file():
        raise FileNotFoundError(f"Prompt fragment {name!r} not found at {path}")
    content = path.read_text(encoding="utf-8").rstrip()
    _prompt_cache[name] = content
    return content


def load_prompt_with_vars(name: str, variables: Mapping[str, str]) -> str:
    """Load a fragment and replace {{key}} placeholders. Unknown placeholders stay as-is."""
    content = load_prompt(name)
    for key, value in variables.items():
        content = content.replace(f"{{{{{key}}}}}", value)
    return content


def clear_prompt_cache() -> None:
    """Clear cached fragments, e.g. after editing prompt files."""
    _prompt_cache.clear()


def apply_overlay(base_prompt: str, overlay: Optional[PromptOverlay]) -> str:
    """
    Apply a composed overlay to a rendered prompt.

    systemPrompt replaces the base prompt entirely; prependContext goes in
    front of whatever prompt results, separated by a blank line.
    """
    if overlay is None:
        return base_prompt
    prompt = overlay.system_prompt or base_prompt
    if overlay.prepend_context:
        return f"{overlay.prepend_context}\n\n{prompt}"
    return prompt
