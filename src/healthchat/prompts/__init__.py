"""Prompts sent to the model by the completion function.

Two prompts ship with the package:
- ``health_chat``: the conservative medical-assistant system prompt,
  with a ``{language}`` placeholder for the response language
- ``focus``: appended when a body part is selected, with a ``{topic}``
  placeholder

A directory named by HEALTHCHAT_PROMPTS_DIR may hold replacement
``<name>.txt`` files for either prompt.
"""

import os
from functools import lru_cache
from pathlib import Path

_PACKAGE_DIR = Path(__file__).parent

PROMPT_NAMES = ("health_chat", "focus")


@lru_cache(maxsize=len(PROMPT_NAMES))
def load_prompt(name: str) -> str:
    """Return the text of a packaged prompt, honoring overrides.

    Args:
        name: One of PROMPT_NAMES

    Raises:
        ValueError: If name is not a known prompt
    """
    if name not in PROMPT_NAMES:
        raise ValueError(f"Unknown prompt: {name}. Known prompts: {', '.join(PROMPT_NAMES)}")

    override_dir = os.getenv("HEALTHCHAT_PROMPTS_DIR")
    if override_dir:
        override = Path(override_dir).expanduser() / f"{name}.txt"
        if override.is_file():
            return override.read_text(encoding="utf-8").strip()

    return (_PACKAGE_DIR / f"{name}.txt").read_text(encoding="utf-8").strip()


def build_system_prompt(language_name: str, focus_topic: str | None = None) -> str:
    """Build the medical-assistant system prompt.

    Placeholders are substituted with ``str.replace`` because the prompt
    embeds a literal JSON template.

    Args:
        language_name: Display name of the response language
        focus_topic: Optional selected body part to focus on

    Returns:
        System prompt text
    """
    prompt = load_prompt("health_chat").replace("{language}", language_name)
    if focus_topic:
        prompt += "\n\n" + load_prompt("focus").replace("{topic}", focus_topic)
    return prompt


def reload_prompts() -> None:
    """Forget cached prompt text so overrides are read again."""
    load_prompt.cache_clear()


__all__ = [
    "PROMPT_NAMES",
    "build_system_prompt",
    "load_prompt",
    "reload_prompts",
]
