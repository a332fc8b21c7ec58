"""Prompt management module.

Externalizes prompts to text files for easy customization.
Prompts can be overridden by placing files in the working directory.
"""

from functools import lru_cache
from pathlib import Path

_PROMPTS_DIR = Path(__file__).parent

THINK_FIRST_CLAUSE = "Think about how to extract this information before answering."


@lru_cache(maxsize=16)
def load_prompt(name: str) -> str:
    """Load a prompt from file.

    Search order:
    1. Current working directory: ./prompts/{name}.txt
    2. Package prompts directory: thinkchat/prompts/{name}.txt

    Args:
        name: Prompt name (without .txt extension)

    Returns:
        Prompt text content, stripped of surrounding whitespace

    Raises:
        FileNotFoundError: If prompt file not found in any location
    """
    filename = f"{name}.txt"

    local_path = Path.cwd() / "prompts" / filename
    if local_path.exists():
        return local_path.read_text(encoding="utf-8").strip()

    package_path = _PROMPTS_DIR / filename
    if package_path.exists():
        return package_path.read_text(encoding="utf-8").strip()

    raise FileNotFoundError(
        f"Prompt '{name}' not found. Searched:\n"
        f"  - {local_path}\n"
        f"  - {package_path}"
    )


def get_system_prompt() -> str:
    """Get the default assistant persona."""
    return load_prompt("system")


def get_extraction_prompt(show_thinking: bool = False) -> str:
    """Get the structured extraction instructions.

    Args:
        show_thinking: Ask the model to reason before extracting
    """
    prompt = load_prompt("extraction")
    if show_thinking:
        prompt = f"{prompt}\n\n{THINK_FIRST_CLAUSE}"
    return prompt


def clear_cache() -> None:
    """Clear the prompt cache (useful after modifying prompt files)."""
    load_prompt.cache_clear()


__all__ = [
    "THINK_FIRST_CLAUSE",
    "clear_cache",
    "get_extraction_prompt",
    "get_system_prompt",
    "load_prompt",
]
