from __future__ import annotations

from pathlib import Path


class PromptLoadError(RuntimeError):
    pass


def prompts_dir() -> Path:
    # Shipped as package data next to this module.
    return Path(__file__).resolve().parent / "prompts"


def load_prompt(name: str) -> str:
    """Load a prompt template from the packaged `prompts/` directory.

    Example:
        load_prompt("ai_player.txt")
    """

    path = prompts_dir() / name
    try:
        return path.read_text(encoding="utf-8").strip() + "\n"
    except FileNotFoundError as e:
        raise PromptLoadError(f"Prompt not found: {path}") from e


def render_prompt(template: str, *, prompt: str) -> str:
    # Plain substitution: player prompts may contain braces.
    return template.replace("{prompt}", prompt.strip()).strip()
