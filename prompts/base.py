"""Prompt loading utilities for the order summary feature."""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from string import Template

__all__ = ["PromptTemplate", "load_prompt", "render_prompt"]

PROMPTS_DIR = Path(__file__).resolve().parent


@dataclass(frozen=True)
class PromptTemplate:
    """A prompt file with ``$placeholder`` substitutions."""

    name: str
    content: str

    def render(self, **values: str) -> str:
        return Template(self.content).substitute(values)


@lru_cache(maxsize=32)
def load_prompt(name: str) -> PromptTemplate:
    """Load a prompt template by stem name (without extension)."""

    path = PROMPTS_DIR / f"{name}.txt"
    if not path.exists():
        raise FileNotFoundError(f"Prompt template not found: {path}")

    return PromptTemplate(name=name, content=path.read_text(encoding="utf-8").strip())


def render_prompt(name: str, **values: str) -> str:
    return load_prompt(name).render(**values)
