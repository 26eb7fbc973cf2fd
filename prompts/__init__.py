"""Prompt templates and loaders for the order tracker."""

from .base import PromptTemplate, load_prompt, render_prompt

__all__ = ["PromptTemplate", "load_prompt", "render_prompt"]
