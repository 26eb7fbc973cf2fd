"""Application configuration utilities."""

from .settings import DEFAULT_FONT_URL, DEFAULT_OPENAI_MODEL, Settings, get_settings

__all__ = [
    "DEFAULT_FONT_URL",
    "DEFAULT_OPENAI_MODEL",
    "Settings",
    "get_settings",
]
