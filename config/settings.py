"""Centralised configuration handling for the order tracker."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import streamlit as st
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_FONT_URL = "https://raw.githubusercontent.com/google/fonts/main/ofl/amiri/Amiri-Regular.ttf"
DEFAULT_SUPER_ADMIN_EMAIL = "admin@example.com"

BASE_DIR = Path(__file__).resolve().parent.parent


def _streamlit_section(name: str) -> Mapping[str, Any] | None:
    """Return a mapping from Streamlit secrets for the given section."""

    try:
        if hasattr(st, "secrets") and name in st.secrets:
            section = st.secrets[name]
            if isinstance(section, Mapping):
                return section
            return dict(section)
    except Exception:  # pragma: no cover - accessing secrets may fail in tests
        return None
    return None


class Settings(BaseSettings):
    """Application settings sourced from env vars and Streamlit secrets."""

    openai_api_key: str | None = None
    openai_base_url: str | None = None
    openai_model: str = DEFAULT_OPENAI_MODEL

    super_admin_email: str = DEFAULT_SUPER_ADMIN_EMAIL

    pdf_font_url: str = DEFAULT_FONT_URL
    pdf_font_path: Path | None = None
    pdf_font_timeout: float = 20.0

    seed_path: Path | None = BASE_DIR / "data" / "seed_orders.csv"
    log_level: str = "INFO"

    model_config = SettingsConfigDict(env_prefix="ORDER_TRACKER_", extra="ignore")

    @property
    def openai_client_kwargs(self) -> dict[str, Any]:
        kwargs: dict[str, Any] = {}
        api_key = self.openai_api_key or os.getenv("OPENAI_API_KEY")
        if api_key:
            kwargs["api_key"] = api_key
        base_url = self.openai_base_url or os.getenv("OPENAI_BASE_URL")
        if base_url:
            kwargs["base_url"] = base_url
        return kwargs


@lru_cache
def get_settings() -> Settings:
    """Load and cache application settings."""

    overrides: dict[str, Any] = {}
    openai_section = _streamlit_section("openai")
    if openai_section:
        overrides.update(
            {
                "openai_api_key": openai_section.get("api_key")
                or openai_section.get("OPENAI_API_KEY"),
                "openai_base_url": openai_section.get("api_base"),
                "openai_model": openai_section.get("model"),
            }
        )

    app_section = _streamlit_section("order_tracker")
    if app_section:
        for key in ("super_admin_email", "pdf_font_url", "pdf_font_path", "seed_path", "log_level"):
            overrides[key] = app_section.get(key)

    return Settings(**{k: v for k, v in overrides.items() if v is not None})
