"""Streamlit application package for the order tracker."""

from .main import main

__all__ = ["main"]
