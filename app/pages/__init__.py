"""Page modules for the order tracker Streamlit application."""

from .admin import render_page as render_admin_page
from .auth import render_page as render_auth_page
from .ledger import render_page as render_ledger_page

__all__ = [
    "render_admin_page",
    "render_auth_page",
    "render_ledger_page",
]
