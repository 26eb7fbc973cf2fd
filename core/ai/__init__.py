"""AI-focused helpers for the order tracker."""

from .summary import (
    SummaryError,
    SummaryGuard,
    SummaryRequest,
    build_summary_request,
    generate_order_summary,
    summarize_orders,
)

__all__ = [
    "SummaryError",
    "SummaryGuard",
    "SummaryRequest",
    "build_summary_request",
    "generate_order_summary",
    "summarize_orders",
]
