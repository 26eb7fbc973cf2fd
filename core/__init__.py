"""Core domain package for the order tracker."""

from .ai.summary import SummaryError, SummaryGuard, generate_order_summary, summarize_orders
from .ledger import ExportResult, Notice, OrderLedger, ValidationError
from .models import Order, OrderStatus, OrderType, Projection, SortOption, User, UserRole, ViewParams
from .projection import ProjectionPipeline, project
from .selection import SelectionTracker

__all__ = [
    "ExportResult",
    "Notice",
    "Order",
    "OrderLedger",
    "OrderStatus",
    "OrderType",
    "Projection",
    "ProjectionPipeline",
    "SelectionTracker",
    "SortOption",
    "SummaryError",
    "SummaryGuard",
    "User",
    "UserRole",
    "ValidationError",
    "ViewParams",
    "generate_order_summary",
    "project",
    "summarize_orders",
]
