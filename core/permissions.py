"""Capability checks applied once per command."""

from __future__ import annotations

from enum import Enum

from core.models import User

__all__ = ["Capability", "PermissionDenied", "can", "can_change_role", "is_super_admin", "require"]


class Capability(str, Enum):
    ADD_ORDER = "add_order"
    TOGGLE_STATUS = "toggle_status"
    SELECT_ORDERS = "select_orders"
    DELETE_ORDERS = "delete_orders"
    GENERATE_SUMMARY = "generate_summary"
    VIEW_USERS = "view_users"
    EXPORT = "export"


_ADMIN_ONLY = frozenset(
    {
        Capability.ADD_ORDER,
        Capability.TOGGLE_STATUS,
        Capability.SELECT_ORDERS,
        Capability.DELETE_ORDERS,
        Capability.GENERATE_SUMMARY,
        Capability.VIEW_USERS,
    }
)


class PermissionDenied(PermissionError):
    """Raised when a user attempts an action their role does not allow."""


def is_super_admin(user: User | None, super_admin_email: str) -> bool:
    return user is not None and user.email == super_admin_email


def can(user: User | None, capability: Capability) -> bool:
    if user is None:
        return False
    if capability in _ADMIN_ONLY:
        return user.is_admin
    return True


def can_change_role(actor: User | None, target: User, super_admin_email: str) -> bool:
    """Only the super-admin changes roles, and never its own."""

    return is_super_admin(actor, super_admin_email) and target.email != super_admin_email


def require(user: User | None, capability: Capability) -> None:
    if not can(user, capability):
        raise PermissionDenied(f"{capability.value} is not allowed for this user")
