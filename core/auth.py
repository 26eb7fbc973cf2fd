"""Authentication and user-role management.

Identity verification is delegated to an ``AuthProvider`` (email/password
accounts). ``AuthService`` combines it with the ``users`` collection of the
document store, where each user's role lives. The super-admin email always
registers as admin, and only the super-admin may change other users' roles.
"""

from __future__ import annotations

import hashlib
import hmac
import os
import threading
import uuid
from dataclasses import dataclass
from typing import Callable, Final, Protocol

from core.logging_setup import get_logger
from core.models import User, UserRole
from core.permissions import PermissionDenied, can_change_role
from core.store import USERS_COLLECTION, DocumentStore, StoreError, Unsubscribe

__all__ = [
    "AuthError",
    "AuthProvider",
    "AuthResult",
    "AuthService",
    "LocalAuthProvider",
    "map_auth_error",
    "role_for_email",
]

_logger = get_logger("order_tracker.auth")

GENERIC_AUTH_ERROR: Final[str] = "حدث خطأ غير متوقع. يرجى المحاولة مرة أخرى."
_INVALID_CREDENTIALS: Final[str] = "البريد الإلكتروني أو كلمة المرور غير صحيحة."

AUTH_ERROR_MESSAGES: Final[dict[str, str]] = {
    "auth/email-already-in-use": "هذا البريد الإلكتروني مسجل بالفعل.",
    "auth/invalid-email": "البريد الإلكتروني غير صالح.",
    "auth/weak-password": "كلمة المرور ضعيفة جدًا.",
    "auth/user-not-found": _INVALID_CREDENTIALS,
    "auth/wrong-password": _INVALID_CREDENTIALS,
    "auth/invalid-credential": _INVALID_CREDENTIALS,
}

MIN_PASSWORD_LENGTH: Final[int] = 6
_PBKDF2_ROUNDS: Final[int] = 120_000

IdentityListener = Callable[[str | None], None]


def map_auth_error(code: str | None) -> str:
    return AUTH_ERROR_MESSAGES.get(code or "", GENERIC_AUTH_ERROR)


class AuthError(Exception):
    """Provider failure carrying a provider code and a localized message."""

    def __init__(self, code: str) -> None:
        self.code = code
        self.message = map_auth_error(code)
        super().__init__(self.message)


def role_for_email(email: str, super_admin_email: str) -> UserRole:
    return UserRole.ADMIN if email == super_admin_email else UserRole.GUEST


@dataclass(frozen=True)
class AuthResult:
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class AuthProvider(Protocol):
    def register(self, email: str, password: str) -> str: ...

    def sign_in(self, email: str, password: str) -> str: ...

    def delete_account(self, uid: str) -> None: ...

    def sign_out(self) -> None: ...

    def on_identity_change(self, listener: IdentityListener) -> Unsubscribe: ...

    @property
    def current_uid(self) -> str | None: ...


@dataclass(frozen=True)
class _Account:
    uid: str
    salt: bytes
    digest: bytes


def _hash_password(password: str, salt: bytes) -> bytes:
    return hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, _PBKDF2_ROUNDS)


class LocalAuthProvider:
    """In-process email/password accounts with PBKDF2 password hashes."""

    def __init__(self, accounts: dict[str, _Account] | None = None) -> None:
        self._lock = threading.Lock()
        self._accounts: dict[str, _Account] = accounts if accounts is not None else {}
        self._current_uid: str | None = None
        self._listeners: list[IdentityListener] = []

    @property
    def current_uid(self) -> str | None:
        return self._current_uid

    def register(self, email: str, password: str) -> str:
        email = email.strip()
        if "@" not in email or email.startswith("@") or email.endswith("@"):
            raise AuthError("auth/invalid-email")
        if len(password) < MIN_PASSWORD_LENGTH:
            raise AuthError("auth/weak-password")

        with self._lock:
            if email in self._accounts:
                raise AuthError("auth/email-already-in-use")
            salt = os.urandom(16)
            account = _Account(uid=uuid.uuid4().hex, salt=salt, digest=_hash_password(password, salt))
            self._accounts[email] = account
        return account.uid

    def sign_in(self, email: str, password: str) -> str:
        account = self._accounts.get(email.strip())
        if account is None:
            raise AuthError("auth/user-not-found")
        if not hmac.compare_digest(account.digest, _hash_password(password, account.salt)):
            raise AuthError("auth/wrong-password")
        self._set_identity(account.uid)
        return account.uid

    def delete_account(self, uid: str) -> None:
        with self._lock:
            for email, account in list(self._accounts.items()):
                if account.uid == uid:
                    del self._accounts[email]
        if self._current_uid == uid:
            self._set_identity(None)

    def sign_out(self) -> None:
        self._set_identity(None)

    def on_identity_change(self, listener: IdentityListener) -> Unsubscribe:
        self._listeners.append(listener)
        listener(self._current_uid)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_identity(self, uid: str | None) -> None:
        self._current_uid = uid
        for listener in list(self._listeners):
            listener(uid)


def _user_from_record(uid: str, data: dict) -> User | None:
    try:
        role = UserRole(data.get("role"))
    except ValueError:
        _logger.warning("User %s has unknown role %r", uid, data.get("role"))
        return None
    return User(id=uid, email=str(data.get("email", "")), role=role)


class AuthService:
    def __init__(self, provider: AuthProvider, store: DocumentStore, *, super_admin_email: str) -> None:
        self._provider = provider
        self._store = store
        self.super_admin_email = super_admin_email

    async def register(self, email: str, password: str) -> AuthResult:
        try:
            uid = self._provider.register(email, password)
        except AuthError as exc:
            _logger.info("Registration rejected: %s", exc.code)
            return AuthResult(error=exc.message)

        role = role_for_email(email.strip(), self.super_admin_email)
        try:
            await self._store.put(USERS_COLLECTION, uid, {"email": email.strip(), "role": role.value})
        except StoreError as exc:
            _logger.error("Profile write for %s failed, removing account: %s", email, exc)
            self._provider.delete_account(uid)
            return AuthResult(error=GENERIC_AUTH_ERROR)
        _logger.info("Registered %s as %s", email, role.value)
        return AuthResult()

    async def login(self, email: str, password: str) -> AuthResult:
        try:
            self._provider.sign_in(email, password)
        except AuthError as exc:
            _logger.info("Login rejected: %s", exc.code)
            return AuthResult(error=exc.message)
        return AuthResult()

    def logout(self) -> None:
        self._provider.sign_out()

    def on_identity_change(self, listener: IdentityListener) -> Unsubscribe:
        return self._provider.on_identity_change(listener)

    @property
    def current_uid(self) -> str | None:
        return self._provider.current_uid

    async def get_user(self, uid: str) -> User | None:
        data = await self._store.get(USERS_COLLECTION, uid)
        if data is None:
            return None
        return _user_from_record(uid, data)

    async def list_users(self) -> list[User]:
        snapshot = await self._store.list_documents(USERS_COLLECTION)
        users = [_user_from_record(uid, data) for uid, data in snapshot]
        return [user for user in users if user is not None]

    def subscribe_users(self, listener: Callable[[list[User]], None]) -> Unsubscribe:
        def on_snapshot(snapshot) -> None:
            users = [_user_from_record(uid, data) for uid, data in snapshot]
            listener([user for user in users if user is not None])

        return self._store.subscribe(USERS_COLLECTION, on_snapshot)

    async def change_role(self, actor: User, user_id: str, role: UserRole) -> None:
        target = await self.get_user(user_id)
        if target is None:
            raise PermissionDenied(f"Unknown user {user_id}")
        if not can_change_role(actor, target, self.super_admin_email):
            raise PermissionDenied(f"{actor.email} may not change the role of {target.email}")
        await self._store.update(USERS_COLLECTION, user_id, {"role": role.value})
        _logger.info("%s changed role of %s to %s", actor.email, target.email, role.value)
