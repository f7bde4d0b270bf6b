"""User accounts: registration, credential checks and account deletion.

Users are the root of ownership and are not themselves owner-scoped, so
they are read and written straight from the ``users`` collection rather
than through a :class:`~racelog.repository.Repository`.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from passlib.context import CryptContext

from racelog.cascade import CascadeResult, purge_account_data
from racelog.entities import SCHEMAS, EntityKind, Record
from racelog.errors import AuthenticationError, NotFoundError, ValidationError
from racelog.record_store import RecordStore
from racelog.repository import new_id

logger = logging.getLogger(__name__)

MIN_USERNAME_LENGTH = 3
MIN_PASSWORD_LENGTH = 6

_USERS = SCHEMAS[EntityKind.USER].collection

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(password, hashed)


def public_user(user: Record) -> Record:
    """Strip the password hash before a user record leaves the core."""
    return {k: v for k, v in user.items() if k != "passwordHash"}


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------


def find_user_by_username(store: RecordStore, username: str) -> Record | None:
    """Case-insensitive username lookup."""
    wanted = username.lower()
    for user in store.load(_USERS):
        if str(user.get("username", "")).lower() == wanted:
            return user
    return None


def get_user(store: RecordStore, user_id: str) -> Record:
    for user in store.load(_USERS):
        if user.get("id") == user_id:
            return user
    raise NotFoundError("User", user_id)


def _replace_user(store: RecordStore, updated: Record) -> None:
    users = store.load(_USERS)
    store.save(_USERS, [updated if u.get("id") == updated["id"] else u for u in users])


def _check_username(store: RecordStore, username: str, current_id: str | None = None) -> None:
    if len(username) < MIN_USERNAME_LENGTH:
        raise ValidationError(f"Username must be at least {MIN_USERNAME_LENGTH} characters")
    existing = find_user_by_username(store, username)
    if existing is not None and existing.get("id") != current_id:
        raise ValidationError("Username already exists")


def _check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")


# ---------------------------------------------------------------------------
# Operations
# ---------------------------------------------------------------------------


def register_user(store: RecordStore, username: str | None, password: str | None) -> Record:
    """Create a user; usernames are unique ignoring case."""
    if not username or not password:
        raise ValidationError("Username and password are required")
    _check_username(store, username)
    _check_password(password)

    user = {
        "id": new_id(),
        "username": username,
        "passwordHash": hash_password(password),
        "createdAt": datetime.now(UTC).isoformat(),
    }
    users = store.load(_USERS)
    users.append(user)
    store.save(_USERS, users)
    logger.info("Registered user %s", user["id"])
    return user


def authenticate(store: RecordStore, username: str | None, password: str | None) -> Record:
    """Return the user for valid credentials, else raise AuthenticationError."""
    if not username or not password:
        raise ValidationError("Username and password are required")
    user = find_user_by_username(store, username)
    if user is None or not verify_password(password, user.get("passwordHash", "")):
        raise AuthenticationError("Invalid username or password")
    return user


def change_username(store: RecordStore, user_id: str, username: str | None) -> Record:
    user = get_user(store, user_id)
    if not username:
        raise ValidationError("Username is required")
    _check_username(store, username, current_id=user_id)
    updated = {**user, "username": username}
    _replace_user(store, updated)
    return updated


def change_password(
    store: RecordStore,
    user_id: str,
    current_password: str | None,
    new_password: str | None,
) -> None:
    user = get_user(store, user_id)
    if not current_password or not new_password:
        raise ValidationError("Current password and new password are required")
    _check_password(new_password)
    if not verify_password(current_password, user.get("passwordHash", "")):
        raise AuthenticationError("Current password is incorrect")
    _replace_user(store, {**user, "passwordHash": hash_password(new_password)})
    logger.info("Password changed for user %s", user_id)


def delete_account(store: RecordStore, user_id: str, password: str | None) -> CascadeResult:
    """Delete the user and everything they own.

    Nothing is touched unless *password* verifies.
    """
    if not password:
        raise ValidationError("Password is required to delete account")
    user = get_user(store, user_id)
    if not verify_password(password, user.get("passwordHash", "")):
        raise AuthenticationError("Password is incorrect")

    result = purge_account_data(store, user_id)
    store.save(_USERS, [u for u in store.load(_USERS) if u.get("id") != user_id])
    result.deleted[EntityKind.USER] += 1
    logger.info("Deleted account %s", user_id)
    return result
