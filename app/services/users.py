"""User lookups and updates over the credential store."""

from typing import Any

from app.core.database import CredentialStore
from app.models.user import (
    INSERT_USER_SQL,
    LIST_USERS_SQL,
    SELECT_BY_ID_SQL,
    SELECT_BY_USERNAME_SQL,
    SELECT_FOR_LOGIN_SQL,
    SET_ACTIVE_SQL,
)


def _normalize(row: dict[str, Any]) -> dict[str, Any]:
    # SQLite hands back 0/1 for BOOLEAN columns.
    if "isActive" in row and row["isActive"] is not None:
        row["isActive"] = bool(row["isActive"])
    return row


def public_user(row: dict[str, Any]) -> dict[str, Any]:
    """Copy of a user row without the password hash."""
    d = dict(row)
    d.pop("password_hash", None)
    return d


def find_for_login(store: CredentialStore, identifier: str) -> dict[str, Any] | None:
    """Row (including password_hash) whose username or email equals identifier; username wins."""
    rows = store.execute(SELECT_FOR_LOGIN_SQL, {"identifier": identifier})
    return _normalize(rows[0]) if rows else None


def get_user_by_id(store: CredentialStore, user_id: int) -> dict[str, Any] | None:
    rows = store.execute(SELECT_BY_ID_SQL, {"id": int(user_id)})
    return _normalize(rows[0]) if rows else None


def get_user_by_username(store: CredentialStore, username: str) -> dict[str, Any] | None:
    rows = store.execute(SELECT_BY_USERNAME_SQL, {"username": username})
    return _normalize(rows[0]) if rows else None


def list_users(store: CredentialStore) -> list[dict[str, Any]]:
    return [_normalize(row) for row in store.execute(LIST_USERS_SQL)]


def create_user(
    store: CredentialStore,
    *,
    username: str,
    email: str,
    password_hash: str,
    role: str,
    first_name: str | None = None,
    last_name: str | None = None,
    is_active: bool = True,
) -> None:
    store.execute(
        INSERT_USER_SQL,
        {
            "username": username,
            "email": email,
            "password_hash": password_hash,
            "role": role,
            "first_name": first_name,
            "last_name": last_name,
            "is_active": is_active,
        },
    )


def set_user_active(store: CredentialStore, username: str, is_active: bool) -> bool:
    """Activate or deactivate an account. Returns False when no such user exists."""
    result = store.execute(SET_ACTIVE_SQL, {"username": username, "is_active": is_active})
    return result.rowcount > 0
