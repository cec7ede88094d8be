"""USERS table definitions and SQL."""

from app.models.user import CREATE_USERS_TABLE_SQL, USERS_TABLE, Role

__all__ = ["CREATE_USERS_TABLE_SQL", "Role", "USERS_TABLE"]
