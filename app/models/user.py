"""USERS table: roles, canonical DDL, and the SQL statements run against it."""

from enum import StrEnum


class Role(StrEnum):
    """
    Roles known to the application.

    Stored as a plain string, so new roles can be introduced by data alone.
    """

    ADMIN = "admin"
    DRIVER = "driver"
    CUSTOMER = "customer"
    DISPATCHER = "dispatcher"
    SUPPORT = "support"


USERS_TABLE = "USERS"

# Canonical (PostgreSQL) dialect; SqliteStore translates it before running.
CREATE_USERS_TABLE_SQL = """
    CREATE TABLE USERS (
      id SERIAL PRIMARY KEY,
      username VARCHAR(50) UNIQUE NOT NULL,
      password_hash VARCHAR(255) NOT NULL,
      role VARCHAR(20) NOT NULL,
      email VARCHAR(100) UNIQUE NOT NULL,
      firstName VARCHAR(50),
      lastName VARCHAR(50),
      isActive BOOLEAN DEFAULT TRUE,
      createdAt TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP,
      updatedAt TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
    )
"""

# PostgreSQL folds unquoted identifiers to lower case; aliases keep the camelCase keys.
PUBLIC_COLUMNS = (
    'id, username, role, email, firstName AS "firstName", lastName AS "lastName", '
    'isActive AS "isActive", createdAt AS "createdAt", updatedAt AS "updatedAt"'
)

COUNT_USERS_SQL = "SELECT COUNT(*) AS count FROM USERS"

SELECT_FOR_LOGIN_SQL = (
    f"SELECT {PUBLIC_COLUMNS}, password_hash FROM USERS "
    "WHERE username = :identifier OR email = :identifier "
    "ORDER BY CASE WHEN username = :identifier THEN 0 ELSE 1 END "
    "LIMIT 1"
)

SELECT_BY_ID_SQL = f"SELECT {PUBLIC_COLUMNS} FROM USERS WHERE id = :id"

SELECT_BY_USERNAME_SQL = f"SELECT {PUBLIC_COLUMNS} FROM USERS WHERE username = :username"

LIST_USERS_SQL = f"SELECT {PUBLIC_COLUMNS} FROM USERS ORDER BY username"

LIST_USERS_BY_ROLE_SQL = f"SELECT {PUBLIC_COLUMNS} FROM USERS ORDER BY role, username"

FIND_EXISTING_SQL = "SELECT id, username FROM USERS WHERE username = :username OR email = :email"

INSERT_USER_SQL = (
    "INSERT INTO USERS (username, password_hash, role, email, firstName, lastName, isActive) "
    "VALUES (:username, :password_hash, :role, :email, :first_name, :last_name, :is_active)"
)

# Overwrites in place so the row keeps its id and createdAt on both backends.
UPDATE_USER_SQL = (
    "UPDATE USERS SET password_hash = :password_hash, role = :role, email = :email, "
    "firstName = :first_name, lastName = :last_name, isActive = :is_active, "
    "updatedAt = CURRENT_TIMESTAMP WHERE username = :username"
)

SET_ACTIVE_SQL = (
    "UPDATE USERS SET isActive = :is_active, updatedAt = CURRENT_TIMESTAMP WHERE username = :username"
)
