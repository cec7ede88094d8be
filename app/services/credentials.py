"""Decide whether a username/email + password pair authenticates."""

from typing import Any

from app.core.database import CredentialStore
from app.core.exceptions import (
    AccountDeactivatedError,
    InvalidCredentialsError,
    MissingCredentialsError,
)
from app.core.security import burn_password_check, verify_password
from app.services.users import find_for_login, public_user


def verify_credentials(
    store: CredentialStore,
    identifier: str | None,
    password: str | None,
) -> dict[str, Any]:
    """
    Return the public fields of the account identified by username or email.

    Raises MissingCredentialsError when either field is blank, AccountDeactivatedError
    for inactive accounts, and InvalidCredentialsError for an unknown identifier or a
    wrong password (the caller cannot tell those two apart).
    """
    if not identifier or not password:
        raise MissingCredentialsError()

    row = find_for_login(store, identifier)
    if row is None:
        burn_password_check(password)
        raise InvalidCredentialsError()
    if not row["isActive"]:
        raise AccountDeactivatedError()
    if not verify_password(password, str(row["password_hash"])):
        raise InvalidCredentialsError()
    return public_user(row)
