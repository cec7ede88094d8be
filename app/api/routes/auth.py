"""JWT login and the access gate dependencies (get_current_user, require_role)."""

import logging
from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from app.core.database import CredentialStore, get_store
from app.core.exceptions import InvalidTokenError, MissingTokenError, ServiceError
from app.core.security import create_access_token, decode_access_token, ensure_role
from app.schemas.auth import CurrentUser, LoginRequest, LoginResponse, LoginUser
from app.services.credentials import verify_credentials

logger = logging.getLogger(__name__)
router = APIRouter()
security = HTTPBearer(auto_error=False)


@router.post("/login", response_model=LoginResponse)
def login(
    store: Annotated[CredentialStore, Depends(get_store)],
    body: LoginRequest | None = None,
) -> LoginResponse:
    """
    Authenticate with username (or email) and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <token>
    """
    body = body or LoginRequest()
    try:
        user = verify_credentials(store, body.username, body.password)
    except SQLAlchemyError:
        logger.exception("Login lookup failed")
        raise ServiceError()
    token = create_access_token(user)
    logger.info("User logged in: %s (%s)", user["username"], user["role"])
    return LoginResponse(token=token, user=LoginUser.model_validate(user))


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """
    Dependency: require a valid Bearer JWT and return its claims.
    Raises 401 when no token is sent and 403 when the token is invalid or expired.
    The role is taken from the token as issued; the store is not consulted.
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise InvalidTokenError()
    try:
        return CurrentUser.model_validate(payload)
    except ValidationError:
        raise InvalidTokenError()


def require_role(*roles: str) -> Callable[..., CurrentUser]:
    """Dependency factory: authenticated user whose role is one of roles, else 403."""
    allowed = [str(role) for role in roles]

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        ensure_role(current_user.role, allowed)
        return current_user

    return dependency
