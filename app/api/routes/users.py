"""Account read endpoints: the caller's own record and the admin user list."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.exc import SQLAlchemyError

from app.api.routes.auth import get_current_user, require_role
from app.core.database import CredentialStore, get_store
from app.core.exceptions import NotFoundError, ServiceError
from app.models.user import Role
from app.schemas.auth import CurrentUser
from app.schemas.users import MeResponse, UserOut, UsersListResponse
from app.services.users import get_user_by_id, list_users

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/me", response_model=MeResponse)
def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    store: Annotated[CredentialStore, Depends(get_store)],
) -> MeResponse:
    """Return the stored record for the token's user id."""
    try:
        user = get_user_by_id(store, current_user.id)
    except SQLAlchemyError:
        logger.exception("Error fetching user info for id=%s", current_user.id)
        raise ServiceError("Failed to fetch user info")
    if user is None:
        raise NotFoundError("User not found")
    return MeResponse(user=UserOut.model_validate(user))


@router.get("/users", response_model=UsersListResponse)
def get_users(
    _admin: Annotated[CurrentUser, Depends(require_role(Role.ADMIN))],
    store: Annotated[CredentialStore, Depends(get_store)],
) -> UsersListResponse:
    """List all users (admin only)."""
    try:
        users = list_users(store)
    except SQLAlchemyError:
        logger.exception("Error fetching users")
        raise ServiceError("Failed to fetch users")
    return UsersListResponse(
        count=len(users),
        users=[UserOut.model_validate(u) for u in users],
    )
