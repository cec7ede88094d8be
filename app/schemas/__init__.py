"""Pydantic request/response schemas."""

from app.schemas.auth import CurrentUser, LoginRequest, LoginResponse, LoginUser
from app.schemas.health import HealthResponse
from app.schemas.users import MeResponse, TokenEchoResponse, UserOut, UsersListResponse

__all__ = [
    "CurrentUser",
    "HealthResponse",
    "LoginRequest",
    "LoginResponse",
    "LoginUser",
    "MeResponse",
    "TokenEchoResponse",
    "UserOut",
    "UsersListResponse",
]
