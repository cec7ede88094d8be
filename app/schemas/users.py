"""Schemas for user read endpoints. Password hashes never appear here."""

from datetime import datetime

from pydantic import BaseModel


class UserOut(BaseModel):
    id: int
    username: str
    role: str
    email: str
    firstName: str | None = None
    lastName: str | None = None
    isActive: bool = True
    createdAt: datetime | None = None
    updatedAt: datetime | None = None


class MeResponse(BaseModel):
    success: bool = True
    user: UserOut


class UsersListResponse(BaseModel):
    """Response for GET /users (admin only)."""

    success: bool = True
    count: int
    users: list[UserOut]


class TokenEchoResponse(BaseModel):
    """Role-gated diagnostic: echoes the caller's decoded token claims."""

    success: bool = True
    message: str
    user: dict
    timestamp: str
