"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials for login. username may also be the account email."""

    # Optional here so a missing field yields 400 from the login handler, not 422.
    username: str | None = Field(default=None, description="Username or email")
    password: str | None = Field(default=None, description="Password")


class LoginUser(BaseModel):
    """Public subset of the account returned after login."""

    id: int
    username: str
    role: str
    email: str
    firstName: str | None = None
    lastName: str | None = None


class LoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    token: str = Field(..., description="JWT access token; send as Authorization: Bearer <token>")
    user: LoginUser


class CurrentUser(BaseModel):
    """Decoded access-token claims for dependency injection (role as issued)."""

    id: int
    username: str
    role: str
    email: str | None = None
    iat: int
    exp: int
