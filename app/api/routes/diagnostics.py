"""Role-gated endpoints that echo the caller's token, for checking JWT setup."""

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.routes.auth import require_role
from app.models.user import Role
from app.schemas.auth import CurrentUser
from app.schemas.users import TokenEchoResponse

router = APIRouter()


def _now_iso() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


@router.get("/admin/test-jwt", response_model=TokenEchoResponse)
def admin_test_jwt(
    current_user: Annotated[CurrentUser, Depends(require_role(Role.ADMIN))],
) -> TokenEchoResponse:
    return TokenEchoResponse(
        message="JWT authentication successful!",
        user=current_user.model_dump(),
        timestamp=_now_iso(),
    )


@router.get("/driver/test-jwt", response_model=TokenEchoResponse)
def driver_test_jwt(
    current_user: Annotated[CurrentUser, Depends(require_role(Role.DRIVER, Role.ADMIN))],
) -> TokenEchoResponse:
    return TokenEchoResponse(
        message="Driver JWT authentication successful!",
        user=current_user.model_dump(),
        timestamp=_now_iso(),
    )
