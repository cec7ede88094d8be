"""API routes mounted under API_PREFIX."""

from fastapi import APIRouter

from app.api.routes import auth, diagnostics, users

router = APIRouter()
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, tags=["users"])
router.include_router(diagnostics.router, tags=["diagnostics"])
