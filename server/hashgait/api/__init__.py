"""API module."""

from fastapi import APIRouter

from hashgait.api.routes import backend, patterns

router = APIRouter()

router.include_router(backend.router)
router.include_router(patterns.router)

__all__ = ["router"]
