"""Route modules for the galleria API."""

from fastapi import APIRouter

from .backup import router as backup_router
from .comments import router as comments_router
from .galleries import router as galleries_router
from .health import router as health_router
from .posts import router as posts_router
from .settings import router as settings_router
from .trash import router as trash_router


def create_api_router() -> APIRouter:
    """Create aggregated router with all API routes."""
    api_router = APIRouter()

    api_router.include_router(health_router)
    api_router.include_router(galleries_router)
    api_router.include_router(posts_router)
    api_router.include_router(comments_router)
    api_router.include_router(trash_router)
    api_router.include_router(settings_router)
    api_router.include_router(backup_router)

    return api_router


__all__ = ["create_api_router"]
