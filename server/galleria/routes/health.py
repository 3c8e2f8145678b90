"""Liveness and build info. Neither endpoint needs a token."""

import os
from typing import Any

from fastapi import APIRouter

from galleria import __version__
from galleria.auth.dependencies import Store
from galleria.types import DOCUMENT_VERSION

router = APIRouter(tags=["health"])


@router.get("/health")
async def health(store: Store) -> dict[str, Any]:
    """Store status: whether it is file-backed and how many accounts it holds."""
    document = store.document
    return {
        "status": "ok",
        "persistent": store.path is not None,
        "users": len(document.users),
        "partitions": len(document.user_data),
    }


@router.get("/version")
async def version() -> dict[str, str | int | None]:
    return {
        "version": os.environ.get("APP_VERSION", __version__),
        "commit": os.environ.get("APP_COMMIT"),
        "documentVersion": DOCUMENT_VERSION,
    }
