"""Whole-document export and import. Admin only: snapshots hold every credential hash."""

import logging
from typing import Any

from fastapi import APIRouter, Body

from galleria.auth.dependencies import AdminUser, Store

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/backup", tags=["backup"])


@router.get("/export")
async def export_document(store: Store, user: AdminUser) -> dict[str, Any]:
    logger.info("Document exported", extra={"user_id": user.id})
    return store.export_document()


@router.post("/import")
async def import_document(
    store: Store, user: AdminUser, data: Any = Body(...)
) -> dict[str, int]:
    """Replace the entire document with an exported snapshot."""
    document = await store.import_document(data)
    logger.info("Document imported", extra={"user_id": user.id})
    return {"users": len(document.users), "partitions": len(document.user_data)}
