"""Trash listing."""

from fastapi import APIRouter, Query

from galleria.auth.dependencies import CurrentUser, Store
from galleria.types import TrashListing

router = APIRouter(tags=["trash"])


@router.get("/trash")
async def list_trash(
    store: Store, _user: CurrentUser, q: str | None = Query(default=None, max_length=200)
) -> TrashListing:
    """Tombstoned galleries and posts from every user, most recently deleted first."""
    return store.reader().queries.list_trash(q)
