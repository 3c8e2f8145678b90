"""Comment endpoints. Comments are created under /posts/{post_id}/comments."""

from fastapi import APIRouter

from galleria.auth.dependencies import CurrentUser, Store
from galleria.routes.schemas import CommentUpdate
from galleria.types import CommentEntry, PurgeReport

router = APIRouter(prefix="/comments", tags=["comments"])


@router.patch("/{comment_id}")
async def update_comment(
    comment_id: str,
    body: CommentUpdate,
    store: Store,
    user: CurrentUser,
    author_id: str | None = None,
) -> CommentEntry:
    async with store.session() as session:
        entry = session.queries.resolve_comment(comment_id, author_id)
        session.content.update_comment(user.id, entry.author_id, comment_id, body.to_patch())
        return entry


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: str, store: Store, user: CurrentUser, author_id: str | None = None
) -> CommentEntry:
    async with store.session() as session:
        entry = session.queries.resolve_comment(comment_id, author_id)
        session.lifecycle.delete_comment(user.id, entry.author_id, comment_id)
        return entry


@router.post("/{comment_id}/restore")
async def restore_comment(
    comment_id: str, store: Store, user: CurrentUser, author_id: str | None = None
) -> CommentEntry:
    async with store.session() as session:
        entry = session.queries.resolve_comment(comment_id, author_id)
        session.lifecycle.restore_comment(user.id, entry.author_id, comment_id)
        return entry


@router.delete("/{comment_id}/purge")
async def purge_comment(
    comment_id: str, store: Store, user: CurrentUser, author_id: str | None = None
) -> PurgeReport:
    async with store.session() as session:
        entry = session.queries.resolve_comment(comment_id, author_id)
        return session.lifecycle.purge_comment(user.id, entry.author_id, comment_id)
