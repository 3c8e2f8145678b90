"""Post endpoints, plus listing and adding comments on a post."""

from fastapi import APIRouter, status

from galleria.auth.dependencies import CurrentUser, Store
from galleria.content import QueryLayer
from galleria.routes.schemas import CommentCreate, PostCreate, PostUpdate, PostView
from galleria.types import CommentEntry, PostEntry, PurgeReport

router = APIRouter(prefix="/posts", tags=["posts"])


def _view(queries: QueryLayer, entry: PostEntry) -> PostView:
    return PostView(
        author_id=entry.author_id,
        author_name=entry.author_name,
        post=entry.post,
        comment_count=queries.comment_count(entry.post.id),
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    body: PostCreate, store: Store, user: CurrentUser, author_id: str | None = None
) -> PostView:
    """Post into any live gallery, including galleries owned by other users."""
    author = author_id or user.id
    async with store.session() as session:
        post = session.content.create_post(user.id, author, body.to_fields())
        return _view(session.queries, session.queries.resolve_post(post.id, author))


@router.get("/{post_id}")
async def get_post(
    post_id: str, store: Store, _user: CurrentUser, author_id: str | None = None
) -> PostView:
    queries = store.reader().queries
    return _view(queries, queries.resolve_post(post_id, author_id))


@router.patch("/{post_id}")
async def update_post(
    post_id: str,
    body: PostUpdate,
    store: Store,
    user: CurrentUser,
    author_id: str | None = None,
) -> PostView:
    async with store.session() as session:
        entry = session.queries.resolve_post(post_id, author_id)
        session.content.update_post(user.id, entry.author_id, post_id, body.to_patch())
        return _view(session.queries, entry)


@router.delete("/{post_id}")
async def delete_post(
    post_id: str, store: Store, user: CurrentUser, author_id: str | None = None
) -> PostView:
    async with store.session() as session:
        entry = session.queries.resolve_post(post_id, author_id)
        session.lifecycle.delete_post(user.id, entry.author_id, post_id)
        return _view(session.queries, entry)


@router.post("/{post_id}/restore")
async def restore_post(
    post_id: str, store: Store, user: CurrentUser, author_id: str | None = None
) -> PostView:
    """Restore a post. Fails while its gallery is in the trash."""
    async with store.session() as session:
        entry = session.queries.resolve_post(post_id, author_id)
        session.lifecycle.restore_post(user.id, entry.author_id, post_id)
        return _view(session.queries, entry)


@router.delete("/{post_id}/purge")
async def purge_post(
    post_id: str, store: Store, user: CurrentUser, author_id: str | None = None
) -> PurgeReport:
    async with store.session() as session:
        entry = session.queries.resolve_post(post_id, author_id)
        return session.lifecycle.purge_post(user.id, entry.author_id, post_id)


@router.get("/{post_id}/comments")
async def list_comments(
    post_id: str, store: Store, _user: CurrentUser, include_deleted: bool = False
) -> list[CommentEntry]:
    """Comments on a post from every author, oldest first."""
    queries = store.reader().queries
    queries.resolve_post(post_id)
    return queries.list_comments_for_post(post_id, include_deleted=include_deleted)


@router.post("/{post_id}/comments", status_code=status.HTTP_201_CREATED)
async def create_comment(
    post_id: str,
    body: CommentCreate,
    store: Store,
    user: CurrentUser,
    author_id: str | None = None,
) -> CommentEntry:
    author = author_id or user.id
    async with store.session() as session:
        comment = session.content.create_comment(user.id, author, post_id, body.text)
        return session.queries.resolve_comment(comment.id, author)
