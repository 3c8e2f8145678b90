"""Gallery endpoints."""

from fastapi import APIRouter, Query, status

from galleria.auth.dependencies import CurrentUser, Store
from galleria.content import QueryLayer
from galleria.routes.schemas import GalleryCreate, GalleryUpdate, GalleryView, PostView
from galleria.types import GalleryEntry, PurgeReport

router = APIRouter(prefix="/galleries", tags=["galleries"])


def _view(queries: QueryLayer, entry: GalleryEntry) -> GalleryView:
    return GalleryView(
        owner_id=entry.owner_id,
        owner_name=entry.owner_name,
        gallery=entry.gallery,
        meta=queries.compute_gallery_meta(entry.owner_id, entry.gallery.id),
    )


@router.get("")
async def list_galleries(
    store: Store,
    _user: CurrentUser,
    include_deleted: bool = False,
    q: str | None = Query(default=None, max_length=200),
) -> list[GalleryView]:
    """Every user's galleries, pinned first, then most recently updated."""
    queries = store.reader().queries
    entries = queries.list_galleries(include_deleted=include_deleted, query=q)
    return [_view(queries, entry) for entry in entries]


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_gallery(
    body: GalleryCreate,
    store: Store,
    user: CurrentUser,
    owner_id: str | None = None,
) -> GalleryView:
    """Create a gallery in the caller's partition (admins may name another owner)."""
    owner = owner_id or user.id
    async with store.session() as session:
        gallery = session.content.create_gallery(user.id, owner, body.to_fields())
        entry = session.queries.resolve_gallery(gallery.id, owner)
        return _view(session.queries, entry)


@router.get("/{gallery_id}")
async def get_gallery(
    gallery_id: str, store: Store, _user: CurrentUser, owner_id: str | None = None
) -> GalleryView:
    queries = store.reader().queries
    return _view(queries, queries.resolve_gallery(gallery_id, owner_id))


@router.patch("/{gallery_id}")
async def update_gallery(
    gallery_id: str,
    body: GalleryUpdate,
    store: Store,
    user: CurrentUser,
    owner_id: str | None = None,
) -> GalleryView:
    async with store.session() as session:
        entry = session.queries.resolve_gallery(gallery_id, owner_id)
        session.content.update_gallery(user.id, entry.owner_id, gallery_id, body.to_patch())
        return _view(session.queries, entry)


@router.delete("/{gallery_id}")
async def delete_gallery(
    gallery_id: str, store: Store, user: CurrentUser, owner_id: str | None = None
) -> GalleryView:
    """Move a gallery and its live posts to the trash."""
    async with store.session() as session:
        entry = session.queries.resolve_gallery(gallery_id, owner_id)
        session.lifecycle.delete_gallery(user.id, entry.owner_id, gallery_id)
        return _view(session.queries, entry)


@router.post("/{gallery_id}/restore")
async def restore_gallery(
    gallery_id: str, store: Store, user: CurrentUser, owner_id: str | None = None
) -> GalleryView:
    """Bring a gallery back, together with the posts its deletion took with it."""
    async with store.session() as session:
        entry = session.queries.resolve_gallery(gallery_id, owner_id)
        session.lifecycle.restore_gallery(user.id, entry.owner_id, gallery_id)
        return _view(session.queries, entry)


@router.delete("/{gallery_id}/purge")
async def purge_gallery(
    gallery_id: str, store: Store, user: CurrentUser, owner_id: str | None = None
) -> PurgeReport:
    """Permanently remove a gallery, all of its posts and their comments."""
    async with store.session() as session:
        entry = session.queries.resolve_gallery(gallery_id, owner_id)
        return session.lifecycle.purge_gallery(user.id, entry.owner_id, gallery_id)


@router.get("/{gallery_id}/posts")
async def list_gallery_posts(
    gallery_id: str,
    store: Store,
    _user: CurrentUser,
    owner_id: str | None = None,
    include_deleted: bool = False,
    q: str | None = Query(default=None, max_length=200),
) -> list[PostView]:
    """Posts filed under a gallery by any author, most recently updated first."""
    queries = store.reader().queries
    gallery = queries.resolve_gallery(gallery_id, owner_id)
    entries = queries.list_posts_in_gallery(
        gallery.owner_id, gallery_id, include_deleted=include_deleted, query=q
    )
    return [
        PostView(
            author_id=e.author_id,
            author_name=e.author_name,
            post=e.post,
            comment_count=queries.comment_count(e.post.id),
        )
        for e in entries
    ]
