"""Read-side shapes returned by queries and lifecycle operations."""

from galleria.types.common import DocumentModel
from galleria.types.content import Comment, Gallery, Post


class GalleryEntry(DocumentModel):
    """A gallery together with its owning partition."""

    owner_id: str
    owner_name: str
    gallery: Gallery


class PostEntry(DocumentModel):
    """A post together with its author's partition."""

    author_id: str
    author_name: str
    post: Post


class CommentEntry(DocumentModel):
    """A comment together with its author's partition."""

    author_id: str
    author_name: str
    comment: Comment


class GalleryMeta(DocumentModel):
    """Post counts and latest activity for one gallery."""

    alive_count: int = 0
    tombstoned_count: int = 0
    latest_activity: str | None = None  # ISO timestamp; None when no live posts


class TrashListing(DocumentModel):
    """Tombstoned galleries and posts, newest deletion first."""

    galleries: list[GalleryEntry] = []
    posts: list[PostEntry] = []


class PurgeReport(DocumentModel):
    """How many records a purge removed."""

    galleries: int = 0
    posts: int = 0
    comments: int = 0
