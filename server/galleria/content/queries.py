"""Cross-partition resolution and read views.

Every lookup without a usable hint is a linear scan over all partitions;
there is no secondary index by gallery or post id.
"""

from __future__ import annotations

from galleria.errors import CommentNotFound, GalleryNotFound, PostNotFound
from galleria.types import (
    CommentEntry,
    Document,
    GalleryEntry,
    GalleryMeta,
    PostEntry,
    TrashListing,
)


def _matches(query: str | None, *fields: str) -> bool:
    """Case-insensitive substring match of query against any of fields."""
    needle = (query or "").strip().casefold()
    if not needle:
        return True
    return any(needle in field.casefold() for field in fields)


class QueryLayer:
    """Read access over every partition of a document."""

    def __init__(self, document: Document) -> None:
        self._document = document

    # --- Resolution ---

    def resolve_gallery(self, gallery_id: str, owner_hint: str | None = None) -> GalleryEntry:
        """Find a gallery by id, trying owner_hint's partition first.

        Raises:
            GalleryNotFound: If no partition holds the gallery.
        """
        doc = self._document
        if owner_hint and owner_hint in doc.user_data:
            gallery = doc.user_data[owner_hint].galleries.get(gallery_id)
            if gallery is not None:
                return GalleryEntry(
                    owner_id=owner_hint, owner_name=doc.username_for(owner_hint), gallery=gallery
                )

        for owner_id, part in doc.user_data.items():
            gallery = part.galleries.get(gallery_id)
            if gallery is not None:
                return GalleryEntry(
                    owner_id=owner_id, owner_name=doc.username_for(owner_id), gallery=gallery
                )

        raise GalleryNotFound(gallery_id)

    def resolve_post(self, post_id: str, author_hint: str | None = None) -> PostEntry:
        """Find a post by id, trying author_hint's partition first.

        Raises:
            PostNotFound: If no partition holds the post.
        """
        doc = self._document
        if author_hint and author_hint in doc.user_data:
            post = doc.user_data[author_hint].posts.get(post_id)
            if post is not None:
                return PostEntry(
                    author_id=author_hint, author_name=doc.username_for(author_hint), post=post
                )

        for author_id, part in doc.user_data.items():
            post = part.posts.get(post_id)
            if post is not None:
                return PostEntry(
                    author_id=author_id, author_name=doc.username_for(author_id), post=post
                )

        raise PostNotFound(post_id)

    def resolve_comment(self, comment_id: str, author_hint: str | None = None) -> CommentEntry:
        """Find a comment by id, trying author_hint's partition first.

        Raises:
            CommentNotFound: If no partition holds the comment.
        """
        doc = self._document
        if author_hint and author_hint in doc.user_data:
            comment = doc.user_data[author_hint].comments.get(comment_id)
            if comment is not None:
                return CommentEntry(
                    author_id=author_hint,
                    author_name=doc.username_for(author_hint),
                    comment=comment,
                )

        for author_id, part in doc.user_data.items():
            comment = part.comments.get(comment_id)
            if comment is not None:
                return CommentEntry(
                    author_id=author_id, author_name=doc.username_for(author_id), comment=comment
                )

        raise CommentNotFound(comment_id)

    # --- Listings ---

    def list_galleries(
        self, *, include_deleted: bool = False, query: str | None = None
    ) -> list[GalleryEntry]:
        """All galleries across partitions, filtered by query.

        Sorted by updated_at descending. Live-only listings put pinned
        galleries first.
        """
        doc = self._document
        entries: list[GalleryEntry] = []
        for owner_id, part in doc.user_data.items():
            owner_name = doc.username_for(owner_id)
            for gallery in part.galleries.values():
                if gallery.is_deleted and not include_deleted:
                    continue
                if not _matches(query, gallery.title, gallery.description, owner_name):
                    continue
                entries.append(
                    GalleryEntry(owner_id=owner_id, owner_name=owner_name, gallery=gallery)
                )

        # ISO-8601 strings sort chronologically
        entries.sort(key=lambda e: e.gallery.updated_at, reverse=True)
        if not include_deleted:
            entries.sort(key=lambda e: not e.gallery.pinned)
        return entries

    def list_posts_in_gallery(
        self,
        gallery_owner_id: str,
        gallery_id: str,
        *,
        include_deleted: bool = False,
        query: str | None = None,
    ) -> list[PostEntry]:
        """Posts from every author that belong to one gallery, newest update first."""
        doc = self._document
        entries: list[PostEntry] = []
        for author_id, part in doc.user_data.items():
            author_name = doc.username_for(author_id)
            for post in part.posts.values():
                if post.owner_of_gallery(author_id) != gallery_owner_id:
                    continue
                if post.gallery_id != gallery_id:
                    continue
                if post.is_deleted and not include_deleted:
                    continue
                if not _matches(query, post.title, post.content, author_name):
                    continue
                entries.append(PostEntry(author_id=author_id, author_name=author_name, post=post))

        entries.sort(key=lambda e: e.post.updated_at, reverse=True)
        return entries

    def list_comments_for_post(
        self, post_id: str, *, include_deleted: bool = False
    ) -> list[CommentEntry]:
        """Comments from every author on one post, oldest first."""
        doc = self._document
        entries: list[CommentEntry] = []
        for author_id, part in doc.user_data.items():
            for comment in part.comments.values():
                if comment.post_id != post_id:
                    continue
                if comment.is_deleted and not include_deleted:
                    continue
                entries.append(
                    CommentEntry(
                        author_id=author_id,
                        author_name=doc.username_for(author_id),
                        comment=comment,
                    )
                )

        entries.sort(key=lambda e: e.comment.created_at)
        return entries

    def comment_count(self, post_id: str) -> int:
        """Number of live comments on a post."""
        return len(self.list_comments_for_post(post_id))

    def list_trash(self, query: str | None = None) -> TrashListing:
        """Tombstoned galleries and posts, most recently deleted first."""
        doc = self._document
        galleries: list[GalleryEntry] = []
        posts: list[PostEntry] = []
        for user_id, part in doc.user_data.items():
            name = doc.username_for(user_id)
            for gallery in part.galleries.values():
                if gallery.is_deleted and _matches(
                    query, gallery.title, gallery.description, name
                ):
                    galleries.append(
                        GalleryEntry(owner_id=user_id, owner_name=name, gallery=gallery)
                    )
            for post in part.posts.values():
                if post.is_deleted and _matches(query, post.title, post.content, name):
                    posts.append(PostEntry(author_id=user_id, author_name=name, post=post))

        galleries.sort(key=lambda e: e.gallery.deleted_at or "", reverse=True)
        posts.sort(key=lambda e: e.post.deleted_at or "", reverse=True)
        return TrashListing(galleries=galleries, posts=posts)

    def compute_gallery_meta(self, gallery_owner_id: str, gallery_id: str) -> GalleryMeta:
        """Live/tombstoned post counts and the latest live-post activity."""
        posts = self.list_posts_in_gallery(gallery_owner_id, gallery_id, include_deleted=True)
        alive = [e.post for e in posts if not e.post.is_deleted]
        latest = max((max(p.updated_at, p.created_at) for p in alive), default=None)
        return GalleryMeta(
            alive_count=len(alive),
            tombstoned_count=len(posts) - len(alive),
            latest_activity=latest or None,
        )
