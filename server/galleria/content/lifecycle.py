"""Soft-delete, restore and purge, including cross-partition cascades.

Deleting a gallery tombstones every live post filed under it, whoever
authored them, and marks those posts as cascade deletions. Restoring the
gallery brings back only the cascade deletions; posts their authors had
deleted on their own stay in the trash.

Purge is permanent and authorized at the top-level entity only: owning a
gallery (or being an admin) is enough to remove every post and comment
under it, including records that live in other users' partitions.
"""

from __future__ import annotations

import logging

from galleria.content.permissions import require_manage
from galleria.content.queries import QueryLayer
from galleria.errors import (
    AlreadyDeleted,
    CommentNotFound,
    GalleryNotFound,
    NotDeleted,
    ParentUnavailable,
    PostNotFound,
)
from galleria.types import (
    Clock,
    Comment,
    DeletionReason,
    Document,
    Gallery,
    Post,
    PurgeReport,
    now_iso,
)

logger = logging.getLogger(__name__)


class LifecycleEngine:
    """Delete, restore and purge galleries, posts and comments."""

    def __init__(
        self, document: Document, queries: QueryLayer | None = None, clock: Clock = now_iso
    ) -> None:
        self._document = document
        self._queries = queries or QueryLayer(document)
        self._clock = clock

    # --- Lookups within a known partition ---

    def _gallery(self, owner_id: str, gallery_id: str) -> Gallery:
        gallery = self._document.partition(owner_id).galleries.get(gallery_id)
        if gallery is None:
            raise GalleryNotFound(gallery_id)
        return gallery

    def _post(self, author_id: str, post_id: str) -> Post:
        post = self._document.partition(author_id).posts.get(post_id)
        if post is None:
            raise PostNotFound(post_id)
        return post

    def _comment(self, author_id: str, comment_id: str) -> Comment:
        comment = self._document.partition(author_id).comments.get(comment_id)
        if comment is None:
            raise CommentNotFound(comment_id)
        return comment

    def _purge_comments_on(self, post_ids: set[str]) -> int:
        """Remove every comment, in every partition, that targets one of post_ids."""
        removed = 0
        for part in self._document.user_data.values():
            doomed = [cid for cid, c in part.comments.items() if c.post_id in post_ids]
            for cid in doomed:
                del part.comments[cid]
            removed += len(doomed)
        return removed

    # --- Galleries ---

    def delete_gallery(self, actor_id: str, owner_id: str, gallery_id: str) -> Gallery:
        """Tombstone a gallery and cascade to its live posts.

        Posts already tombstoned keep their existing deletion reason.

        Raises:
            PermissionDenied, GalleryNotFound, AlreadyDeleted
        """
        require_manage(self._document, actor_id, owner_id, "delete this gallery")
        gallery = self._gallery(owner_id, gallery_id)
        if gallery.is_deleted:
            raise AlreadyDeleted(f"Gallery {gallery_id} is already deleted")

        now = self._clock()
        gallery.deleted_at = now
        gallery.updated_at = now

        cascaded = 0
        for entry in self._queries.list_posts_in_gallery(
            owner_id, gallery_id, include_deleted=True
        ):
            post = entry.post
            if post.is_deleted:
                continue
            post.deleted_at = now
            post.updated_at = now
            post.deletion_reason = DeletionReason.CASCADE
            cascaded += 1

        logger.info(
            f"Gallery {gallery_id} deleted, {cascaded} posts cascaded",
            extra={"user_id": actor_id},
        )
        return gallery

    def restore_gallery(self, actor_id: str, owner_id: str, gallery_id: str) -> Gallery:
        """Clear a gallery's tombstone and bring back its cascade-deleted posts.

        Raises:
            PermissionDenied, GalleryNotFound, NotDeleted
        """
        require_manage(self._document, actor_id, owner_id, "restore this gallery")
        gallery = self._gallery(owner_id, gallery_id)
        if not gallery.is_deleted:
            raise NotDeleted(f"Gallery {gallery_id} is not deleted")

        now = self._clock()
        gallery.deleted_at = None
        gallery.updated_at = now

        restored = 0
        for entry in self._queries.list_posts_in_gallery(
            owner_id, gallery_id, include_deleted=True
        ):
            post = entry.post
            if post.is_deleted and post.deleted_by_gallery:
                post.deleted_at = None
                post.deletion_reason = DeletionReason.NONE
                post.updated_at = now
                restored += 1

        logger.info(
            f"Gallery {gallery_id} restored with {restored} posts",
            extra={"user_id": actor_id},
        )
        return gallery

    def purge_gallery(self, actor_id: str, owner_id: str, gallery_id: str) -> PurgeReport:
        """Permanently remove a gallery, every post under it and their comments.

        Works on live and tombstoned galleries alike.

        Raises:
            PermissionDenied, GalleryNotFound
        """
        require_manage(self._document, actor_id, owner_id, "purge this gallery")
        self._gallery(owner_id, gallery_id)

        posts = self._queries.list_posts_in_gallery(owner_id, gallery_id, include_deleted=True)
        post_ids = {entry.post.id for entry in posts}
        comments = self._purge_comments_on(post_ids)
        for entry in posts:
            del self._document.user_data[entry.author_id].posts[entry.post.id]
        del self._document.user_data[owner_id].galleries[gallery_id]

        report = PurgeReport(galleries=1, posts=len(posts), comments=comments)
        logger.info(
            f"Gallery {gallery_id} purged ({report.posts} posts, {report.comments} comments)",
            extra={"user_id": actor_id},
        )
        return report

    # --- Posts ---

    def delete_post(self, actor_id: str, author_id: str, post_id: str) -> Post:
        """Tombstone a post on its own, independent of its gallery.

        Raises:
            PermissionDenied, PostNotFound, AlreadyDeleted
        """
        require_manage(self._document, actor_id, author_id, "delete this post")
        post = self._post(author_id, post_id)
        if post.is_deleted:
            raise AlreadyDeleted(f"Post {post_id} is already deleted")

        now = self._clock()
        post.deleted_at = now
        post.updated_at = now
        post.deletion_reason = DeletionReason.DIRECT
        logger.info(f"Post {post_id} deleted", extra={"user_id": actor_id})
        return post

    def restore_post(self, actor_id: str, author_id: str, post_id: str) -> Post:
        """Clear a post's tombstone. The owning gallery must be live.

        Raises:
            PermissionDenied, PostNotFound, NotDeleted, ParentUnavailable
        """
        require_manage(self._document, actor_id, author_id, "restore this post")
        post = self._post(author_id, post_id)
        if not post.is_deleted:
            raise NotDeleted(f"Post {post_id} is not deleted")

        try:
            target = self._queries.resolve_gallery(
                post.gallery_id, post.owner_of_gallery(author_id)
            )
        except GalleryNotFound:
            raise ParentUnavailable(
                f"Gallery {post.gallery_id} no longer exists; post {post_id} cannot be restored"
            ) from None
        if target.gallery.is_deleted:
            raise ParentUnavailable(
                f"Gallery {post.gallery_id} is deleted; restore the gallery first"
            )

        post.deleted_at = None
        post.deletion_reason = DeletionReason.NONE
        post.updated_at = self._clock()
        logger.info(f"Post {post_id} restored", extra={"user_id": actor_id})
        return post

    def purge_post(self, actor_id: str, author_id: str, post_id: str) -> PurgeReport:
        """Permanently remove a post and every comment on it.

        Raises:
            PermissionDenied, PostNotFound
        """
        require_manage(self._document, actor_id, author_id, "purge this post")
        self._post(author_id, post_id)

        comments = self._purge_comments_on({post_id})
        del self._document.user_data[author_id].posts[post_id]

        logger.info(
            f"Post {post_id} purged ({comments} comments)", extra={"user_id": actor_id}
        )
        return PurgeReport(posts=1, comments=comments)

    # --- Comments ---

    def delete_comment(self, actor_id: str, author_id: str, comment_id: str) -> Comment:
        require_manage(self._document, actor_id, author_id, "delete this comment")
        comment = self._comment(author_id, comment_id)
        if comment.is_deleted:
            raise AlreadyDeleted(f"Comment {comment_id} is already deleted")

        now = self._clock()
        comment.deleted_at = now
        comment.updated_at = now
        logger.info(f"Comment {comment_id} deleted", extra={"user_id": actor_id})
        return comment

    def restore_comment(self, actor_id: str, author_id: str, comment_id: str) -> Comment:
        """Clear a comment's tombstone. The post it targets must be live.

        Raises:
            PermissionDenied, CommentNotFound, NotDeleted, ParentUnavailable
        """
        require_manage(self._document, actor_id, author_id, "restore this comment")
        comment = self._comment(author_id, comment_id)
        if not comment.is_deleted:
            raise NotDeleted(f"Comment {comment_id} is not deleted")

        try:
            target = self._queries.resolve_post(comment.post_id)
        except PostNotFound:
            raise ParentUnavailable(
                f"Post {comment.post_id} no longer exists; comment cannot be restored"
            ) from None
        if target.post.is_deleted:
            raise ParentUnavailable(f"Post {comment.post_id} is deleted; restore the post first")

        comment.deleted_at = None
        comment.updated_at = self._clock()
        logger.info(f"Comment {comment_id} restored", extra={"user_id": actor_id})
        return comment

    def purge_comment(self, actor_id: str, author_id: str, comment_id: str) -> PurgeReport:
        require_manage(self._document, actor_id, author_id, "purge this comment")
        self._comment(author_id, comment_id)
        del self._document.user_data[author_id].comments[comment_id]
        logger.info(f"Comment {comment_id} purged", extra={"user_id": actor_id})
        return PurgeReport(comments=1)
