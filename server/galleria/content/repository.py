"""Permission-gated create/update operations on galleries, posts and comments."""

from __future__ import annotations

import logging

from galleria.content.permissions import require_manage, require_self
from galleria.content.queries import QueryLayer
from galleria.errors import (
    AlreadyDeleted,
    CommentNotFound,
    GalleryDeleted,
    GalleryNotFound,
    PostDeleted,
    PostNotFound,
    UserNotFound,
)
from galleria.types import (
    DEFAULT_ICON,
    Clock,
    Comment,
    CommentPatch,
    DeletionReason,
    Document,
    Gallery,
    GalleryFields,
    GalleryPatch,
    PartitionSettings,
    Post,
    PostFields,
    PostPatch,
    SettingsPatch,
    UserPartition,
    new_id,
    normalize_hex,
    now_iso,
)

logger = logging.getLogger(__name__)

DEFAULT_GALLERY_TITLE = "New gallery"
DEFAULT_POST_TITLE = "New post"


class ContentRepository:
    """Create and update records inside user partitions.

    Every operation takes the acting user's id first. Only the partition
    owner or an admin may mutate a partition's records.
    """

    def __init__(
        self, document: Document, queries: QueryLayer | None = None, clock: Clock = now_iso
    ) -> None:
        self._document = document
        self._queries = queries or QueryLayer(document)
        self._clock = clock

    def _member_partition(self, user_id: str) -> UserPartition:
        """Partition of a registered user; new records never go to an unknown id."""
        if user_id not in self._document.users:
            raise UserNotFound(user_id)
        return self._document.partition(user_id)

    def _existing_partition(self, user_id: str) -> UserPartition:
        """Partition for lookups; an unknown id reads as empty and is not created."""
        part = self._document.user_data.get(user_id)
        return part if part is not None else UserPartition()

    # --- Galleries ---

    def create_gallery(self, actor_id: str, owner_id: str, fields: GalleryFields) -> Gallery:
        require_manage(self._document, actor_id, owner_id, "create a gallery")
        partition = self._member_partition(owner_id)

        now = self._clock()
        gallery = Gallery(
            id=new_id("g_"),
            title=fields.title.strip() or DEFAULT_GALLERY_TITLE,
            description=fields.description.strip(),
            icon=fields.icon or DEFAULT_ICON,
            color=normalize_hex(fields.color),
            pinned=fields.pinned,
            created_at=now,
            updated_at=now,
        )
        partition.galleries[gallery.id] = gallery
        logger.info(
            f"Gallery {gallery.id} created in partition {owner_id}", extra={"user_id": actor_id}
        )
        return gallery

    def update_gallery(
        self, actor_id: str, owner_id: str, gallery_id: str, patch: GalleryPatch
    ) -> Gallery:
        """Merge the provided fields into a live gallery.

        Raises:
            PermissionDenied, GalleryNotFound, AlreadyDeleted
        """
        require_manage(self._document, actor_id, owner_id, "edit this gallery")
        gallery = self._existing_partition(owner_id).galleries.get(gallery_id)
        if gallery is None:
            raise GalleryNotFound(gallery_id)
        if gallery.is_deleted:
            raise AlreadyDeleted(f"Gallery {gallery_id} is deleted")

        if patch.title is not None:
            gallery.title = patch.title.strip()
        if patch.description is not None:
            gallery.description = patch.description.strip()
        if patch.icon is not None:
            gallery.icon = patch.icon
        if patch.color is not None:
            gallery.color = normalize_hex(patch.color)
        if patch.pinned is not None:
            gallery.pinned = patch.pinned
        gallery.updated_at = self._clock()
        logger.info(f"Gallery {gallery_id} updated", extra={"user_id": actor_id})
        return gallery

    # --- Posts ---

    def create_post(self, actor_id: str, author_id: str, fields: PostFields) -> Post:
        """Create a post in the author's partition, targeting any live gallery.

        The gallery may belong to another user.

        Raises:
            PermissionDenied, GalleryNotFound, GalleryDeleted
        """
        require_manage(self._document, actor_id, author_id, "create a post")
        partition = self._member_partition(author_id)
        target = self._queries.resolve_gallery(fields.gallery_id, fields.gallery_owner_id)
        if target.gallery.is_deleted:
            raise GalleryDeleted(f"Gallery {fields.gallery_id} is deleted")

        now = self._clock()
        post = Post(
            id=new_id("p_"),
            gallery_owner_id=target.owner_id,
            gallery_id=target.gallery.id,
            title=fields.title.strip() or DEFAULT_POST_TITLE,
            content=fields.content.strip(),
            created_at=now,
            updated_at=now,
            deletion_reason=DeletionReason.NONE,
        )
        partition.posts[post.id] = post
        logger.info(
            f"Post {post.id} created in gallery {target.gallery.id} "
            f"(owner {target.owner_id}, author {author_id})",
            extra={"user_id": actor_id},
        )
        return post

    def update_post(self, actor_id: str, author_id: str, post_id: str, patch: PostPatch) -> Post:
        require_manage(self._document, actor_id, author_id, "edit this post")
        post = self._existing_partition(author_id).posts.get(post_id)
        if post is None:
            raise PostNotFound(post_id)
        if post.is_deleted:
            raise AlreadyDeleted(f"Post {post_id} is deleted")

        if patch.title is not None:
            post.title = patch.title.strip()
        if patch.content is not None:
            post.content = patch.content.strip()
        post.updated_at = self._clock()
        logger.info(f"Post {post_id} updated", extra={"user_id": actor_id})
        return post

    # --- Comments ---

    def create_comment(self, actor_id: str, author_id: str, post_id: str, text: str) -> Comment:
        """Comment on any live post. The post is found by a full scan.

        Raises:
            PermissionDenied, PostNotFound, PostDeleted
        """
        require_manage(self._document, actor_id, author_id, "comment")
        partition = self._member_partition(author_id)
        target = self._queries.resolve_post(post_id)
        if target.post.is_deleted:
            raise PostDeleted(f"Post {post_id} is deleted")

        now = self._clock()
        comment = Comment(
            id=new_id("c_"),
            post_id=post_id,
            text=text.strip(),
            created_at=now,
            updated_at=now,
        )
        partition.comments[comment.id] = comment
        logger.info(f"Comment {comment.id} added to post {post_id}", extra={"user_id": actor_id})
        return comment

    def update_comment(
        self, actor_id: str, author_id: str, comment_id: str, patch: CommentPatch
    ) -> Comment:
        require_manage(self._document, actor_id, author_id, "edit this comment")
        comment = self._existing_partition(author_id).comments.get(comment_id)
        if comment is None:
            raise CommentNotFound(comment_id)
        if comment.is_deleted:
            raise AlreadyDeleted(f"Comment {comment_id} is deleted")

        if patch.text is not None:
            comment.text = patch.text.strip()
        comment.updated_at = self._clock()
        logger.info(f"Comment {comment_id} updated", extra={"user_id": actor_id})
        return comment

    # --- Settings ---

    def get_settings(self, actor_id: str, user_id: str) -> PartitionSettings:
        require_self(self._document, actor_id, user_id, "read these settings")
        return self._document.partition(user_id).settings

    def update_settings(
        self, actor_id: str, user_id: str, patch: SettingsPatch
    ) -> PartitionSettings:
        """Change display preferences. Owner only; admins cannot edit others' settings."""
        require_self(self._document, actor_id, user_id, "change these settings")
        current = self._document.partition(user_id).settings
        if patch.theme is not None:
            current.theme = patch.theme
        if patch.accent is not None:
            current.accent = normalize_hex(patch.accent, default=current.accent)
        if patch.view_mode is not None:
            current.view_mode = patch.view_mode
        return current
