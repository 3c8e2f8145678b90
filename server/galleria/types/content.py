"""Gallery, post and comment records plus the field sets used to create and patch them."""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, Field, field_validator, model_validator

from galleria.types.common import DEFAULT_COLOR, DEFAULT_ICON, DocumentModel, normalize_hex


class DeletionReason(str, Enum):
    """Why a post carries a tombstone.

    - NONE: not deleted
    - DIRECT: deleted on its own; a gallery restore leaves it deleted
    - CASCADE: deleted because its gallery was; a gallery restore brings it back
    """

    NONE = "none"
    DIRECT = "direct"
    CASCADE = "cascade"


class Gallery(DocumentModel):
    """Gallery record, stored in its owner's partition."""

    id: str
    title: str
    description: str = Field(
        default="",
        validation_alias=AliasChoices("description", "desc"),
        serialization_alias="description",
    )
    icon: str = DEFAULT_ICON
    color: str = DEFAULT_COLOR
    pinned: bool = False
    created_at: str
    updated_at: str
    deleted_at: str | None = None

    @field_validator("color", mode="before")
    @classmethod
    def _normalize_color(cls, value: Any) -> str:
        return normalize_hex(value)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


class Post(DocumentModel):
    """Post record, stored in its author's partition.

    The gallery it belongs to may live in another user's partition.
    """

    id: str
    gallery_owner_id: str | None = None  # Missing on old records: author owns the gallery
    gallery_id: str
    title: str = ""
    content: str = ""
    created_at: str
    updated_at: str
    deleted_at: str | None = None
    deletion_reason: DeletionReason = DeletionReason.NONE

    @model_validator(mode="before")
    @classmethod
    def _upgrade_deleted_by_gallery(cls, data: Any) -> Any:
        """Map the legacy boolean deletedByGallery flag onto deletion_reason."""
        if not isinstance(data, dict):
            return data
        if "deletionReason" in data or "deletion_reason" in data:
            return data
        if not data.get("deletedAt") and not data.get("deleted_at"):
            return data
        upgraded = dict(data)
        upgraded["deletionReason"] = (
            DeletionReason.CASCADE if data.get("deletedByGallery") else DeletionReason.DIRECT
        )
        return upgraded

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @property
    def deleted_by_gallery(self) -> bool:
        return self.deletion_reason == DeletionReason.CASCADE

    def owner_of_gallery(self, author_id: str) -> str:
        """Partition id of the owning gallery, defaulting to the author's own."""
        return self.gallery_owner_id or author_id


class Comment(DocumentModel):
    """Comment record, stored in its author's partition."""

    id: str
    post_id: str
    text: str = ""
    created_at: str
    updated_at: str
    deleted_at: str | None = None

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None


# --- Create / patch field sets ---
# Patch fields left as None keep their current value.


class GalleryFields(BaseModel):
    title: str = ""
    description: str = ""
    icon: str | None = None
    color: str | None = None
    pinned: bool = False


class GalleryPatch(BaseModel):
    title: str | None = None
    description: str | None = None
    icon: str | None = None
    color: str | None = None
    pinned: bool | None = None


class PostFields(BaseModel):
    gallery_id: str
    gallery_owner_id: str | None = None  # Resolution hint
    title: str = ""
    content: str = ""


class PostPatch(BaseModel):
    title: str | None = None
    content: str | None = None


class CommentPatch(BaseModel):
    text: str | None = None
