"""Request bodies and response views for the content endpoints.

Field limits match what the web UI enforces on its inputs.
"""

from pydantic import Field

from galleria.types import (
    CommentPatch,
    DocumentModel,
    GalleryEntry,
    GalleryFields,
    GalleryMeta,
    GalleryPatch,
    PostEntry,
    PostFields,
    PostPatch,
    SettingsPatch,
    Theme,
    ViewMode,
)

GALLERY_TITLE_MAX = 40
GALLERY_DESCRIPTION_MAX = 300
ICON_MAX = 4
COLOR_MAX = 7
POST_TITLE_MAX = 80
POST_CONTENT_MAX = 4000
COMMENT_MAX = 1000


# --- Requests ---


class GalleryCreate(DocumentModel):
    title: str = Field(default="", max_length=GALLERY_TITLE_MAX)
    description: str = Field(default="", max_length=GALLERY_DESCRIPTION_MAX)
    icon: str | None = Field(default=None, max_length=ICON_MAX)
    color: str | None = Field(default=None, max_length=COLOR_MAX)
    pinned: bool = False

    def to_fields(self) -> GalleryFields:
        return GalleryFields(**self.model_dump())


class GalleryUpdate(DocumentModel):
    title: str | None = Field(default=None, max_length=GALLERY_TITLE_MAX)
    description: str | None = Field(default=None, max_length=GALLERY_DESCRIPTION_MAX)
    icon: str | None = Field(default=None, max_length=ICON_MAX)
    color: str | None = Field(default=None, max_length=COLOR_MAX)
    pinned: bool | None = None

    def to_patch(self) -> GalleryPatch:
        return GalleryPatch(**self.model_dump())


class PostCreate(DocumentModel):
    gallery_id: str
    gallery_owner_id: str | None = None
    title: str = Field(default="", max_length=POST_TITLE_MAX)
    content: str = Field(default="", max_length=POST_CONTENT_MAX)

    def to_fields(self) -> PostFields:
        return PostFields(**self.model_dump())


class PostUpdate(DocumentModel):
    title: str | None = Field(default=None, max_length=POST_TITLE_MAX)
    content: str | None = Field(default=None, max_length=POST_CONTENT_MAX)

    def to_patch(self) -> PostPatch:
        return PostPatch(**self.model_dump())


class CommentCreate(DocumentModel):
    text: str = Field(max_length=COMMENT_MAX)


class CommentUpdate(DocumentModel):
    text: str | None = Field(default=None, max_length=COMMENT_MAX)

    def to_patch(self) -> CommentPatch:
        return CommentPatch(**self.model_dump())


class SettingsUpdate(DocumentModel):
    theme: Theme | None = None
    accent: str | None = Field(default=None, max_length=COLOR_MAX)
    view_mode: ViewMode | None = None

    def to_patch(self) -> SettingsPatch:
        return SettingsPatch(**self.model_dump())


# --- Responses ---


class GalleryView(GalleryEntry):
    """A gallery with its owner and post counts."""

    meta: GalleryMeta


class PostView(PostEntry):
    """A post with its author and live comment count."""

    comment_count: int = 0
