"""Type definitions for galleria.

This package contains all type definitions organized into focused modules:
- common: timestamps, identifiers, colors and the document base model
- users: account records and roles
- content: galleries, posts, comments and their create/patch field sets
- document: the persisted document and per-user partitions
- views: read-side shapes returned by queries and purges
"""

from galleria.types.common import (
    DEFAULT_COLOR,
    DEFAULT_ICON,
    Clock,
    DocumentModel,
    new_id,
    normalize_hex,
    now_iso,
)
from galleria.types.content import (
    Comment,
    CommentPatch,
    DeletionReason,
    Gallery,
    GalleryFields,
    GalleryPatch,
    Post,
    PostFields,
    PostPatch,
)
from galleria.types.document import (
    DOCUMENT_VERSION,
    UNKNOWN_USER_NAME,
    Document,
    PartitionSettings,
    SettingsPatch,
    Theme,
    UserPartition,
    ViewMode,
)
from galleria.types.users import LEGACY_PBKDF2_ITERATIONS, Role, User
from galleria.types.views import (
    CommentEntry,
    GalleryEntry,
    GalleryMeta,
    PostEntry,
    PurgeReport,
    TrashListing,
)

__all__ = [
    # Common
    "Clock",
    "DEFAULT_COLOR",
    "DEFAULT_ICON",
    "DocumentModel",
    "new_id",
    "normalize_hex",
    "now_iso",
    # Users
    "LEGACY_PBKDF2_ITERATIONS",
    "Role",
    "User",
    # Content
    "Comment",
    "CommentPatch",
    "DeletionReason",
    "Gallery",
    "GalleryFields",
    "GalleryPatch",
    "Post",
    "PostFields",
    "PostPatch",
    # Document
    "DOCUMENT_VERSION",
    "Document",
    "PartitionSettings",
    "SettingsPatch",
    "Theme",
    "UNKNOWN_USER_NAME",
    "UserPartition",
    "ViewMode",
    # Views
    "CommentEntry",
    "GalleryEntry",
    "GalleryMeta",
    "PostEntry",
    "PurgeReport",
    "TrashListing",
]
