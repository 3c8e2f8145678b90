"""Content core: permission checks, repository, queries and lifecycle."""

from galleria.content.lifecycle import LifecycleEngine
from galleria.content.permissions import can_manage, require_manage, require_self
from galleria.content.queries import QueryLayer
from galleria.content.repository import (
    DEFAULT_GALLERY_TITLE,
    DEFAULT_POST_TITLE,
    ContentRepository,
)

__all__ = [
    "DEFAULT_GALLERY_TITLE",
    "DEFAULT_POST_TITLE",
    "ContentRepository",
    "LifecycleEngine",
    "QueryLayer",
    "can_manage",
    "require_manage",
    "require_self",
]
