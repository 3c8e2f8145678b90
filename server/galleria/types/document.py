"""The persisted document: users, username index and per-user partitions."""

import logging
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator

from galleria.types.common import DEFAULT_COLOR, DocumentModel, normalize_hex
from galleria.types.content import Comment, Gallery, Post
from galleria.types.users import User

logger = logging.getLogger(__name__)

DOCUMENT_VERSION = 2
UNKNOWN_USER_NAME = "unknown"


class Theme(str, Enum):
    DARK = "dark"
    LIGHT = "light"


class ViewMode(str, Enum):
    GRID = "grid"
    LIST = "list"


_THEME_VALUES = tuple(t.value for t in Theme)
_VIEW_MODE_VALUES = tuple(v.value for v in ViewMode)


class PartitionSettings(DocumentModel):
    """Per-user display preferences."""

    theme: Theme = Theme.DARK
    accent: str = DEFAULT_COLOR
    view_mode: ViewMode = ViewMode.GRID

    # Blank or unknown stored values fall back to defaults instead of failing the load

    @field_validator("theme", mode="before")
    @classmethod
    def _theme_or_default(cls, value: Any) -> Any:
        if isinstance(value, Theme) or value in _THEME_VALUES:
            return value
        return Theme.DARK

    @field_validator("view_mode", mode="before")
    @classmethod
    def _view_mode_or_default(cls, value: Any) -> Any:
        if isinstance(value, ViewMode) or value in _VIEW_MODE_VALUES:
            return value
        return ViewMode.GRID

    @field_validator("accent", mode="before")
    @classmethod
    def _normalize_accent(cls, value: Any) -> str:
        return normalize_hex(value)


class SettingsPatch(BaseModel):
    theme: Theme | None = None
    accent: str | None = None
    view_mode: ViewMode | None = None


class UserPartition(DocumentModel):
    """One user's own galleries, posts, comments and settings."""

    settings: PartitionSettings = Field(default_factory=PartitionSettings)
    galleries: dict[str, Gallery] = Field(default_factory=dict)
    posts: dict[str, Post] = Field(default_factory=dict)
    comments: dict[str, Comment] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _nulls_to_empty(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {key: value for key, value in data.items() if value is not None}


class Document(DocumentModel):
    """Whole-store document; read, mutated and written back as one unit."""

    version: int = DOCUMENT_VERSION
    users: dict[str, User] = Field(default_factory=dict)
    username_index: dict[str, str] = Field(default_factory=dict)
    user_data: dict[str, UserPartition] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def _nulls_to_empty(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        return {key: value for key, value in data.items() if value is not None}

    @field_validator("version", mode="before")
    @classmethod
    def _upgrade_version(cls, value: Any) -> int:
        # Older layouts are read through field aliases and written back in the current one
        return DOCUMENT_VERSION

    @model_validator(mode="after")
    def _check_username_index(self) -> "Document":
        """Keep users and username_index mutually consistent.

        Users are authoritative: a stale or partial index is rebuilt from them.
        Two accounts sharing a username cannot be reconciled.
        """
        rebuilt: dict[str, str] = {}
        for user_id, user in self.users.items():
            if user.id != user_id:
                raise ValueError(f"user record {user.id} stored under key {user_id}")
            if user.username in rebuilt:
                raise ValueError(f"duplicate username {user.username!r}")
            rebuilt[user.username] = user_id
        if rebuilt != self.username_index:
            if self.username_index:
                logger.warning(
                    f"Username index out of sync ({len(self.username_index)} entries, "
                    f"{len(rebuilt)} users), rebuilding"
                )
            self.username_index = rebuilt
        return self

    # --- Partition access ---

    def partition(self, user_id: str) -> UserPartition:
        """Get a user's partition, creating an empty one on first reference."""
        part = self.user_data.get(user_id)
        if part is None:
            part = UserPartition()
            self.user_data[user_id] = part
        return part

    def username_for(self, user_id: str) -> str:
        user = self.users.get(user_id)
        return user.username if user else UNKNOWN_USER_NAME

    def is_admin(self, user_id: str) -> bool:
        user = self.users.get(user_id)
        return user is not None and user.is_admin

    def to_json_dict(self) -> dict[str, Any]:
        """Serialize to the on-disk / export shape (camelCase keys)."""
        return self.model_dump(mode="json", by_alias=True)
