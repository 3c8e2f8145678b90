"""Shared primitives: timestamps, identifiers, colors, base model."""

import re
import secrets
from collections.abc import Callable
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

DEFAULT_COLOR = "#6EE7FF"
DEFAULT_ICON = "🖼️"

HEX_COLOR_PATTERN = re.compile(r"^#?([0-9a-fA-F]{6})$")

# Produces an ISO-8601 UTC timestamp string; injectable for tests
Clock = Callable[[], str]


def now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix.

    Fixed width, so string comparison orders timestamps chronologically.
    """
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def new_id(prefix: str = "") -> str:
    """Random URL-safe identifier (12 random bytes) with an optional prefix."""
    return prefix + secrets.token_urlsafe(12)


def normalize_hex(value: str | None, default: str = DEFAULT_COLOR) -> str:
    """Normalize a color to upper-case #RRGGBB, falling back to default."""
    match = HEX_COLOR_PATTERN.match(str(value or "").strip())
    if not match:
        return default
    return f"#{match.group(1)}".upper()


class DocumentModel(BaseModel):
    """Base for everything stored in the persisted document.

    Fields are snake_case in Python and camelCase on disk.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        validate_assignment=False,
    )
