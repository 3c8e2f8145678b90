"""Owner-or-admin permission checks."""

import logging

from galleria.errors import PermissionDenied
from galleria.types import Document

logger = logging.getLogger(__name__)


def can_manage(document: Document, actor_id: str, owner_id: str) -> bool:
    """True if the actor may mutate records in owner_id's partition.

    Unregistered actors manage nothing, not even a partition keyed by their own id.
    """
    if actor_id not in document.users:
        return False
    return actor_id == owner_id or document.is_admin(actor_id)


def require_manage(document: Document, actor_id: str, owner_id: str, action: str) -> None:
    """Raise PermissionDenied unless the actor may mutate owner_id's partition."""
    if not can_manage(document, actor_id, owner_id):
        logger.warning(
            f"Denied {action} on partition {owner_id}",
            extra={"user_id": actor_id, "action": action},
        )
        raise PermissionDenied(f"Not allowed to {action}")


def require_self(document: Document, actor_id: str, user_id: str, action: str) -> None:
    """Raise PermissionDenied unless the actor is the partition owner (admins included)."""
    if actor_id not in document.users or actor_id != user_id:
        logger.warning(
            f"Denied {action} on partition {user_id}",
            extra={"user_id": actor_id, "action": action},
        )
        raise PermissionDenied(f"Not allowed to {action}")
