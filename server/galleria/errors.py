"""Error hierarchy for every failure a store command can report.

Each error carries a stable ``code`` tag (what API clients and the CLI
switch on) and the HTTP status the API answers with. Core operations
raise these; nothing else is expected to escape a store command.
"""


class GalleriaError(Exception):
    """Base exception for all galleria failures."""

    code = "error"
    http_status = 500

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message()
        super().__init__(self.message)

    def default_message(self) -> str:
        return self.code.replace("_", " ")

    def to_response(self) -> dict[str, dict[str, str]]:
        """Convert to the REST error envelope."""
        return {"error": {"code": self.code, "message": self.message}}


class PermissionDenied(GalleriaError):
    """Actor is neither the partition owner nor an admin."""

    code = "permission_denied"
    http_status = 403


class NotFound(GalleriaError):
    code = "not_found"
    http_status = 404
    entity = "entity"

    def __init__(self, entity_id: str | None = None, message: str | None = None) -> None:
        self.entity_id = entity_id
        if message is None and entity_id is not None:
            message = f"{self.entity} {entity_id} not found"
        super().__init__(message)


class GalleryNotFound(NotFound):
    code = "gallery_not_found"
    entity = "gallery"


class PostNotFound(NotFound):
    code = "post_not_found"
    entity = "post"


class CommentNotFound(NotFound):
    code = "comment_not_found"
    entity = "comment"


class UserNotFound(NotFound):
    code = "user_not_found"
    entity = "user"


class AlreadyDeleted(GalleriaError):
    """Entity is tombstoned; updates and repeated deletes are refused."""

    code = "already_deleted"
    http_status = 409


class NotDeleted(GalleriaError):
    """Restore was asked for an entity that is not tombstoned."""

    code = "not_deleted"
    http_status = 409


class ParentUnavailable(GalleriaError):
    """The parent entity is tombstoned or gone."""

    code = "parent_unavailable"
    http_status = 409


class GalleryDeleted(ParentUnavailable):
    code = "gallery_deleted"


class PostDeleted(ParentUnavailable):
    code = "post_deleted"


class DuplicateUsername(GalleriaError):
    code = "duplicate_username"
    http_status = 409


class InvalidUsername(GalleriaError):
    code = "invalid_username"
    http_status = 400


class InvalidCredentials(GalleriaError):
    """Unknown username or wrong password; deliberately indistinguishable."""

    code = "invalid_credentials"
    http_status = 401

    def default_message(self) -> str:
        return "Invalid username or password"


class MalformedImport(GalleriaError):
    code = "malformed_import"
    http_status = 400
