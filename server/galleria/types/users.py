"""User account records."""

from enum import Enum

from pydantic import AliasChoices, Field

from galleria.types.common import DocumentModel

# Iteration count used by records written before it was stored per user
LEGACY_PBKDF2_ITERATIONS = 120_000


class Role(str, Enum):
    """Account roles."""

    USER = "user"
    ADMIN = "admin"


class User(DocumentModel):
    """Registered account.

    Only the salt and derived hash are kept; the password never is.
    """

    id: str = Field(
        validation_alias=AliasChoices("id", "userId"),
        serialization_alias="id",
    )
    username: str
    salt: str = Field(
        validation_alias=AliasChoices("salt", "saltB64"),
        serialization_alias="salt",
    )
    derived_hash: str = Field(
        validation_alias=AliasChoices("derivedHash", "derived_hash", "hashB64"),
        serialization_alias="derivedHash",
    )
    iterations: int = LEGACY_PBKDF2_ITERATIONS
    created_at: str = ""
    role: Role = Role.USER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
