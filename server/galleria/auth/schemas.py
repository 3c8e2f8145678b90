"""Request and response bodies for the auth endpoints."""

from pydantic import BaseModel, Field

from galleria.types import DocumentModel, Role, User


class CredentialsRequest(BaseModel):
    # Username shape is checked by the credential store so failures carry its error code
    username: str = Field(max_length=256)
    password: str = Field(min_length=1, max_length=256)


class UserResponse(DocumentModel):
    """Public view of an account; never includes salt or hash."""

    id: str
    username: str
    role: Role
    created_at: str

    @classmethod
    def from_user(cls, user: User) -> "UserResponse":
        return cls(id=user.id, username=user.username, role=user.role, created_at=user.created_at)


class TokenResponse(DocumentModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
