"""FastAPI dependencies for the document store and the authenticated user."""

from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from galleria.auth.jwt import TokenError, get_user_id_from_token
from galleria.store import DocumentStore
from galleria.types import User

bearer_scheme = HTTPBearer(auto_error=False)


def get_store(request: Request) -> DocumentStore:
    """The store opened by the application lifespan."""
    store: DocumentStore = request.app.state.store
    return store


Store = Annotated[DocumentStore, Depends(get_store)]


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    store: Store,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> User:
    """Resolve the bearer token to a registered account."""
    if credentials is None:
        raise _unauthorized("Missing authentication token")

    try:
        user_id = get_user_id_from_token(credentials.credentials)
    except TokenError as e:
        raise _unauthorized(str(e)) from e

    user = store.document.users.get(user_id)
    if user is None:
        raise _unauthorized("User not found")
    return user


async def get_admin_user(user: Annotated[User, Depends(get_current_user)]) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin only")
    return user


CurrentUser = Annotated[User, Depends(get_current_user)]
AdminUser = Annotated[User, Depends(get_admin_user)]
