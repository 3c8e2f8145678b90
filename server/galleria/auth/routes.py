"""Registration, login and current-user endpoints."""

import logging

from fastapi import APIRouter, status

from galleria.auth.dependencies import CurrentUser, Store
from galleria.auth.jwt import create_access_token
from galleria.auth.schemas import CredentialsRequest, TokenResponse, UserResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(body: CredentialsRequest, store: Store) -> TokenResponse:
    """Create an account and log it in."""
    async with store.session() as session:
        user = await session.credentials.register(body.username, body.password)
    token = create_access_token(user.id, user.username)
    return TokenResponse(access_token=token, user=UserResponse.from_user(user))


@router.post("/login")
async def login(body: CredentialsRequest, store: Store) -> TokenResponse:
    """Exchange a username and password for an access token."""
    user_id = await store.reader().credentials.verify(body.username, body.password)
    user = store.document.users[user_id]
    logger.info(f"User {user.username!r} logged in", extra={"user_id": user_id})
    return TokenResponse(
        access_token=create_access_token(user.id, user.username),
        user=UserResponse.from_user(user),
    )


@router.get("/me")
async def me(user: CurrentUser) -> UserResponse:
    return UserResponse.from_user(user)
