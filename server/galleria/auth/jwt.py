"""Bearer tokens for the API.

Tokens carry the user id as ``sub`` plus the username for display; the id is
what the routes pass into the store as the acting user.
"""

from datetime import UTC, datetime, timedelta
from typing import Any

from jose import JWTError, jwt

from galleria.config import settings

ACCESS_TOKEN = "access"


class TokenError(Exception):
    """Token missing, malformed, expired or of the wrong type."""


def _secret() -> str:
    if not settings.jwt_secret:
        raise TokenError("GALLERIA_JWT_SECRET not configured")
    return settings.jwt_secret


def create_access_token(user_id: str, username: str) -> str:
    issued = datetime.now(UTC)
    claims = {
        "sub": user_id,
        "username": username,
        "type": ACCESS_TOKEN,
        "iat": issued,
        "exp": issued + timedelta(minutes=settings.jwt_access_token_expire_minutes),
    }
    return jwt.encode(claims, _secret(), algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    """Verify signature and expiry, returning the claims.

    Raises:
        TokenError: If verification fails
    """
    try:
        return jwt.decode(token, _secret(), algorithms=[settings.jwt_algorithm])
    except JWTError as e:
        raise TokenError(f"Invalid token: {e}") from e


def get_user_id_from_token(token: str, expected_type: str = ACCESS_TOKEN) -> str:
    """Acting user id from a verified token of the expected type."""
    claims = decode_token(token)
    if claims.get("type") != expected_type:
        raise TokenError(f"Expected {expected_type} token, got {claims.get('type')}")

    user_id = claims.get("sub")
    if not isinstance(user_id, str) or not user_id:
        raise TokenError("Token missing user ID")
    return user_id
