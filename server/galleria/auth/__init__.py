"""Authentication module for galleria.

The FastAPI router and dependencies live in ``galleria.auth.routes`` and
``galleria.auth.dependencies``; they are not re-exported here because they
depend on the store, which itself depends on the credential store.
"""

from galleria.auth.credentials import CredentialStore, validate_username
from galleria.auth.jwt import TokenError, create_access_token, decode_token
from galleria.auth.password import hash_password, verify_password

__all__ = [
    "CredentialStore",
    "TokenError",
    "create_access_token",
    "decode_token",
    "hash_password",
    "validate_username",
    "verify_password",
]
