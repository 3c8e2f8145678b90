"""Password hashing with PBKDF2-HMAC-SHA256.

Salts and derived keys are stored base64-encoded, alongside the iteration
count that produced them.
"""

import base64
import hashlib
import hmac
import secrets

DIGEST = "sha256"
KEY_LENGTH = 32  # 256-bit derived key


def generate_salt(nbytes: int = 16) -> str:
    """Fresh random salt, base64-encoded."""
    return base64.b64encode(secrets.token_bytes(nbytes)).decode("ascii")


def derive_key(password: str, salt: str, iterations: int) -> str:
    """Derive a base64-encoded key from a password and a base64 salt."""
    raw = hashlib.pbkdf2_hmac(
        DIGEST,
        password.encode("utf-8"),
        base64.b64decode(salt),
        iterations,
        dklen=KEY_LENGTH,
    )
    return base64.b64encode(raw).decode("ascii")


def hash_password(password: str, iterations: int, salt_bytes: int = 16) -> tuple[str, str]:
    """Hash a new password. Returns (salt, derived_hash)."""
    salt = generate_salt(salt_bytes)
    return salt, derive_key(password, salt, iterations)


def verify_password(password: str, salt: str, derived_hash: str, iterations: int) -> bool:
    """Check a password against a stored salt and hash in constant time."""
    candidate = derive_key(password, salt, iterations)
    return hmac.compare_digest(candidate.encode("utf-8"), derived_hash.encode("utf-8"))
