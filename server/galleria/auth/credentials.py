"""Account registration, verification and admin bootstrap."""

from __future__ import annotations

import asyncio
import logging
import re
from collections.abc import Iterable

from galleria.auth.password import derive_key, generate_salt, verify_password
from galleria.errors import DuplicateUsername, InvalidCredentials, InvalidUsername, UserNotFound
from galleria.types import Clock, Document, Role, User, new_id, now_iso

logger = logging.getLogger(__name__)

USERNAME_MIN_LENGTH = 2
USERNAME_MAX_LENGTH = 20
_WHITESPACE = re.compile(r"\s")


def validate_username(username: str) -> None:
    """Raise InvalidUsername unless username is 2-20 chars with no whitespace."""
    if not USERNAME_MIN_LENGTH <= len(username) <= USERNAME_MAX_LENGTH:
        raise InvalidUsername(
            f"Username must be {USERNAME_MIN_LENGTH}-{USERNAME_MAX_LENGTH} characters"
        )
    if _WHITESPACE.search(username):
        raise InvalidUsername("Username must not contain whitespace")


class CredentialStore:
    """Registers and verifies accounts held in a document.

    Key derivation runs in a worker thread; uniqueness is checked again
    after it finishes, right before the account is committed.
    """

    def __init__(
        self,
        document: Document,
        *,
        iterations: int,
        salt_bytes: int = 16,
        reserved_usernames: Iterable[str] = (),
        clock: Clock = now_iso,
    ) -> None:
        self._document = document
        self._iterations = iterations
        self._salt_bytes = salt_bytes
        self._reserved = frozenset(reserved_usernames)
        self._clock = clock
        # Derived once, lazily: used to burn equal time on unknown usernames
        self._dummy_salt: str | None = None

    def get_user(self, user_id: str) -> User:
        user = self._document.users.get(user_id)
        if user is None:
            raise UserNotFound(user_id)
        return user

    def find_by_username(self, username: str) -> User | None:
        user_id = self._document.username_index.get(username)
        return self._document.users.get(user_id) if user_id else None

    async def register(self, username: str, password: str) -> User:
        """Create a regular account.

        Raises:
            InvalidUsername: Malformed or reserved username.
            DuplicateUsername: Username already taken.
        """
        validate_username(username)
        if username in self._reserved:
            raise InvalidUsername(f"Username {username!r} is reserved")
        return await self._create(username, password, Role.USER)

    async def verify(self, username: str, password: str) -> str:
        """Check a username/password pair and return the account id.

        Unknown usernames and wrong passwords fail identically.

        Raises:
            InvalidCredentials
        """
        user = self.find_by_username(username)
        if user is None:
            if self._dummy_salt is None:
                self._dummy_salt = generate_salt(self._salt_bytes)
            await asyncio.to_thread(derive_key, password, self._dummy_salt, self._iterations)
            logger.info(f"Login failed for unknown username {username!r}")
            raise InvalidCredentials()

        ok = await asyncio.to_thread(
            verify_password, password, user.salt, user.derived_hash, user.iterations
        )
        if not ok:
            logger.info("Login failed: wrong password", extra={"user_id": user.id})
            raise InvalidCredentials()
        return user.id

    async def ensure_admin(self, username: str, password: str | None) -> User | None:
        """Make sure the bootstrap account exists and holds the admin role.

        An existing account is elevated. A missing one is created only when
        a provisioning password is given; otherwise nothing is provisioned.
        Other admins are left alone.
        """
        user = self.find_by_username(username)
        if user is not None:
            if not user.is_admin:
                user.role = Role.ADMIN
                logger.warning(f"Elevated existing account {username!r} to admin")
            self._document.partition(user.id)
            return user

        if not password:
            logger.warning(
                f"No admin account {username!r} and no provisioning password configured; "
                "skipping admin bootstrap"
            )
            return None

        validate_username(username)
        user = await self._create(username, password, Role.ADMIN)
        logger.info(f"Provisioned admin account {username!r}", extra={"user_id": user.id})
        return user

    def set_role(self, user_id: str, role: Role) -> User:
        user = self.get_user(user_id)
        user.role = role
        logger.info(f"Role of {user.username!r} set to {role.value}", extra={"user_id": user_id})
        return user

    async def _create(self, username: str, password: str, role: Role) -> User:
        if username in self._document.username_index:
            raise DuplicateUsername(f"Username {username!r} is already taken")

        salt = generate_salt(self._salt_bytes)
        derived = await asyncio.to_thread(derive_key, password, salt, self._iterations)

        # Another registration may have committed while the key was derived
        if username in self._document.username_index:
            raise DuplicateUsername(f"Username {username!r} is already taken")

        user = User(
            id=new_id("u_"),
            username=username,
            salt=salt,
            derived_hash=derived,
            iterations=self._iterations,
            created_at=self._clock(),
            role=role,
        )
        self._document.users[user.id] = user
        self._document.username_index[username] = user.id
        self._document.partition(user.id)
        logger.info(f"Registered account {username!r}", extra={"user_id": user.id})
        return user
