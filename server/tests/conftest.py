"""Shared fixtures.

Environment overrides are applied before anything imports galleria.config,
which reads settings once at import time.
"""

import os

os.environ.setdefault("GALLERIA_JWT_SECRET", "test-secret-that-is-at-least-32-characters-long")
os.environ.setdefault("GALLERIA_BOOTSTRAP_ADMIN_PASSWORD", "admin-provisioning-pw")
os.environ.setdefault("GALLERIA_PBKDF2_ITERATIONS", "100000")

from datetime import UTC, datetime, timedelta  # noqa: E402

import pytest  # noqa: E402

from galleria.content import ContentRepository, LifecycleEngine, QueryLayer  # noqa: E402
from galleria.types import Document, Role, User  # noqa: E402


class FakeClock:
    """Clock that advances one second per call, starting 2024-01-01."""

    def __init__(self, start: datetime | None = None) -> None:
        self.current = start or datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> str:
        self.current += timedelta(seconds=1)
        return self.current.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def add_user(document: Document, username: str, role: Role = Role.USER) -> str:
    """Insert an account with a placeholder hash; returns its id."""
    user_id = f"u_{username}"
    document.users[user_id] = User(
        id=user_id,
        username=username,
        salt="c2FsdA==",
        derived_hash="aGFzaA==",
        created_at="2024-01-01T00:00:00.000Z",
        role=role,
    )
    document.username_index[username] = user_id
    document.partition(user_id)
    return user_id


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def document() -> Document:
    """Document with alice, bob, carol (users) and root (admin)."""
    doc = Document()
    add_user(doc, "alice")
    add_user(doc, "bob")
    add_user(doc, "carol")
    add_user(doc, "root", Role.ADMIN)
    return doc


@pytest.fixture
def queries(document: Document) -> QueryLayer:
    return QueryLayer(document)


@pytest.fixture
def repo(document: Document, queries: QueryLayer, clock: FakeClock) -> ContentRepository:
    return ContentRepository(document, queries, clock=clock)


@pytest.fixture
def lifecycle(document: Document, queries: QueryLayer, clock: FakeClock) -> LifecycleEngine:
    return LifecycleEngine(document, queries, clock=clock)


@pytest.fixture
def make_user():
    """The add_user helper, for tests that build their own documents."""
    return add_user
