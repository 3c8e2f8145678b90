"""The single shared document and its transactional sessions."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from galleria.auth.credentials import CredentialStore
from galleria.config import settings
from galleria.content import ContentRepository, LifecycleEngine, QueryLayer
from galleria.store.persistence import load_document, parse_document, save_document
from galleria.types import Clock, Document, now_iso

logger = logging.getLogger(__name__)


@dataclass
class StoreSession:
    """Core services bound to one document (a working copy or the live one)."""

    document: Document
    queries: QueryLayer
    content: ContentRepository
    lifecycle: LifecycleEngine
    credentials: CredentialStore


class DocumentStore:
    """Owns the in-memory document and the file it is persisted to.

    Commands run inside ``session()``: one at a time, against a deep copy
    that replaces the live document only if the command finishes without
    raising. With no path the store is memory-only.
    """

    def __init__(
        self,
        document: Document,
        path: Path | None = None,
        *,
        iterations: int | None = None,
        salt_bytes: int | None = None,
        reserved_usernames: tuple[str, ...] | None = None,
        clock: Clock = now_iso,
    ) -> None:
        self._document = document
        self._path = path
        self._lock = asyncio.Lock()
        self._iterations = iterations or settings.pbkdf2_iterations
        self._salt_bytes = salt_bytes or settings.salt_bytes
        self._reserved = (
            reserved_usernames
            if reserved_usernames is not None
            else (settings.bootstrap_admin_username,)
        )
        self._clock = clock

    @classmethod
    async def open(cls, path: Path | str | None = None, **kwargs: Any) -> DocumentStore:
        """Load the document from path (or start empty in memory when path is None)."""
        if path is None:
            return cls(Document(), None, **kwargs)
        path = Path(path)
        return cls(await load_document(path), path, **kwargs)

    @property
    def path(self) -> Path | None:
        return self._path

    @property
    def document(self) -> Document:
        """The live document. Treat as read-only outside a session."""
        return self._document

    def _bind(self, document: Document) -> StoreSession:
        queries = QueryLayer(document)
        return StoreSession(
            document=document,
            queries=queries,
            content=ContentRepository(document, queries, clock=self._clock),
            lifecycle=LifecycleEngine(document, queries, clock=self._clock),
            credentials=CredentialStore(
                document,
                iterations=self._iterations,
                salt_bytes=self._salt_bytes,
                reserved_usernames=self._reserved,
                clock=self._clock,
            ),
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[StoreSession, None]:
        """Provide a transactional scope for one command."""
        async with self._lock:
            working = self._document.model_copy(deep=True)
            try:
                yield self._bind(working)
            except Exception:
                logger.debug("Session rolled back")
                raise
            if self._path is not None:
                await save_document(self._path, working)
            self._document = working

    def reader(self) -> StoreSession:
        """Services bound to the live document, for queries only."""
        return self._bind(self._document)

    # --- Backup ---

    def export_document(self) -> dict[str, Any]:
        """Snapshot of the whole document in its on-disk shape."""
        return self._document.to_json_dict()

    async def import_document(self, data: Any) -> Document:
        """Replace the whole document with a validated snapshot.

        Raises:
            MalformedImport
        """
        document = parse_document(data)
        async with self._lock:
            if self._path is not None:
                await save_document(self._path, document)
            self._document = document
        logger.warning(
            f"Document replaced by import: {len(document.users)} users, "
            f"{len(document.user_data)} partitions"
        )
        return document
