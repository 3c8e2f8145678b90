"""Document storage: the shared in-memory document, its sessions and its file."""

from galleria.store.document_store import DocumentStore, StoreSession
from galleria.store.persistence import (
    dump_document,
    load_document,
    parse_document,
    parse_import,
    save_document,
)

__all__ = [
    "DocumentStore",
    "StoreSession",
    "dump_document",
    "load_document",
    "parse_document",
    "parse_import",
    "save_document",
]
