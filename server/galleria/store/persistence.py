"""Reading and writing the JSON document file."""

import json
import logging
from pathlib import Path
from typing import Any

import aiofiles
import aiofiles.os
from pydantic import ValidationError

from galleria.errors import MalformedImport
from galleria.types import Document

logger = logging.getLogger(__name__)


def parse_document(data: Any) -> Document:
    """Validate decoded JSON as a document.

    Missing users/usernameIndex/userData default to empty. Legacy browser
    exports are accepted.

    Raises:
        MalformedImport: Not a JSON object, or the shape does not validate.
    """
    if not isinstance(data, dict):
        raise MalformedImport("Document must be a JSON object")
    try:
        return Document.model_validate(data)
    except ValidationError as e:
        raise MalformedImport(f"Invalid document: {e.error_count()} validation errors") from e


def parse_import(raw: str | bytes) -> Document:
    """Decode and validate an imported snapshot."""
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise MalformedImport(f"Import is not valid JSON: {e}") from e
    return parse_document(data)


def dump_document(document: Document) -> str:
    return json.dumps(document.to_json_dict(), indent=2, ensure_ascii=False)


async def load_document(path: Path) -> Document:
    """Load the document at path.

    A missing file yields a fresh document. An unreadable one is renamed to
    ``*.corrupted`` and replaced by a fresh document.
    """
    if not await aiofiles.os.path.exists(path):
        logger.info(f"No document at {path}, starting fresh")
        return Document()

    try:
        async with aiofiles.open(path, encoding="utf-8") as f:
            document = parse_import(await f.read())
    except MalformedImport as e:
        backup_file = path.with_suffix(path.suffix + ".corrupted")
        logger.error(f"Corrupted document {path}: {e}. Starting with a fresh document.")
        # Keep the broken file for inspection
        await aiofiles.os.replace(path, backup_file)
        return Document()

    logger.info(
        f"Document loaded from {path}: {len(document.users)} users, "
        f"{len(document.user_data)} partitions"
    )
    return document


async def save_document(path: Path, document: Document) -> None:
    """Write the document atomically (temp file, then rename)."""
    await aiofiles.os.makedirs(path.parent, exist_ok=True)
    temp_file = path.with_suffix(path.suffix + ".tmp")
    async with aiofiles.open(temp_file, "w", encoding="utf-8") as f:
        await f.write(dump_document(document))

    # Atomic rename (on POSIX systems)
    await aiofiles.os.replace(temp_file, path)
