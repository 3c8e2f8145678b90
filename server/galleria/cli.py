"""CLI for galleria - users, content listings and backups.

Usage:
    galleria user list
    galleria user create USERNAME [--admin]
    galleria gallery list [--all] [--query TEXT]
    galleria trash list [--query TEXT]
    galleria export PATH
    galleria import PATH
    galleria serve

Every command works on the document file given by --document
(default: GALLERIA_DOCUMENT_PATH).
"""

import asyncio
import json
from pathlib import Path as FilePath
from typing import Any

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from galleria.config import settings
from galleria.errors import GalleriaError
from galleria.store import DocumentStore, parse_import
from galleria.types import GalleryEntry, Role, TrashListing, User

app = typer.Typer(
    name="galleria",
    help="CLI for galleria",
    add_completion=False,
)
console = Console()

DOCUMENT_HELP = "Path to the JSON document (default: GALLERIA_DOCUMENT_PATH)"


def _document_path(document: str | None) -> FilePath:
    return FilePath(document or settings.document_path)


def _fail(message: str, exc: Exception) -> typer.Exit:
    console.print(f"[red]{message}: {exc}[/red]")
    return typer.Exit(1)


def _short(timestamp: str | None) -> str:
    """ISO timestamp trimmed to minutes for table display."""
    return timestamp[:16].replace("T", " ") if timestamp else ""


# =============================================================================
# User Commands
# =============================================================================

user_app = typer.Typer(help="Manage user accounts")
app.add_typer(user_app, name="user")


async def _list_users_async(path: FilePath) -> list[tuple[User, int, int, int]]:
    """Users with their gallery, post and comment counts (tombstones included)."""
    store = await DocumentStore.open(path)
    results: list[tuple[User, int, int, int]] = []
    for user in sorted(store.document.users.values(), key=lambda u: u.created_at):
        part = store.document.user_data.get(user.id)
        counts = (len(part.galleries), len(part.posts), len(part.comments)) if part else (0, 0, 0)
        results.append((user, *counts))
    return results


async def _create_user_async(path: FilePath, username: str, password: str, admin: bool) -> User:
    store = await DocumentStore.open(path)
    async with store.session() as session:
        user = await session.credentials.register(username, password)
        if admin:
            session.credentials.set_role(user.id, Role.ADMIN)
    return user


@user_app.command("list")
def user_list(
    document: str | None = typer.Option(None, "--document", "-d", help=DOCUMENT_HELP),
) -> None:
    """List all users with their content counts."""
    try:
        users = asyncio.run(_list_users_async(_document_path(document)))
    except (GalleriaError, OSError) as e:
        raise _fail("Failed to list users", e) from e

    if not users:
        console.print("[yellow]No users found[/yellow]")
        return

    table = Table(title="Users", box=box.ROUNDED)
    table.add_column("ID", style="cyan")
    table.add_column("Username", style="white")
    table.add_column("Role", style="yellow")
    table.add_column("Created", style="green")
    table.add_column("Galleries", style="magenta", justify="right")
    table.add_column("Posts", style="blue", justify="right")
    table.add_column("Comments", justify="right")

    for user, galleries, posts, comments in users:
        role = "[bold red]admin[/bold red]" if user.is_admin else "user"
        table.add_row(
            user.id,
            user.username,
            role,
            _short(user.created_at),
            str(galleries),
            str(posts),
            str(comments),
        )

    console.print(table)


@user_app.command("create")
def user_create(
    username: str = typer.Argument(..., help="Username (2-20 characters, no whitespace)"),
    password: str = typer.Option(
        ..., "--password", "-p", prompt=True, hide_input=True, confirmation_prompt=True
    ),
    admin: bool = typer.Option(False, "--admin", help="Give the account the admin role"),
    document: str | None = typer.Option(None, "--document", "-d", help=DOCUMENT_HELP),
) -> None:
    """Register a new account.

    Examples:
        galleria user create alice
        galleria user create ops --admin -p 'secret'
    """
    try:
        user = asyncio.run(_create_user_async(_document_path(document), username, password, admin))
    except (GalleriaError, OSError) as e:
        raise _fail("Failed to create user", e) from e

    role = "admin" if user.is_admin else "user"
    console.print(f"[green]Created {role} {user.username} ({user.id})[/green]")


# =============================================================================
# Content Commands
# =============================================================================

gallery_app = typer.Typer(help="Inspect galleries")
app.add_typer(gallery_app, name="gallery")

trash_app = typer.Typer(help="Inspect the trash")
app.add_typer(trash_app, name="trash")


async def _list_galleries_async(
    path: FilePath, include_deleted: bool, query: str | None
) -> list[tuple[GalleryEntry, int, int]]:
    store = await DocumentStore.open(path)
    queries = store.reader().queries
    results: list[tuple[GalleryEntry, int, int]] = []
    for entry in queries.list_galleries(include_deleted=include_deleted, query=query):
        meta = queries.compute_gallery_meta(entry.owner_id, entry.gallery.id)
        results.append((entry, meta.alive_count, meta.tombstoned_count))
    return results


async def _list_trash_async(path: FilePath, query: str | None) -> TrashListing:
    store = await DocumentStore.open(path)
    return store.reader().queries.list_trash(query)


@gallery_app.command("list")
def gallery_list(
    include_deleted: bool = typer.Option(False, "--all", "-a", help="Include deleted galleries"),
    query: str | None = typer.Option(None, "--query", "-q", help="Search titles and owners"),
    document: str | None = typer.Option(None, "--document", "-d", help=DOCUMENT_HELP),
) -> None:
    """List galleries from every user, pinned first."""
    try:
        galleries = asyncio.run(
            _list_galleries_async(_document_path(document), include_deleted, query)
        )
    except (GalleriaError, OSError) as e:
        raise _fail("Failed to list galleries", e) from e

    if not galleries:
        console.print("[yellow]No galleries found[/yellow]")
        return

    table = Table(title="Galleries", box=box.ROUNDED)
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="white")
    table.add_column("Owner", style="green")
    table.add_column("Posts", style="magenta", justify="right")
    table.add_column("Deleted posts", justify="right")
    table.add_column("Updated")
    table.add_column("Status", style="yellow")

    for entry, alive, tombstoned in galleries:
        gallery = entry.gallery
        if gallery.is_deleted:
            status = "[red]deleted[/red]"
        elif gallery.pinned:
            status = "[yellow]pinned[/yellow]"
        else:
            status = ""
        table.add_row(
            gallery.id,
            f"{gallery.icon} {gallery.title}",
            entry.owner_name,
            str(alive),
            str(tombstoned),
            _short(gallery.updated_at),
            status,
        )

    console.print(table)


@trash_app.command("list")
def trash_list(
    query: str | None = typer.Option(None, "--query", "-q", help="Search the trash"),
    document: str | None = typer.Option(None, "--document", "-d", help=DOCUMENT_HELP),
) -> None:
    """List deleted galleries and posts, most recently deleted first."""
    try:
        trash = asyncio.run(_list_trash_async(_document_path(document), query))
    except (GalleriaError, OSError) as e:
        raise _fail("Failed to list trash", e) from e

    if not trash.galleries and not trash.posts:
        console.print("[green]Trash is empty[/green]")
        return

    table = Table(title="Trash", box=box.ROUNDED)
    table.add_column("Kind", style="dim")
    table.add_column("ID", style="cyan")
    table.add_column("Title", style="white")
    table.add_column("Owner", style="green")
    table.add_column("Deleted")
    table.add_column("Reason", style="yellow")

    for g in trash.galleries:
        table.add_row(
            "gallery", g.gallery.id, g.gallery.title, g.owner_name, _short(g.gallery.deleted_at), ""
        )
    for p in trash.posts:
        table.add_row(
            "post",
            p.post.id,
            p.post.title,
            p.author_name,
            _short(p.post.deleted_at),
            p.post.deletion_reason.value,
        )

    console.print(table)


# =============================================================================
# Backup Commands
# =============================================================================


async def _export_async(path: FilePath) -> dict[str, Any]:
    store = await DocumentStore.open(path)
    return store.export_document()


async def _import_async(path: FilePath, raw: str) -> tuple[int, int]:
    document = parse_import(raw)
    store = await DocumentStore.open(path)
    await store.import_document(document.to_json_dict())
    return len(document.users), len(document.user_data)


@app.command("export")
def export_command(
    output: FilePath = typer.Argument(..., help="File to write the snapshot to"),
    document: str | None = typer.Option(None, "--document", "-d", help=DOCUMENT_HELP),
) -> None:
    """Write a full snapshot of the document (including credential hashes)."""
    try:
        snapshot = asyncio.run(_export_async(_document_path(document)))
        output.write_text(json.dumps(snapshot, indent=2, ensure_ascii=False), encoding="utf-8")
    except (GalleriaError, OSError) as e:
        raise _fail("Export failed", e) from e

    console.print(
        f"[green]Exported {len(snapshot.get('users', {}))} users to {output}[/green]"
    )


@app.command("import")
def import_command(
    source: FilePath = typer.Argument(..., help="Snapshot file to import"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Do not ask for confirmation"),
    document: str | None = typer.Option(None, "--document", "-d", help=DOCUMENT_HELP),
) -> None:
    """Replace the entire document with a snapshot."""
    path = _document_path(document)
    if not yes:
        typer.confirm(f"Replace everything in {path}?", abort=True)

    try:
        raw = source.read_text(encoding="utf-8")
        users, partitions = asyncio.run(_import_async(path, raw))
    except (GalleriaError, OSError) as e:
        raise _fail("Import failed", e) from e

    console.print(f"[green]Imported {users} users and {partitions} partitions into {path}[/green]")


# =============================================================================
# Server
# =============================================================================


@app.command("serve")
def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address (default: GALLERIA_HOST)"),
    port: int | None = typer.Option(None, "--port", help="Port (default: GALLERIA_PORT)"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the HTTP API."""
    import uvicorn

    uvicorn.run(
        "galleria.main:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


# Entry point
if __name__ == "__main__":
    app()
