"""Tests for the galleria CLI."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from galleria.cli import app

runner = CliRunner()


@pytest.fixture
def doc_path(tmp_path: Path) -> str:
    return str(tmp_path / "galleria.json")


def _create_user(doc_path: str, username: str, *extra: str) -> None:
    result = runner.invoke(
        app, ["user", "create", username, "-p", "pw-12345", "-d", doc_path, *extra]
    )
    assert result.exit_code == 0, result.output


class TestUserCommands:
    """Tests for `galleria user`."""

    def test_create_and_list(self, doc_path: str) -> None:
        _create_user(doc_path, "alice")
        _create_user(doc_path, "ops", "--admin")

        result = runner.invoke(app, ["user", "list", "-d", doc_path])

        assert result.exit_code == 0
        assert "alice" in result.output
        assert "ops" in result.output
        assert "admin" in result.output

    def test_create_reports_role(self, doc_path: str) -> None:
        result = runner.invoke(
            app, ["user", "create", "ops", "-p", "pw", "--admin", "-d", doc_path]
        )
        assert result.exit_code == 0
        assert "Created admin ops" in result.output

    def test_duplicate_fails(self, doc_path: str) -> None:
        _create_user(doc_path, "alice")

        result = runner.invoke(app, ["user", "create", "alice", "-p", "pw", "-d", doc_path])

        assert result.exit_code == 1
        assert "Failed to create user" in result.output

    def test_invalid_username_fails(self, doc_path: str) -> None:
        result = runner.invoke(app, ["user", "create", "a b", "-p", "pw", "-d", doc_path])
        assert result.exit_code == 1

    def test_empty_list(self, doc_path: str) -> None:
        result = runner.invoke(app, ["user", "list", "-d", doc_path])
        assert result.exit_code == 0
        assert "No users found" in result.output


class TestContentCommands:
    """Gallery and trash listings."""

    def test_empty_listings(self, doc_path: str) -> None:
        galleries = runner.invoke(app, ["gallery", "list", "-d", doc_path])
        trash = runner.invoke(app, ["trash", "list", "-d", doc_path])

        assert "No galleries found" in galleries.output
        assert "Trash is empty" in trash.output

    def test_listings_from_snapshot(self, doc_path: str, tmp_path: Path) -> None:
        snapshot = {
            "users": {
                "u_a": {
                    "id": "u_a",
                    "username": "alice",
                    "salt": "c2FsdA==",
                    "derivedHash": "aGFzaA==",
                    "createdAt": "2024-01-01T00:00:00.000Z",
                }
            },
            "userData": {
                "u_a": {
                    "galleries": {
                        "g_live": {
                            "id": "g_live",
                            "title": "Live",
                            "color": "#112233",
                            "createdAt": "2024-01-01T00:00:00.000Z",
                            "updatedAt": "2024-01-01T00:00:00.000Z",
                        },
                        "g_gone": {
                            "id": "g_gone",
                            "title": "Gone",
                            "color": "#112233",
                            "createdAt": "2024-01-01T00:00:00.000Z",
                            "updatedAt": "2024-01-02T00:00:00.000Z",
                            "deletedAt": "2024-01-02T00:00:00.000Z",
                        },
                    }
                }
            },
        }
        source = tmp_path / "snapshot.json"
        source.write_text(json.dumps(snapshot), encoding="utf-8")
        assert runner.invoke(app, ["import", str(source), "-y", "-d", doc_path]).exit_code == 0

        live = runner.invoke(app, ["gallery", "list", "-d", doc_path])
        everything = runner.invoke(app, ["gallery", "list", "--all", "-d", doc_path])
        trash = runner.invoke(app, ["trash", "list", "-d", doc_path])

        assert "Live" in live.output
        assert "Gone" not in live.output
        assert "Gone" in everything.output
        assert "Gone" in trash.output
        assert "Live" not in trash.output


class TestBackupCommands:
    """Export and import of whole-document snapshots."""

    def test_export_import_round_trip(self, doc_path: str, tmp_path: Path) -> None:
        _create_user(doc_path, "alice")
        snapshot = tmp_path / "backup.json"

        exported = runner.invoke(app, ["export", str(snapshot), "-d", doc_path])
        assert exported.exit_code == 0
        assert "Exported 1 users" in exported.output

        _create_user(doc_path, "bob")
        imported = runner.invoke(app, ["import", str(snapshot), "-y", "-d", doc_path])

        assert imported.exit_code == 0
        assert "Imported 1 users and 1 partitions" in imported.output
        on_disk = json.loads(Path(doc_path).read_text(encoding="utf-8"))
        assert list(on_disk["usernameIndex"]) == ["alice"]

    def test_import_requires_confirmation(self, doc_path: str, tmp_path: Path) -> None:
        _create_user(doc_path, "alice")
        source = tmp_path / "empty.json"
        source.write_text("{}", encoding="utf-8")

        result = runner.invoke(app, ["import", str(source), "-d", doc_path], input="n\n")

        assert result.exit_code == 1
        on_disk = json.loads(Path(doc_path).read_text(encoding="utf-8"))
        assert "alice" in on_disk["usernameIndex"]

    def test_malformed_import_fails(self, doc_path: str, tmp_path: Path) -> None:
        _create_user(doc_path, "alice")
        source = tmp_path / "broken.json"
        source.write_text("[1, 2, 3]", encoding="utf-8")

        result = runner.invoke(app, ["import", str(source), "-y", "-d", doc_path])

        assert result.exit_code == 1
        assert "Import failed" in result.output
        on_disk = json.loads(Path(doc_path).read_text(encoding="utf-8"))
        assert "alice" in on_disk["usernameIndex"]

    def test_missing_import_file(self, doc_path: str, tmp_path: Path) -> None:
        result = runner.invoke(app, ["import", str(tmp_path / "nope.json"), "-y", "-d", doc_path])
        assert result.exit_code == 1
