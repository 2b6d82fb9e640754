"""Database bootstrap safety checks."""

from pathlib import Path

from awsagents.db import _ensure_sqlite_parent_dir


def test_ensure_sqlite_parent_dir_creates_nested_parent(tmp_path):
    db_file = tmp_path / "nested" / "db" / "test.db"
    assert not db_file.parent.exists()

    _ensure_sqlite_parent_dir(f"sqlite:///{db_file.as_posix()}")

    assert db_file.parent.exists()


def test_ensure_sqlite_parent_dir_ignores_memory_and_uri_databases(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    _ensure_sqlite_parent_dir("sqlite:///:memory:")
    _ensure_sqlite_parent_dir("sqlite:///file:nested/chat.db?mode=memory&uri=true")
    _ensure_sqlite_parent_dir("postgresql://localhost/chat")

    assert list(tmp_path.iterdir()) == []
