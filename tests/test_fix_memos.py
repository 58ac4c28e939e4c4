"""Tests for the database recovery flow with a fake container."""

import os
import sqlite3
from contextlib import closing

import pytest

from fix_memos import recover, restore_backup


class FakeContainer:
    def __init__(self, running=True, starts=True):
        self.name = "memos"
        self.running = running
        self.starts = starts
        self.actions = []

    def is_running(self):
        return self.running

    def stop(self):
        self.actions.append("stop")
        self.running = False

    def start(self):
        self.actions.append("start")
        self.running = self.starts


def make_db(path, marker="live"):
    with closing(sqlite3.connect(path)) as conn:
        conn.execute("CREATE TABLE memo (content TEXT)")
        conn.execute("INSERT INTO memo VALUES (?)", (marker,))
        conn.commit()
    return path


def read_marker(path):
    with closing(sqlite3.connect(path)) as conn:
        return conn.execute("SELECT content FROM memo").fetchone()[0]


def corrupt(path):
    path.write_bytes(b"garbage" * 500)


@pytest.fixture
def backup(config):
    config.backup_dir.mkdir()
    return make_db(config.backup_dir / "memos_prod.2025-01-07T09-00-00-000.db", marker="backup")


def no_sleep(seconds):
    return None


class TestRecover:
    def test_container_not_running(self, config) -> None:
        assert recover(config, FakeContainer(running=False), sleep=no_sleep) == 1

    def test_healthy_database_is_left_alone(self, config) -> None:
        make_db(config.memos_db)
        before = config.memos_db.read_bytes()
        container = FakeContainer()
        assert recover(config, container, confirm=pytest.fail, sleep=no_sleep) == 0
        assert container.actions == []
        assert config.memos_db.read_bytes() == before
        assert [p.name for p in config.memos_db.parent.iterdir() if "corrupted" in p.name] == []

    def test_no_backup_found(self, config) -> None:
        corrupt(config.memos_db)
        assert recover(config, FakeContainer(), sleep=no_sleep) == 1

    def test_corrupted_backup_rejected(self, config, backup) -> None:
        corrupt(config.memos_db)
        corrupt(backup)
        container = FakeContainer()
        assert recover(config, container, sleep=no_sleep) == 1
        assert container.actions == []

    def test_user_aborts(self, config, backup) -> None:
        corrupt(config.memos_db)
        container = FakeContainer()
        assert recover(config, container, confirm=lambda q: "n", sleep=no_sleep) == 0
        assert container.actions == []

    def test_restores_newest_valid_backup(self, config, backup, capsys) -> None:
        corrupt(config.memos_db)
        older = make_db(config.backup_dir / "memos_prod.2025-01-01T09-00-00-000.db", marker="older")
        os.utime(older, (1, 1))
        container = FakeContainer()
        assert recover(config, container, confirm=lambda q: "", sleep=no_sleep) == 0
        assert container.actions == ["stop", "start"]
        assert read_marker(config.memos_db) == "backup"
        quarantined = [p for p in config.memos_db.parent.iterdir() if ".corrupted." in p.name]
        assert len(quarantined) == 1
        assert "back online at https://memos.example.com" in capsys.readouterr().out

    def test_verifying_wal_backup_leaves_backup_dir_clean(self, config) -> None:
        corrupt(config.memos_db)
        config.backup_dir.mkdir()
        wal_backup = config.backup_dir / "memos_prod.2025-01-07T09-00-00-000.db"
        with closing(sqlite3.connect(wal_backup)) as conn:
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("CREATE TABLE memo (content TEXT)")
            conn.commit()
        assert recover(config, FakeContainer(), confirm=lambda q: "n", sleep=no_sleep) == 0
        assert [p.name for p in config.backup_dir.iterdir()] == [wal_backup.name]

    def test_container_fails_to_restart(self, config, backup) -> None:
        corrupt(config.memos_db)
        container = FakeContainer(starts=False)
        assert recover(config, container, confirm=lambda q: "y", sleep=no_sleep) == 1


class TestRestoreBackup:
    def test_removes_wal_files(self, tmp_path) -> None:
        db = tmp_path / "memos_prod.db"
        corrupt(db)
        for suffix in ("-shm", "-wal"):
            (tmp_path / f"memos_prod.db{suffix}").write_text("x")
        src = make_db(tmp_path / "good.db", marker="good")
        restore_backup(db, src)
        assert not (tmp_path / "memos_prod.db-wal").exists()
        assert not (tmp_path / "memos_prod.db-shm").exists()
        assert read_marker(db) == "good"
