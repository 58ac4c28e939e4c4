from __future__ import annotations

import datetime as dt
import json
import shutil
import sqlite3
import subprocess
from contextlib import closing
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

LAST_STANDUP_SQL = "SELECT content FROM memo WHERE content LIKE ? ORDER BY created_ts DESC LIMIT 1"


def _readonly_uri(db_path: Path, immutable: bool = False) -> str:
    # immutable=1 keeps SQLite from creating -wal/-shm files next to a WAL-mode copy.
    query = "mode=ro&immutable=1" if immutable else "mode=ro"
    return f"{db_path.resolve().as_uri()}?{query}"


def integrity_check(db_path: Path, immutable: bool = False) -> str:
    """Return the output of PRAGMA integrity_check, or the error text.

    Pass ``immutable=True`` for files nothing else writes to, such as backups.
    """
    try:
        with closing(sqlite3.connect(_readonly_uri(db_path, immutable), uri=True)) as conn:
            rows = conn.execute("PRAGMA integrity_check;").fetchall()
    except sqlite3.Error as exc:
        return f"Error: {exc}"
    return "\n".join(str(row[0]) for row in rows)


def _backup_stamp(now: dt.datetime) -> str:
    return now.isoformat(timespec="milliseconds").replace(":", "-").replace(".", "-")


@dataclass
class MemosStore:
    db_path: Path
    backup_dir: Path

    def last_standup(self, tag: str = "#standup") -> str:
        if not self.db_path.exists():
            return ""
        try:
            with closing(sqlite3.connect(_readonly_uri(self.db_path), uri=True)) as conn:
                row = conn.execute(LAST_STANDUP_SQL, (f"%{tag}%",)).fetchone()
        except sqlite3.Error as exc:
            print(f"[warn] could not read previous standup: {exc}")
            return ""
        return str(row[0]) if row and row[0] else ""

    def backup_path_for(self, now: dt.datetime) -> Path:
        name = f"{self.db_path.stem}.{_backup_stamp(now)}{self.db_path.suffix}"
        return self.backup_dir / name

    def backup_database(self, now: Optional[dt.datetime] = None) -> Optional[Path]:
        target = self.backup_path_for(now or dt.datetime.now())
        try:
            self.backup_dir.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(self.db_path, target)
        except OSError as exc:
            print(f"[backup] failed: {exc}")
            return None
        print(f"[backup] {target.name}")
        return target

    def list_backups(self) -> List[Path]:
        if not self.backup_dir.exists():
            return []
        pattern = f"{self.db_path.stem}.*{self.db_path.suffix}"
        backups = [
            p
            for p in self.backup_dir.glob(pattern)
            if p.is_file() and not p.name.endswith(("-shm", "-wal"))
        ]
        return sorted(backups, key=lambda p: p.stat().st_mtime, reverse=True)

    def latest_backup(self) -> Optional[Path]:
        backups = self.list_backups()
        return backups[0] if backups else None


@dataclass
class PostResult:
    returncode: int
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class MemosPoster:
    """Hands rendered markdown to the postMemo helper on stdin."""

    def __init__(self, command: Path) -> None:
        self.command = command

    def post(self, content: str) -> PostResult:
        try:
            proc = subprocess.run(
                [str(self.command)],
                input=content,
                capture_output=True,
                text=True,
            )
        except OSError as exc:
            return PostResult(returncode=127, stderr=str(exc))
        return PostResult(returncode=proc.returncode, stdout=proc.stdout, stderr=proc.stderr)


def memo_link(response: str, base_url: str) -> Optional[str]:
    try:
        data = json.loads(response)
    except ValueError:
        return None
    if not isinstance(data, dict) or not data.get("name"):
        return None
    return f"{base_url.rstrip('/')}/{data['name']}"
