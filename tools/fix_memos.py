#!/usr/bin/env python3
"""Recover a corrupted Memos SQLite database from the newest valid backup.

Exits 0 when the database is healthy or was restored, 1 otherwise.
"""

from __future__ import annotations

import argparse
import datetime as dt
import shutil
import sys
import time
from pathlib import Path
from typing import Any, Callable, List, Optional

from integrations.config import StandupConfig, load_config
from integrations.docker import DockerContainer
from integrations.memos import MemosStore, integrity_check


def _quarantine_name(db_path: Path, now: dt.datetime) -> Path:
    return db_path.with_name(f"{db_path.name}.corrupted.{now.strftime('%Y%m%d-%H%M%S')}")


def restore_backup(db_path: Path, backup: Path, now: Optional[dt.datetime] = None) -> Path:
    """Move the broken DB aside, drop its WAL files, copy the backup in."""
    quarantined = _quarantine_name(db_path, now or dt.datetime.now())
    if db_path.exists():
        db_path.rename(quarantined)
    for suffix in ("-shm", "-wal"):
        db_path.with_name(db_path.name + suffix).unlink(missing_ok=True)
    shutil.copyfile(backup, db_path)
    return quarantined


def recover(
    config: StandupConfig,
    container: Any,
    confirm: Callable[[str], str] = input,
    sleep: Callable[[float], None] = time.sleep,
) -> int:
    print("=== Memos Database Recovery ===\n")

    if not container.is_running():
        print("* Container is NOT running")
        print(f"  Start the container first: docker start {container.name}")
        return 1
    print("* Container is running")

    result = integrity_check(config.memos_db)
    if result == "ok":
        print("* Checking database integrity... database is OK")
        print("  No repair needed.")
        return 0
    print("* Checking database integrity... SQL is corrupted")
    print(f"  Error: {result}")

    store = MemosStore(config.memos_db, config.backup_dir)
    backup = store.latest_backup()
    if backup is None:
        print(f"* No backups found in {config.backup_dir}")
        return 1
    print(f"* Latest backup: {backup.name}")

    if integrity_check(backup, immutable=True) != "ok":
        print("* Verifying backup integrity... backup is corrupted")
        print("  Try an older backup manually.")
        return 1
    print("* Verifying backup integrity... backup is valid")

    answer = confirm("\n* Restore from this backup? [Y/n] ").strip().lower()
    if answer.startswith("n"):
        print("  Aborted.")
        return 0

    print("* Restoring...")
    container.stop()
    quarantined = restore_backup(config.memos_db, backup)
    print(f"  [backup] corrupted database kept at {quarantined.name}")
    container.start()

    sleep(2)
    if not container.is_running():
        print("* Container failed to start")
        return 1
    print("* Restored\n")
    print(f"Memos is back online at {config.memos_url}")
    return 0


def parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Restore the Memos database from its newest valid backup.")
    return parser.parse_args(argv)


def main(argv: List[str]) -> int:
    parse_args(argv)
    config = StandupConfig.from_config(load_config())
    return recover(config, DockerContainer(config.container_name))


def cli() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
