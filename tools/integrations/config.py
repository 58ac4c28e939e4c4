from __future__ import annotations

import datetime as dt
import os
import shlex
import tempfile
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

import yaml


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[1]


def _default_config_path() -> Path:
    return _repo_root() / "config" / "config.yaml"


def load_config(path: Optional[Path] = None) -> Dict[str, object]:
    """Read the YAML config.

    An explicit path (argument or STANDUP_CONFIG) must exist; the bundled
    default location may be absent, in which case built-in defaults apply.
    """
    explicit = path or (Path(os.environ["STANDUP_CONFIG"]).expanduser() if os.environ.get("STANDUP_CONFIG") else None)
    cfg_path = explicit or _default_config_path()
    if not cfg_path.exists():
        if explicit:
            raise FileNotFoundError(f"Config not found: {cfg_path}")
        return {}
    data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError("config.yaml must be a mapping at top level")
    return data


def _path(cfg: Mapping[str, object], key: str, default: Path) -> Path:
    value = cfg.get(key)
    return Path(str(value)).expanduser() if value else default


def _command(value: object, default: List[str]) -> List[str]:
    if isinstance(value, list):
        return [str(v) for v in value]
    if isinstance(value, str) and value.strip():
        return shlex.split(value)
    return list(default)


@dataclass
class StandupConfig:
    memos_db: Path
    backup_dir: Path
    template_path: Path
    scratch_dir: Path
    poster_path: Path
    editor: str = "vim"
    memos_url: str = "http://localhost:5230"
    container_name: str = "memos"
    standup_tag: str = "#standup"
    proofread_backend: str = "command"
    proofread_command: List[str] = field(default_factory=lambda: ["claude", "-p"])
    proofread_provider: str = "openai"
    proofread_model: str = "gpt-5-mini"
    proofread_timeout: float = 30.0
    auto_tasks: Dict[str, object] = field(default_factory=dict)

    @classmethod
    def from_config(cls, cfg: Optional[Mapping[str, object]] = None) -> "StandupConfig":
        cfg = cfg or {}
        memos_home = Path.home() / ".memos"
        db_default = Path(os.environ["MEMOS_DB"]).expanduser() if os.environ.get("MEMOS_DB") else None
        memos_db = db_default or _path(cfg, "memos_db", memos_home / "memos_prod.db")

        proofread = cfg.get("proofread") or {}
        if not isinstance(proofread, dict):
            raise ValueError("proofread must be a mapping")
        auto_tasks = cfg.get("auto_tasks") or {}
        if not isinstance(auto_tasks, dict):
            raise ValueError("auto_tasks must be a mapping")

        return cls(
            memos_db=memos_db,
            backup_dir=_path(cfg, "backup_dir", memos_home / "dbBackups"),
            template_path=_path(cfg, "template_path", _repo_root() / "standup-template.md"),
            scratch_dir=_path(cfg, "scratch_dir", Path(tempfile.gettempdir())),
            poster_path=_path(cfg, "poster_path", _repo_root() / "postMemo"),
            editor=os.environ.get("EDITOR") or str(cfg.get("editor") or "vim"),
            memos_url=str(cfg.get("memos_url") or "http://localhost:5230").rstrip("/"),
            container_name=str(cfg.get("container_name") or "memos"),
            standup_tag=str(cfg.get("standup_tag") or "#standup"),
            proofread_backend=str(proofread.get("backend", "command")).lower(),
            proofread_command=_command(proofread.get("command"), ["claude", "-p"]),
            proofread_provider=str(proofread.get("provider", "openai")),
            proofread_model=str(proofread.get("model", "gpt-5-mini")),
            proofread_timeout=float(proofread.get("timeout_seconds", 30.0)),
            auto_tasks=dict(auto_tasks),
        )

    def scratch_path(self, now: Optional[dt.datetime] = None) -> Path:
        stamp = int((now or dt.datetime.now()).timestamp() * 1000)
        return self.scratch_dir / f"standup.{stamp}.json"
