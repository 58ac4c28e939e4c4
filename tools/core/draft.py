"""Draft model and the relaxed-JSON scratch file codec."""

from __future__ import annotations

import json
import re
from enum import Enum
from typing import Any, Dict, List

import json5
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

LIST_SECTIONS = ("status", "breakfast", "today", "yesterday", "blockers", "notes")
CARRIED_PREFIX = "// "
COMMENTED_STRING_RE = re.compile(r'^    "//\s*', re.MULTILINE)


class ItemStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    BLOCKED = "blocked"
    DONE = "done"
    UNRESOLVED = "unresolved"


# Written in place of UNRESOLVED so the editor shows the allowed choices.
STATUS_HINT = ",".join(
    s.value for s in (ItemStatus.DONE, ItemStatus.NOT_STARTED, ItemStatus.IN_PROGRESS, ItemStatus.BLOCKED)
)


class DraftParseError(ValueError):
    pass


class YesterdayItem(BaseModel):
    text: str = ""
    status: ItemStatus = ItemStatus.NOT_STARTED

    @field_validator("status", mode="before")
    @classmethod
    def _hint_means_unresolved(cls, value: Any) -> Any:
        if isinstance(value, str) and "," in value:
            return ItemStatus.UNRESOLVED
        return value


class Draft(BaseModel):
    model_config = ConfigDict(extra="ignore")

    live: bool = False
    status: List[str] = Field(default_factory=lambda: [""])
    breakfast: List[str] = Field(default_factory=lambda: [""])
    today: List[str] = Field(default_factory=lambda: [""])
    yesterday: List[YesterdayItem] = Field(
        default_factory=lambda: [YesterdayItem(status=ItemStatus.UNRESOLVED)]
    )
    blockers: List[str] = Field(default_factory=lambda: [""])
    notes: List[str] = Field(default_factory=lambda: [""])

    def sections(self) -> List[tuple]:
        return [(name, getattr(self, name)) for name in LIST_SECTIONS]


def draft_to_data(draft: Draft) -> Dict[str, Any]:
    data = draft.model_dump(mode="json")
    for item in data["yesterday"]:
        if item["status"] == ItemStatus.UNRESOLVED.value:
            item["status"] = STATUS_HINT
    return data


def dump_draft(draft: Draft) -> str:
    """Serialize for editing; carried-over "// ..." strings become comments."""
    text = json.dumps(draft_to_data(draft), indent=2, ensure_ascii=False)
    return COMMENTED_STRING_RE.sub('    // "', text)


def _is_blank(value: Any) -> bool:
    if isinstance(value, dict):
        return not str(value.get("text") or "").strip()
    if isinstance(value, str):
        return not value.strip()
    return value is None


def filter_blanks(data: Dict[str, Any]) -> Dict[str, Any]:
    cleaned = dict(data)
    for key, value in data.items():
        if isinstance(value, list):
            cleaned[key] = [v for v in value if not _is_blank(v)]
    return cleaned


def parse_draft(text: str, require_sections: bool = False) -> Draft:
    """Parse an edited scratch file, dropping blank entries from every list.

    Missing list sections read as empty unless ``require_sections`` is set,
    in which case they are a parse error.
    """
    try:
        data = json5.loads(text)
    except ValueError as exc:
        raise DraftParseError(str(exc)) from exc
    if not isinstance(data, dict):
        raise DraftParseError("standup JSON must be an object at top level")
    missing = [name for name in LIST_SECTIONS if name not in data]
    if missing and require_sections:
        raise DraftParseError(f"missing sections: {', '.join(missing)}")
    for name in missing:
        data[name] = []
    try:
        return Draft.model_validate(filter_blanks(data))
    except ValidationError as exc:
        raise DraftParseError(str(exc)) from exc
