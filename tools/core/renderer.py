from __future__ import annotations

import datetime as dt
from pathlib import Path
from typing import List, Optional

from core.dates import DateInfo, get_date_info
from core.draft import Draft, ItemStatus, YesterdayItem

HIDDEN_STYLE = ' style="display: none"'
EMPTY_LIST = "-"


def format_yesterday_item(item: YesterdayItem) -> str:
    if item.status == ItemStatus.DONE:
        return f"- [x] {item.text}"
    if item.status == ItemStatus.IN_PROGRESS:
        return f"- {item.text}\n  - [ ] In Progress"
    if item.status == ItemStatus.BLOCKED:
        return f"- {item.text}\n  - [x] Blocked"
    return f"- [ ] {item.text}"


def format_section_list(section: str, items: List[object]) -> str:
    if not items:
        return EMPTY_LIST
    if section == "today":
        return "\n".join(f"- [ ] {t}" for t in items)
    if section == "yesterday":
        return "\n".join(format_yesterday_item(item) for item in items)
    if section == "blockers":
        return "\n".join(f"- [x] {t}" for t in items)
    return "\n".join(f"- {t}" for t in items)


def render_standup(
    draft: Draft,
    template: str,
    info: Optional[DateInfo] = None,
    now_ms: Optional[int] = None,
) -> str:
    info = info or get_date_info()
    if now_ms is None:
        now_ms = int(dt.datetime.now().timestamp() * 1000)
    replacements = {
        "%%DATE%%": info.date,
        "%%DAY%%": info.day,
        "%%NOW%%": str(now_ms),
    }
    for section, items in draft.sections():
        key = section.upper()
        replacements[f"%%{key}_LIST%%"] = format_section_list(section, items)
        replacements[f"%%{key}_LIST_LENGTH%%"] = "" if items else HIDDEN_STYLE

    rendered = template
    for token, value in replacements.items():
        rendered = rendered.replace(token, value)
    return rendered


def load_template(path: Path) -> str:
    return path.read_text(encoding="utf-8")
