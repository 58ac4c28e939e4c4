from __future__ import annotations

import datetime as dt
from typing import List, Optional

from core.dates import BinSchedule, get_auto_tasks, get_date_info
from core.draft import CARRIED_PREFIX, Draft, ItemStatus, YesterdayItem
from core.sections import extract_section, parse_blockers, parse_list_items, parse_today_items


def dedupe_by_text(items: List[YesterdayItem]) -> List[YesterdayItem]:
    """Keep the first item per text and drop empty texts.

    A single-element list is returned as is so an empty day keeps its
    placeholder row.
    """
    if len(items) == 1:
        return list(items)
    seen = set()
    result = []
    for item in items:
        if not item.text or item.text in seen:
            continue
        seen.add(item.text)
        result.append(item)
    return result


def _carried(lines: List[str]) -> List[str]:
    return [""] + [f"{CARRIED_PREFIX}{line}" for line in lines]


def transform_standup(
    prev_content: str,
    today: Optional[dt.date] = None,
    schedule: Optional[BinSchedule] = None,
) -> Draft:
    prev_content = prev_content or ""

    today_items = parse_today_items(extract_section(prev_content, "today"))
    complete = [item for item in today_items if item.done]
    incomplete = [item for item in today_items if not item.done]

    auto_tasks = get_auto_tasks(get_date_info(today), schedule)
    new_today = [""] + [f"{CARRIED_PREFIX}{item.text}" for item in incomplete] + auto_tasks

    prev_yesterday = parse_list_items(extract_section(prev_content, "yesterday"), is_yesterday=True)
    candidates = (
        [YesterdayItem(text="", status=ItemStatus.UNRESOLVED)]
        + [YesterdayItem(text=item.text, status=ItemStatus.UNRESOLVED) for item in incomplete]
        + [YesterdayItem(text=item.text, status=ItemStatus.DONE) for item in complete]
        + prev_yesterday
    )

    return Draft(
        live=False,
        status=[""],
        breakfast=[""],
        today=new_today,
        yesterday=dedupe_by_text(candidates),
        blockers=_carried(parse_blockers(extract_section(prev_content, "blockers"))),
        notes=_carried(extract_section(prev_content, "notes")),
    )
