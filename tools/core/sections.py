"""Section extraction and list parsing for rendered standup memos.

A memo keeps each list inside ``<div class="standup-NAME">``. The extractor
returns cleaned lines; the parsers turn them into strings or items.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, List, Union

from core.draft import ItemStatus, YesterdayItem

SECTION_RE_CACHE: Dict[str, re.Pattern[str]] = {}
DROP_LINE_RE = re.compile(r"^[*#]{1,4}\s|^---$|^\s*$|^Key:|^<")
SKIP_LINE_RE = re.compile(r"^#{1,4}\s|^---$|^\s*$|^Key:")
LIST_MARKER_RE = re.compile(r"^-\s*")
NESTED_IN_PROGRESS_RE = re.compile(r"^\s+-\s*\[\s*\]\s*In Progress$", re.IGNORECASE)
NESTED_BLOCKED_RE = re.compile(r"^\s+-\s*\[x\]\s*Blocked$", re.IGNORECASE)
CHECKBOX_RE = re.compile(r"^\[([ xX])\]\s*(.+)$")
BLOCKER_RE = re.compile(r"^\[[ x]?\]\s*(.+)$", re.IGNORECASE)


@dataclass
class TodayItem:
    text: str
    done: bool


def _section_pattern(name: str) -> re.Pattern[str]:
    if name not in SECTION_RE_CACHE:
        SECTION_RE_CACHE[name] = re.compile(
            rf'<div class="standup-{re.escape(name)}">(.*?)</div>',
            re.DOTALL | re.IGNORECASE,
        )
    return SECTION_RE_CACHE[name]


def _clean_line(line: str) -> str:
    if DROP_LINE_RE.search(line):
        return ""
    return LIST_MARKER_RE.sub("", line, count=1).replace("&nbsp;", " ")


def extract_section(content: str, name: str) -> List[str]:
    match = _section_pattern(name).search(content or "")
    body = match.group(1).strip() if match else ""
    lines = [_clean_line(line) for line in body.split("\n")]
    return [line for line in lines if line.strip()]


def parse_list_items(lines: List[str], is_yesterday: bool = False) -> List[Union[str, YesterdayItem]]:
    """Parse cleaned lines into strings, or into YesterdayItems.

    In yesterday mode checked boxes are dropped and nested
    "In Progress" / "Blocked" markers update the previous item.
    """
    items: List[Union[str, YesterdayItem]] = []
    for line in lines:
        if SKIP_LINE_RE.search(line):
            continue

        if is_yesterday and items:
            if NESTED_IN_PROGRESS_RE.match(line):
                items[-1].status = ItemStatus.IN_PROGRESS
                continue
            if NESTED_BLOCKED_RE.match(line):
                items[-1].status = ItemStatus.BLOCKED
                continue

        checkbox = CHECKBOX_RE.match(line)
        if checkbox:
            checked = checkbox.group(1).lower() == "x"
            text = checkbox.group(2).strip()
            if not is_yesterday:
                items.append(text)
            elif not checked:
                items.append(YesterdayItem(text=text, status=ItemStatus.NOT_STARTED))
            continue

        text = line.strip()
        if not text:
            continue
        if is_yesterday:
            items.append(YesterdayItem(text=text, status=ItemStatus.NOT_STARTED))
        else:
            items.append(text)
    return items


def parse_blockers(lines: List[str]) -> List[str]:
    items = []
    for line in lines:
        match = BLOCKER_RE.match(line)
        if match:
            items.append(match.group(1).strip())
    return items


def parse_today_items(lines: List[str]) -> List[TodayItem]:
    items = []
    for line in lines:
        match = CHECKBOX_RE.match(line)
        if not match:
            continue
        text = match.group(2).strip()
        if text:
            items.append(TodayItem(text=text, done=match.group(1).lower() == "x"))
    return items
