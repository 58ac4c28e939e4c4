from __future__ import annotations

import datetime as dt
import math
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]


@dataclass(frozen=True)
class DateInfo:
    date: str
    day: str
    week: int


@dataclass(frozen=True)
class BinSchedule:
    """Household bin reminders; the category alternates with week parity."""

    put_day: str = "Wednesday"
    grab_day: str = "Thursday"
    categories: Tuple[str, ...] = ("trash", "trash/recycling")
    plurals: Tuple[str, ...] = ("", "s")

    @classmethod
    def from_mapping(cls, data: Optional[Mapping[str, object]]) -> "BinSchedule":
        if not data:
            return cls()
        defaults = cls()
        categories = tuple(str(c) for c in data.get("categories") or defaults.categories)
        plurals = tuple(str(p) for p in data.get("plurals") or defaults.plurals)
        if not categories:
            raise ValueError("auto_tasks.categories must not be empty")
        if len(plurals) != len(categories):
            raise ValueError("auto_tasks.plurals must match auto_tasks.categories in length")
        return cls(
            put_day=str(data.get("put_day") or defaults.put_day),
            grab_day=str(data.get("grab_day") or defaults.grab_day),
            categories=categories,
            plurals=plurals,
        )


def _sunday_based_weekday(day: dt.date) -> int:
    return day.isoweekday() % 7


def week_number(day: dt.date) -> int:
    jan1 = dt.date(day.year, 1, 1)
    day_of_year = day.timetuple().tm_yday
    return math.ceil((day_of_year + _sunday_based_weekday(jan1)) / 7)


def get_date_info(today: Optional[dt.date] = None) -> DateInfo:
    day = today or dt.date.today()
    return DateInfo(
        date=day.strftime("%m-%d-%Y"),
        day=DAY_NAMES[_sunday_based_weekday(day)],
        week=week_number(day),
    )


def get_auto_tasks(info: DateInfo, schedule: Optional[BinSchedule] = None) -> List[str]:
    schedule = schedule or BinSchedule()
    idx = info.week % len(schedule.categories)
    category = schedule.categories[idx]
    plural = schedule.plurals[idx]
    tasks: List[str] = []
    if info.day == schedule.put_day:
        tasks.append(f"Put {category} out!")
    if info.day == schedule.grab_day:
        tasks.append(f"Grab {category} bin{plural}!")
    return tasks
