"""Tests for turning yesterday's memo into today's draft."""

import datetime as dt

from core.draft import ItemStatus, YesterdayItem
from core.transform import dedupe_by_text, transform_standup

WEDNESDAY_EVEN = dt.date(2025, 1, 8)
MONDAY = dt.date(2025, 1, 6)


class TestTransformStandup:
    def test_empty_previous_content(self) -> None:
        draft = transform_standup("", today=MONDAY)
        assert draft.live is False
        assert draft.today == [""]
        assert draft.yesterday == [YesterdayItem(text="", status=ItemStatus.UNRESOLVED)]
        assert draft.blockers == [""]
        assert draft.notes == [""]
        assert draft.status == [""]
        assert draft.breakfast == [""]

    def test_empty_previous_content_still_gets_auto_tasks(self) -> None:
        draft = transform_standup("", today=WEDNESDAY_EVEN)
        assert draft.today == ["", "Put trash out!"]

    def test_today_carries_incomplete_items(self, previous_memo) -> None:
        draft = transform_standup(previous_memo, today=WEDNESDAY_EVEN)
        assert draft.today == ["", "// Update docs", "// Write changelog", "Put trash out!"]

    def test_today_length_is_open_items_plus_auto_tasks_plus_placeholder(self, previous_memo) -> None:
        draft = transform_standup(previous_memo, today=MONDAY)
        assert len(draft.today) == 2 + 0 + 1

    def test_yesterday_priority_and_dedup(self, previous_memo) -> None:
        draft = transform_standup(previous_memo, today=MONDAY)
        assert [(i.text, i.status) for i in draft.yesterday] == [
            ("Update docs", ItemStatus.UNRESOLVED),
            ("Write changelog", ItemStatus.UNRESOLVED),
            ("Deploy staging", ItemStatus.DONE),
            ("Review PR 42", ItemStatus.IN_PROGRESS),
            ("Fix flaky test", ItemStatus.BLOCKED),
        ]

    def test_blockers_and_notes_are_carried_as_comments(self, previous_memo) -> None:
        draft = transform_standup(previous_memo, today=MONDAY)
        assert draft.blockers == ["", "// Waiting on API keys"]
        assert draft.notes == ["", "// Dentist at 3pm"]

    def test_status_and_breakfast_reset(self, previous_memo) -> None:
        draft = transform_standup(previous_memo, today=MONDAY)
        assert draft.status == [""]
        assert draft.breakfast == [""]
        assert draft.live is False

    def test_is_pure(self, previous_memo) -> None:
        first = transform_standup(previous_memo, today=MONDAY)
        second = transform_standup(previous_memo, today=MONDAY)
        assert first == second


class TestDedupeByText:
    def test_first_occurrence_wins(self) -> None:
        items = [
            YesterdayItem(text="a", status=ItemStatus.DONE),
            YesterdayItem(text="b"),
            YesterdayItem(text="a", status=ItemStatus.BLOCKED),
        ]
        assert dedupe_by_text(items) == items[:2]

    def test_single_item_is_kept_even_if_empty(self) -> None:
        items = [YesterdayItem(text="", status=ItemStatus.UNRESOLVED)]
        assert dedupe_by_text(items) == items

    def test_empty_texts_dropped_otherwise(self) -> None:
        items = [YesterdayItem(text=""), YesterdayItem(text="x")]
        assert dedupe_by_text(items) == [YesterdayItem(text="x")]
