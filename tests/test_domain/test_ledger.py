"""Tests for the completion ledger (complete / uncomplete / toggle)"""
from datetime import date, datetime, timedelta

from dailytodo.domain.completion import Completion
from dailytodo.domain.ledger import (
    CompletionLedger, complete, has_ever_completed, is_satisfied_on, toggle, uncomplete,
)
from dailytodo.domain.recurrence import Daily
from dailytodo.domain.task_template import TaskTemplate


def _at(calendar, d: date, hour: int, minute: int = 0) -> datetime:
    return datetime(d.year, d.month, d.day, hour, minute, tzinfo=calendar.tz)


class TestQueries:
    def test_is_satisfied_on(self, calendar):
        c = Completion(task_id="t", completed_at=_at(calendar, date(2026, 1, 24), 14))
        assert is_satisfied_on(calendar, [c], date(2026, 1, 24))
        assert not is_satisfied_on(calendar, [c], date(2026, 1, 25))
        assert not is_satisfied_on(calendar, [], date(2026, 1, 24))

    def test_just_after_midnight_counts_for_new_day(self, calendar):
        c = Completion(task_id="t", completed_at=_at(calendar, date(2026, 1, 25), 0, 5))
        assert is_satisfied_on(calendar, [c], date(2026, 1, 25))
        assert not is_satisfied_on(calendar, [c], date(2026, 1, 24))

    def test_has_ever_completed(self, calendar):
        assert not has_ever_completed([])
        assert has_ever_completed([Completion(task_id="t", completed_at=_at(calendar, date(2026, 1, 1), 9))])


class TestCompleteUncomplete:
    def test_complete_returns_new_list(self, calendar, now):
        t = TaskTemplate(title="Read", recurrence=Daily())
        original: list[Completion] = []
        created, updated = complete(t, original, now)
        assert original == []
        assert updated == [created]
        assert created.task_id == t.id
        assert created.completed_at == now

    def test_uncomplete_removes_only_that_day(self, calendar):
        d1 = Completion(task_id="t", completed_at=_at(calendar, date(2026, 1, 23), 8))
        d2 = Completion(task_id="t", completed_at=_at(calendar, date(2026, 1, 24), 8))
        assert uncomplete(calendar, [d1, d2], date(2026, 1, 24)) == [d1]

    def test_uncomplete_without_match_is_noop(self, calendar):
        d1 = Completion(task_id="t", completed_at=_at(calendar, date(2026, 1, 23), 8))
        assert uncomplete(calendar, [d1], date(2026, 1, 24)) == [d1]
        assert uncomplete(calendar, [], date(2026, 1, 24)) == []


class TestToggle:
    def test_toggle_completes_then_uncompletes(self, calendar, now):
        t = TaskTemplate(title="Read", recurrence=Daily())
        done, after_first = toggle(calendar, t, [], now)
        assert done is True
        assert len(after_first) == 1

        done, after_second = toggle(calendar, t, after_first, now + timedelta(hours=2))
        assert done is False
        assert after_second == []

    def test_toggle_twice_restores_history(self, calendar, now):
        t = TaskTemplate(title="Read", recurrence=Daily())
        history = [
            Completion(task_id=t.id, completed_at=now - timedelta(days=i)) for i in range(1, 6)
        ]
        _, once = toggle(calendar, t, history, now)
        satisfied, twice = toggle(calendar, t, once, now)
        assert satisfied is False
        assert twice == history

    def test_toggle_when_done_today_keeps_other_days(self, calendar, now):
        t = TaskTemplate(title="Read", recurrence=Daily())
        yesterday = Completion(task_id=t.id, completed_at=now - timedelta(days=1))
        today = Completion(task_id=t.id, completed_at=now - timedelta(hours=1))
        satisfied, updated = toggle(calendar, t, [yesterday, today], now)
        assert satisfied is False
        assert updated == [yesterday]


class TestCompletionLedger:
    def test_groups_by_task(self, calendar, now):
        a = Completion(task_id="a", completed_at=now)
        b = Completion(task_id="b", completed_at=now)
        ledger = CompletionLedger(calendar, [a, b])
        assert ledger.for_task("a") == [a]
        assert ledger.for_task("missing") == []
        assert sorted(c.task_id for c in ledger.all()) == ["a", "b"]

    def test_toggle_reports_added_and_removed(self, calendar, now):
        t = TaskTemplate(title="Walk", recurrence=Daily())
        ledger = CompletionLedger(calendar)

        satisfied, added, removed = ledger.toggle(t, now)
        assert satisfied is True
        assert len(added) == 1 and removed == []
        assert ledger.is_satisfied_on(t.id, calendar.day_of(now))

        satisfied, added, removed = ledger.toggle(t, now)
        assert satisfied is False
        assert added == [] and len(removed) == 1
        assert not ledger.has_ever_completed(t.id)
        assert t.id not in ledger.by_task

    def test_drop_task_removes_bucket(self, calendar, now):
        a = Completion(task_id="a", completed_at=now)
        ledger = CompletionLedger(calendar, [a])
        assert ledger.drop_task("a") == [a]
        assert ledger.for_task("a") == []
        assert ledger.drop_task("a") == []
