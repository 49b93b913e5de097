"""
Completion ledger.

Append-only store of completion events per task, with one retraction path:
uncompleting removes the record(s) for a given calendar day. History for other
days is never touched.

The module-level functions work on a single task's completion list as a value
and return new lists; CompletionLedger owns those lists keyed by task id.
"""
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime

from dailytodo.domain.calendar import DayCalendar
from dailytodo.domain.completion import Completion


def is_satisfied_on(calendar: DayCalendar, completions: Iterable[Completion], day: date) -> bool:
    return any(calendar.day_of(c.completed_at) == day for c in completions)


def has_ever_completed(completions: Sequence[Completion]) -> bool:
    return len(completions) > 0


def complete(template, completions: list[Completion], now: datetime) -> tuple[Completion, list[Completion]]:
    """Record a completion at `now`. Does not check whether the day is already satisfied."""
    completion = Completion(task_id=template.id, completed_at=now)
    return completion, [*completions, completion]


def uncomplete(calendar: DayCalendar, completions: list[Completion], day: date) -> list[Completion]:
    """Drop completions falling on `day`. No match is a no-op."""
    return [c for c in completions if calendar.day_of(c.completed_at) != day]


def toggle(
    calendar: DayCalendar,
    template,
    completions: list[Completion],
    now: datetime,
) -> tuple[bool, list[Completion]]:
    """Flip the task's state for the day of `now`. Returns (is_now_satisfied, completions)."""
    today = calendar.day_of(now)
    if is_satisfied_on(calendar, completions, today):
        return False, uncomplete(calendar, completions, today)
    _, updated = complete(template, completions, now)
    return True, updated


class CompletionLedger:
    """Completions owned by task id. Deleting a task drops its bucket explicitly."""

    def __init__(self, calendar: DayCalendar, completions: Iterable[Completion] = ()):
        self.calendar = calendar
        self._by_task: dict[str, list[Completion]] = {}
        for c in completions:
            self._by_task.setdefault(c.task_id, []).append(c)

    @property
    def by_task(self) -> Mapping[str, list[Completion]]:
        return self._by_task

    def for_task(self, task_id: str) -> list[Completion]:
        return list(self._by_task.get(task_id, []))

    def all(self) -> list[Completion]:
        return [c for bucket in self._by_task.values() for c in bucket]

    def is_satisfied_on(self, task_id: str, day: date) -> bool:
        return is_satisfied_on(self.calendar, self._by_task.get(task_id, []), day)

    def has_ever_completed(self, task_id: str) -> bool:
        return has_ever_completed(self._by_task.get(task_id, []))

    def toggle(self, template, now: datetime) -> tuple[bool, list[Completion], list[Completion]]:
        """Toggle and store the result. Returns (is_now_satisfied, added, removed)."""
        before = self._by_task.get(template.id, [])
        satisfied, after = toggle(self.calendar, template, before, now)
        self._set(template.id, after)
        before_ids = {c.id for c in before}
        after_ids = {c.id for c in after}
        added = [c for c in after if c.id not in before_ids]
        removed = [c for c in before if c.id not in after_ids]
        return satisfied, added, removed

    def clear(self, task_id: str) -> list[Completion]:
        """Remove every completion of a task (one-time reset). Returns what was removed."""
        return self._by_task.pop(task_id, [])

    def drop_task(self, task_id: str) -> list[Completion]:
        """Hard delete of a template: its completions go with it."""
        return self.clear(task_id)

    def _set(self, task_id: str, completions: list[Completion]) -> None:
        if completions:
            self._by_task[task_id] = completions
        else:
            self._by_task.pop(task_id, None)
