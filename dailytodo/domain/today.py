"""
Today-list resolver.

Filtering rules per active template:
  - not scheduled on the reference day -> skipped
  - one-time: shown (not done) until it has any completion, then gone for good
  - recurring: always shown, flagged done if completed on the reference day

Progress counters only count the items that made it onto the list, so a
finished one-time task stops inflating the total while a checked-off
recurring task stays in it for the rest of the day.
"""
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import date

from dailytodo.domain.calendar import DayCalendar
from dailytodo.domain.completion import Completion
from dailytodo.domain.ledger import has_ever_completed, is_satisfied_on
from dailytodo.domain.recurrence import is_scheduled
from dailytodo.domain.task_template import TaskTemplate


@dataclass(frozen=True)
class TodayItem:
    template: TaskTemplate
    is_satisfied_today: bool


@dataclass(frozen=True)
class TodayList:
    items: list[TodayItem] = field(default_factory=list)
    completed_count: int = 0
    total_count: int = 0

    @property
    def pending(self) -> list[TodayItem]:
        return [item for item in self.items if not item.is_satisfied_today]

    @property
    def progress(self) -> float:
        if self.total_count == 0:
            return 0.0
        return self.completed_count / self.total_count


def resolve_today(
    calendar: DayCalendar,
    templates: Iterable[TaskTemplate],
    completions_by_task_id: Mapping[str, list[Completion]],
    reference_day: date,
) -> TodayList:
    items: list[TodayItem] = []
    for template in templates:
        if not template.is_active:
            continue
        if not is_scheduled(template, reference_day):
            continue

        completions = completions_by_task_id.get(template.id, [])
        if template.is_one_time:
            if has_ever_completed(completions):
                continue
            items.append(TodayItem(template, False))
        else:
            items.append(TodayItem(template, is_satisfied_on(calendar, completions, reference_day)))

    # sorted() is stable: equal sort_order keeps input order
    items = sorted(items, key=lambda item: item.template.sort_order)
    completed = sum(1 for item in items if item.is_satisfied_today)
    return TodayList(items=items, completed_count=completed, total_count=len(items))
