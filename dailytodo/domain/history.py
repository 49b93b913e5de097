"""
Completion history grouped by calendar day.

One linear pass buckets completions by local day, then bucket keys are sorted
once (newest day first) and each bucket is sorted once (latest time first).
Ties on completed_at fall back to the record id so the output does not depend
on input order.
"""
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from dailytodo.domain.calendar import DayCalendar
from dailytodo.domain.completion import Completion


@dataclass(frozen=True)
class DayGroup:
    day: date
    completions: list[Completion]


def _newest_first(calendar: DayCalendar):
    # naive and aware timestamps may be mixed; compare them as local instants
    return lambda c: (calendar.localize(c.completed_at), c.id)


def group_by_day(calendar: DayCalendar, completions: Iterable[Completion]) -> list[DayGroup]:
    buckets: dict[date, list[Completion]] = {}
    for completion in completions:
        buckets.setdefault(calendar.day_of(completion.completed_at), []).append(completion)

    return [
        DayGroup(day=day, completions=sorted(buckets[day], key=_newest_first(calendar), reverse=True))
        for day in sorted(buckets, reverse=True)
    ]


def completion_days(calendar: DayCalendar, completions: Iterable[Completion]) -> list[date]:
    """Distinct days with at least one completion, newest first."""
    return sorted({calendar.day_of(c.completed_at) for c in completions}, reverse=True)


def completions_on(calendar: DayCalendar, completions: Iterable[Completion], day: date) -> list[Completion]:
    matching = [c for c in completions if calendar.day_of(c.completed_at) == day]
    return sorted(matching, key=_newest_first(calendar), reverse=True)
