"""
Completion statistics: streaks, completion rate, weekday rhythm, month-over-month
trend and a per-year summary. All day arithmetic goes through DayCalendar.
"""
from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime

from dailytodo.domain.calendar import DayCalendar, add_days
from dailytodo.domain.completion import Completion
from dailytodo.domain.task_template import TaskTemplate, category_matches


@dataclass(frozen=True)
class TaskStats:
    total_completions: int
    current_streak: int
    completion_rate: float | None
    first_completed_at: datetime | None


@dataclass(frozen=True)
class MonthlyTrend:
    this_month: int
    last_month: int
    change_percent: int | None

    @property
    def is_positive(self) -> bool:
        return self.this_month >= self.last_month


@dataclass(frozen=True)
class YearSummary:
    year: int
    counts_by_day: dict[date, int]
    total_completions: int
    active_days: int
    best_day: int
    longest_streak: int


def current_streak(calendar: DayCalendar, completions: Iterable[Completion], today: date) -> int:
    """Consecutive completed days ending today, or ending yesterday if today is still open."""
    days = {calendar.day_of(c.completed_at) for c in completions}
    if not days:
        return 0

    expected = today if today in days else add_days(today, -1)
    streak = 0
    while expected in days:
        streak += 1
        expected = add_days(expected, -1)
    return streak


def longest_streak(days: Iterable[date]) -> int:
    ordered = sorted(set(days))
    if not ordered:
        return 0
    best = run = 1
    for prev, cur in zip(ordered, ordered[1:]):
        if add_days(prev, 1) == cur:
            run += 1
            best = max(best, run)
        else:
            run = 1
    return best


def completion_rate(
    calendar: DayCalendar,
    template: TaskTemplate,
    completions: Iterable[Completion],
    today: date,
) -> float | None:
    """Distinct completion days per day since creation. None for one-time tasks."""
    if template.is_one_time or template.created_at is None:
        return None
    days_since_creation = (today - calendar.day_of(template.created_at)).days
    if days_since_creation <= 0:
        return None
    distinct = {calendar.day_of(c.completed_at) for c in completions}
    return len(distinct) / days_since_creation


def task_stats(
    calendar: DayCalendar,
    template: TaskTemplate,
    completions: Sequence[Completion],
    today: date,
) -> TaskStats:
    first = min((calendar.localize(c.completed_at) for c in completions), default=None)
    return TaskStats(
        total_completions=len(completions),
        current_streak=current_streak(calendar, completions, today),
        completion_rate=completion_rate(calendar, template, completions, today),
        first_completed_at=first,
    )


def weekday_rhythm(calendar: DayCalendar, completions: Iterable[Completion]) -> list[int]:
    """Completion counts per weekday, Monday first."""
    counts = [0] * 7
    for c in completions:
        counts[calendar.day_of(c.completed_at).weekday()] += 1
    return counts


def _month_start(day: date, months_back: int = 0) -> date:
    month_index = day.year * 12 + (day.month - 1) - months_back
    return date(month_index // 12, month_index % 12 + 1, 1)


def monthly_trend(calendar: DayCalendar, completions: Iterable[Completion], today: date) -> MonthlyTrend:
    this_start = _month_start(today)
    last_start = _month_start(today, 1)
    this_month = last_month = 0
    for c in completions:
        day = calendar.day_of(c.completed_at)
        if this_start <= day <= today:
            this_month += 1
        elif last_start <= day < this_start:
            last_month += 1

    change = None
    if last_month > 0:
        change = int((this_month - last_month) / last_month * 100)
    return MonthlyTrend(this_month=this_month, last_month=last_month, change_percent=change)


def year_summary(calendar: DayCalendar, completions: Iterable[Completion], year: int) -> YearSummary:
    counts = Counter(
        day for day in (calendar.day_of(c.completed_at) for c in completions) if day.year == year
    )
    return YearSummary(
        year=year,
        counts_by_day=dict(counts),
        total_completions=sum(counts.values()),
        active_days=len(counts),
        best_day=max(counts.values(), default=0),
        longest_streak=longest_streak(counts),
    )


def filter_by_category(templates: Iterable[TaskTemplate], category: str) -> list[TaskTemplate]:
    return [t for t in templates if category_matches(t, category)]
