"""
Recurrence patterns and the scheduling evaluator.

A template follows exactly one of four patterns:
- OneTime: shown until it is completed once
- Daily: every day
- Weekly: selected weekdays (1=Sunday .. 7=Saturday); empty set = every day
- Monthly: selected days of month (1..31); empty set = every day

Day values are evaluated literally: a Monthly day 31 never matches a 30-day
month and a weekday 9 never matches at all.
"""
from dataclasses import dataclass
from datetime import date
from typing import Union

from dailytodo.domain.calendar import weekday_number

WEEKDAY_LABELS = {1: "SUN", 2: "MON", 3: "TUE", 4: "WED", 5: "THU", 6: "FRI", 7: "SAT"}


@dataclass(frozen=True)
class OneTime:
    kind = "none"


@dataclass(frozen=True)
class Daily:
    kind = "daily"


@dataclass(frozen=True)
class Weekly:
    days: frozenset[int] = frozenset()
    kind = "weekly"

    def __post_init__(self) -> None:
        object.__setattr__(self, "days", frozenset(self.days))


@dataclass(frozen=True)
class Monthly:
    days: frozenset[int] = frozenset()
    kind = "monthly"

    def __post_init__(self) -> None:
        object.__setattr__(self, "days", frozenset(self.days))


Recurrence = Union[OneTime, Daily, Weekly, Monthly]


def is_recurring(recurrence: Recurrence) -> bool:
    return not isinstance(recurrence, OneTime)


def is_scheduled(template, reference_day: date) -> bool:
    """Whether the template belongs on reference_day's list, ignoring completions."""
    if template.start_date is not None and template.start_date > reference_day:
        return False
    return matches_day(template.recurrence, reference_day)


def matches_day(recurrence: Recurrence, day: date) -> bool:
    if isinstance(recurrence, (OneTime, Daily)):
        return True
    if isinstance(recurrence, Weekly):
        return not recurrence.days or weekday_number(day) in recurrence.days
    if isinstance(recurrence, Monthly):
        return not recurrence.days or day.day in recurrence.days
    raise TypeError(f"unknown recurrence: {recurrence!r}")


def ordinal(n: int) -> str:
    if (n // 10) % 10 == 1:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


def describe_recurrence(recurrence: Recurrence) -> str:
    """Short uppercase label, e.g. 'DAILY', 'MON, WED, FRI', '1ST, 15TH'."""
    if isinstance(recurrence, OneTime):
        return ""
    if isinstance(recurrence, Daily):
        return "DAILY"
    if isinstance(recurrence, Weekly):
        labels = [WEEKDAY_LABELS[d] for d in sorted(recurrence.days) if d in WEEKDAY_LABELS]
        return ", ".join(labels) if labels else "WEEKLY"
    if isinstance(recurrence, Monthly):
        if not recurrence.days:
            return "MONTHLY"
        return ", ".join(ordinal(d) for d in sorted(recurrence.days)).upper()
    raise TypeError(f"unknown recurrence: {recurrence!r}")
