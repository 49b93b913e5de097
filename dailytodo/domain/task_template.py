"""
Task templates and edit-boundary validation.

A template is a task definition, not an instance of work: completions are
tracked separately (see completion.py / ledger.py).

Validation rules (enforced on create/edit only, never by the evaluator):
  - title must not be blank
  - Weekly days must be in 1..7
  - Monthly days must be in 1..31
"""
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime

from dailytodo.domain.recurrence import Monthly, OneTime, Recurrence, Weekly


class TaskValidationError(ValueError):
    pass


@dataclass
class TaskTemplate:
    title: str
    recurrence: Recurrence = field(default_factory=OneTime)
    category: str | None = None
    start_date: date | None = None
    sort_order: int = 0
    is_active: bool = True
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime | None = None

    @property
    def is_one_time(self) -> bool:
        return isinstance(self.recurrence, OneTime)


def validate_template_fields(title: str, recurrence: Recurrence) -> str:
    """Validate user input for a template. Returns the normalized title."""
    title = (title or "").strip()
    if not title:
        raise TaskValidationError("Task title must not be empty")

    if isinstance(recurrence, Weekly):
        bad = sorted(d for d in recurrence.days if not 1 <= d <= 7)
        if bad:
            raise TaskValidationError(f"Weekday values must be 1..7, got {bad}")
    elif isinstance(recurrence, Monthly):
        bad = sorted(d for d in recurrence.days if not 1 <= d <= 31)
        if bad:
            raise TaskValidationError(f"Day-of-month values must be 1..31, got {bad}")

    return title


def normalize_category(category: str | None) -> str | None:
    if category is None:
        return None
    category = category.strip()
    return category or None


def category_matches(template: TaskTemplate, category: str) -> bool:
    if template.category is None:
        return False
    return template.category.casefold() == category.strip().casefold()
