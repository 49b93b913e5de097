"""Task use cases (create/edit/delete, toggle completion, reorder) and read queries"""
import logging
from collections.abc import Callable
from datetime import date, datetime

from sqlalchemy.orm import Session

from dailytodo.domain.calendar import DayCalendar
from dailytodo.domain.completion import Completion
from dailytodo.domain.history import DayGroup, completions_on, group_by_day
from dailytodo.domain.ledger import CompletionLedger
from dailytodo.domain.ordering import next_sort_order, reorder
from dailytodo.domain.recurrence import OneTime, Recurrence
from dailytodo.domain.stats import (
    TaskStats,
    YearSummary,
    filter_by_category,
    monthly_trend,
    task_stats,
    weekday_rhythm,
    year_summary,
)
from dailytodo.domain.task_template import (
    TaskTemplate,
    TaskValidationError,
    normalize_category,
    validate_template_fields,
)
from dailytodo.domain.today import TodayList, resolve_today
from dailytodo.infrastructure.db.repository import TaskRepository

logger = logging.getLogger(__name__)

ChangeNotifier = Callable[[], None]


class TaskNotFoundError(LookupError):
    pass


class _TaskUseCase:
    def __init__(self, db: Session, calendar: DayCalendar, on_change: ChangeNotifier | None = None):
        self.db = db
        self.calendar = calendar
        self.repo = TaskRepository(db)
        self.on_change = on_change

    def _get_or_raise(self, task_id: str) -> TaskTemplate:
        template = self.repo.get(task_id)
        if template is None:
            raise TaskNotFoundError(f"Task {task_id} not found")
        return template

    def _commit(self) -> None:
        self.db.commit()
        if self.on_change is None:
            return
        # fire-and-forget: the mutation is already committed
        try:
            self.on_change()
        except Exception:
            logger.exception("Change notifier failed")


class CreateTaskUseCase(_TaskUseCase):
    def execute(
        self,
        title: str,
        now: datetime,
        recurrence: Recurrence | None = None,
        category: str | None = None,
        start_date: date | None = None,
    ) -> TaskTemplate:
        now = self.calendar.localize(now)
        recurrence = recurrence if recurrence is not None else OneTime()
        title = validate_template_fields(title, recurrence)

        template = TaskTemplate(
            title=title,
            recurrence=recurrence,
            category=normalize_category(category),
            start_date=start_date,
            sort_order=next_sort_order(self.repo.list_templates()),
            created_at=now,
        )
        self.repo.add_template(template)
        self._commit()
        logger.info("Created task %s (%s)", template.id, recurrence.kind)
        return template


class UpdateTaskUseCase(_TaskUseCase):
    def execute(
        self,
        task_id: str,
        title: str,
        now: datetime,
        recurrence: Recurrence,
        category: str | None = None,
        start_date: date | None = None,
    ) -> TaskTemplate:
        title = validate_template_fields(title, recurrence)
        template = self._get_or_raise(task_id)

        # A one-time task edited to start now (or with no start date) is reset:
        # its old completions would otherwise keep it hidden forever.
        today = self.calendar.day_of(now)
        starts_now = start_date is None or start_date <= today
        if isinstance(recurrence, OneTime) and starts_now:
            ledger = CompletionLedger(self.calendar, self.repo.completions_for(task_id))
            cleared = ledger.clear(task_id)
            if cleared:
                self.repo.delete_completions(cleared)
                logger.info("Reset one-time task %s, cleared %d completion(s)", task_id, len(cleared))

        template.title = title
        template.category = normalize_category(category)
        template.recurrence = recurrence
        template.start_date = start_date
        self.repo.save_template(template)
        self._commit()
        return template


class ToggleTaskCompletionUseCase(_TaskUseCase):
    """Complete or uncomplete a task for the calendar day of `now`. Returns the new state."""

    def execute(self, task_id: str, now: datetime) -> bool:
        now = self.calendar.localize(now)
        template = self._get_or_raise(task_id)
        ledger = CompletionLedger(self.calendar, self.repo.completions_for(task_id))

        satisfied, added, removed = ledger.toggle(template, now)
        for completion in added:
            self.repo.add_completion(completion)
        self.repo.delete_completions(removed)

        self._commit()
        logger.debug(
            "Toggled task %s on %s -> %s", task_id, self.calendar.day_of(now), "done" if satisfied else "open"
        )
        return satisfied


class SoftDeleteTaskUseCase(_TaskUseCase):
    def execute(self, task_id: str) -> None:
        template = self._get_or_raise(task_id)
        template.is_active = False
        self.repo.save_template(template)
        self._commit()


class RestoreTaskUseCase(_TaskUseCase):
    def execute(self, task_id: str) -> None:
        template = self._get_or_raise(task_id)
        if template.is_active:
            return
        template.is_active = True
        template.sort_order = next_sort_order(self.repo.list_templates())
        self.repo.save_template(template)
        self._commit()


class DeleteTaskUseCase(_TaskUseCase):
    """Hard delete: the template and its whole completion history."""

    def execute(self, task_id: str) -> int:
        self._get_or_raise(task_id)
        ledger = CompletionLedger(self.calendar, self.repo.completions_for(task_id))
        dropped = ledger.drop_task(task_id)
        self.repo.delete_completions(dropped)
        self.repo.delete_template(task_id)
        self._commit()
        logger.info("Deleted task %s with %d completion(s)", task_id, len(dropped))
        return len(dropped)


class ReorderTasksUseCase(_TaskUseCase):
    def execute(self, ordered_ids: list[str]) -> list[TaskTemplate]:
        if len(set(ordered_ids)) != len(ordered_ids):
            raise TaskValidationError("Task ids in a reorder must be unique")
        templates = [self._get_or_raise(task_id) for task_id in ordered_ids]
        reorder(templates)
        self.repo.save_sort_orders([t for t in templates if t.is_active])
        self._commit()
        return templates


# --- Queries ---

def get_today(db: Session, calendar: DayCalendar, now: datetime) -> TodayList:
    """Today's list for the calendar day of `now`."""
    repo = TaskRepository(db)
    ledger = CompletionLedger(calendar, repo.all_completions())
    return resolve_today(calendar, repo.list_templates(), ledger.by_task, calendar.day_of(now))


def get_history(db: Session, calendar: DayCalendar) -> list[DayGroup]:
    """All completions (inactive tasks included) grouped by day, newest first."""
    return group_by_day(calendar, TaskRepository(db).all_completions())


def get_completions_on(db: Session, calendar: DayCalendar, day: date) -> list[Completion]:
    return completions_on(calendar, TaskRepository(db).all_completions(), day)


def get_task_stats(db: Session, calendar: DayCalendar, task_id: str, now: datetime) -> TaskStats:
    repo = TaskRepository(db)
    template = repo.get(task_id)
    if template is None:
        raise TaskNotFoundError(f"Task {task_id} not found")
    return task_stats(calendar, template, repo.completions_for(task_id), calendar.day_of(now))


def get_year_summary(db: Session, calendar: DayCalendar, year: int) -> YearSummary:
    return year_summary(calendar, TaskRepository(db).all_completions(), year)


def get_category_tasks(db: Session, category: str, include_inactive: bool = False) -> list[TaskTemplate]:
    templates = TaskRepository(db).list_templates(active_only=not include_inactive)
    return filter_by_category(templates, category)


def get_completion_trends(db: Session, calendar: DayCalendar, now: datetime, task_id: str | None = None) -> dict:
    """Weekday rhythm (Monday first) and month-over-month trend, overall or for one task."""
    repo = TaskRepository(db)
    completions = repo.completions_for(task_id) if task_id else repo.all_completions()
    return {
        "weekday_rhythm": weekday_rhythm(calendar, completions),
        "monthly_trend": monthly_trend(calendar, completions, calendar.day_of(now)),
    }
