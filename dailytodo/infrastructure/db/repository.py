"""
Task repository - maps ORM rows to domain objects and back.

Flat encodings (recurrence type string, comma-separated day lists, UTC
timestamps) exist only here; the domain sees Recurrence values, native sets
and timezone-aware datetimes.
"""
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from dailytodo.domain.completion import Completion
from dailytodo.domain.recurrence import Daily, Monthly, OneTime, Recurrence, Weekly
from dailytodo.domain.task_template import TaskTemplate
from dailytodo.infrastructure.db.models import TaskCompletionModel, TaskTemplateModel


def encode_days(days) -> str:
    return ",".join(str(d) for d in sorted(days))


def decode_days(s: str | None) -> frozenset[int]:
    """Parse "2,4,6" into {2, 4, 6}; unparseable tokens are skipped."""
    if not s or not s.strip():
        return frozenset()
    out = set()
    for part in s.split(","):
        part = part.strip()
        if part.lstrip("-").isdigit():
            out.add(int(part))
    return frozenset(out)


def recurrence_from_row(row: TaskTemplateModel) -> Recurrence:
    kind = (row.recurrence_type or "none").lower()
    if kind == "daily":
        return Daily()
    if kind == "weekly":
        return Weekly(decode_days(row.selected_weekdays))
    if kind == "monthly":
        return Monthly(decode_days(row.selected_month_days))
    return OneTime()


def recurrence_to_columns(recurrence: Recurrence) -> dict:
    return {
        "recurrence_type": recurrence.kind,
        "selected_weekdays": encode_days(recurrence.days) if isinstance(recurrence, Weekly) else "",
        "selected_month_days": encode_days(recurrence.days) if isinstance(recurrence, Monthly) else "",
    }


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything is written in UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def template_from_row(row: TaskTemplateModel) -> TaskTemplate:
    return TaskTemplate(
        id=row.id,
        title=row.title,
        category=row.category,
        recurrence=recurrence_from_row(row),
        start_date=row.start_date,
        sort_order=row.sort_order,
        is_active=row.is_active,
        created_at=_as_utc(row.created_at) if row.created_at is not None else None,
    )


def completion_from_row(row: TaskCompletionModel) -> Completion:
    return Completion(id=row.id, task_id=row.task_id, completed_at=_as_utc(row.completed_at))


class TaskRepository:
    def __init__(self, db: Session):
        self.db = db

    # --- templates ---

    def list_templates(self, active_only: bool = True) -> list[TaskTemplate]:
        q = self.db.query(TaskTemplateModel)
        if active_only:
            q = q.filter(TaskTemplateModel.is_active == True)  # noqa: E712
        rows = q.order_by(TaskTemplateModel.sort_order, TaskTemplateModel.created_at).all()
        return [template_from_row(r) for r in rows]

    def get(self, task_id: str) -> TaskTemplate | None:
        row = self.db.get(TaskTemplateModel, task_id)
        return template_from_row(row) if row else None

    def add_template(self, template: TaskTemplate) -> None:
        row = TaskTemplateModel(id=template.id)
        if template.created_at is not None:
            row.created_at = _as_utc(template.created_at)
        self._apply(row, template)
        self.db.add(row)
        self.db.flush()

    def save_template(self, template: TaskTemplate) -> None:
        row = self.db.get(TaskTemplateModel, template.id)
        if row is None:
            raise LookupError(template.id)
        self._apply(row, template)
        self.db.flush()

    def save_sort_orders(self, templates: list[TaskTemplate]) -> None:
        for template in templates:
            row = self.db.get(TaskTemplateModel, template.id)
            if row is not None:
                row.sort_order = template.sort_order
        self.db.flush()

    def delete_template(self, task_id: str) -> int:
        """Hard delete. Completions are removed explicitly first. Returns their count."""
        removed = self.db.query(TaskCompletionModel).filter(
            TaskCompletionModel.task_id == task_id
        ).delete(synchronize_session="fetch")
        row = self.db.get(TaskTemplateModel, task_id)
        if row is not None:
            self.db.delete(row)
        self.db.flush()
        return removed

    @staticmethod
    def _apply(row: TaskTemplateModel, template: TaskTemplate) -> None:
        row.title = template.title
        row.category = template.category
        row.start_date = template.start_date
        row.sort_order = template.sort_order
        row.is_active = template.is_active
        for key, value in recurrence_to_columns(template.recurrence).items():
            setattr(row, key, value)

    # --- completions ---

    def completions_for(self, task_id: str) -> list[Completion]:
        rows = self.db.query(TaskCompletionModel).filter(
            TaskCompletionModel.task_id == task_id
        ).order_by(TaskCompletionModel.completed_at).all()
        return [completion_from_row(r) for r in rows]

    def all_completions(self) -> list[Completion]:
        rows = self.db.query(TaskCompletionModel).order_by(TaskCompletionModel.completed_at).all()
        return [completion_from_row(r) for r in rows]

    def completions_by_task(self) -> dict[str, list[Completion]]:
        out: dict[str, list[Completion]] = {}
        for c in self.all_completions():
            out.setdefault(c.task_id, []).append(c)
        return out

    def add_completion(self, completion: Completion) -> None:
        self.db.add(TaskCompletionModel(
            id=completion.id,
            task_id=completion.task_id,
            completed_at=_as_utc(completion.completed_at),
        ))
        self.db.flush()

    def delete_completions(self, completions: list[Completion]) -> int:
        ids = [c.id for c in completions]
        if not ids:
            return 0
        removed = self.db.query(TaskCompletionModel).filter(
            TaskCompletionModel.id.in_(ids)
        ).delete(synchronize_session="fetch")
        self.db.flush()
        return removed
