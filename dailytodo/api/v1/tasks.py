"""
Task API endpoints
"""
from datetime import date, datetime
from typing import Literal

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session

from dailytodo.api.deps import get_calendar, get_db, get_now
from dailytodo.application.tasks import (
    CreateTaskUseCase,
    DeleteTaskUseCase,
    ReorderTasksUseCase,
    RestoreTaskUseCase,
    SoftDeleteTaskUseCase,
    TaskNotFoundError,
    ToggleTaskCompletionUseCase,
    UpdateTaskUseCase,
    get_category_tasks,
    get_completion_trends,
    get_completions_on,
    get_history,
    get_task_stats,
    get_today,
    get_year_summary,
)
from dailytodo.domain.calendar import DayCalendar
from dailytodo.domain.recurrence import Daily, Monthly, OneTime, Recurrence, Weekly, describe_recurrence
from dailytodo.domain.task_template import TaskTemplate, TaskValidationError


router = APIRouter(prefix="/api/v1/tasks", tags=["tasks"])


# === Request/Response models ===

class TaskRequest(BaseModel):
    title: str
    category: str | None = None
    recurrence_type: Literal["none", "daily", "weekly", "monthly"] = "none"
    weekdays: list[int] = []  # 1=Sun .. 7=Sat
    month_days: list[int] = []  # 1..31
    start_date: date | None = None

    def to_recurrence(self) -> Recurrence:
        if self.recurrence_type == "daily":
            return Daily()
        if self.recurrence_type == "weekly":
            return Weekly(frozenset(self.weekdays))
        if self.recurrence_type == "monthly":
            return Monthly(frozenset(self.month_days))
        return OneTime()


class ReorderRequest(BaseModel):
    task_ids: list[str]


class TaskResponse(BaseModel):
    id: str
    title: str
    category: str | None
    recurrence_type: str
    recurrence_label: str
    weekdays: list[int]
    month_days: list[int]
    start_date: date | None
    sort_order: int
    is_active: bool


class TodayItemResponse(BaseModel):
    task: TaskResponse
    is_done: bool


class TodayResponse(BaseModel):
    day: date
    items: list[TodayItemResponse]
    completed_count: int
    total_count: int


class ToggleResponse(BaseModel):
    task_id: str
    is_done: bool


class CompletionResponse(BaseModel):
    id: str
    task_id: str
    completed_at: datetime


class HistoryDayResponse(BaseModel):
    day: date
    completions: list[CompletionResponse]


class TaskStatsResponse(BaseModel):
    task_id: str
    total_completions: int
    current_streak: int
    completion_rate: float | None
    first_completed_at: datetime | None


class YearSummaryResponse(BaseModel):
    year: int
    counts_by_day: dict[date, int]
    total_completions: int
    active_days: int
    best_day: int
    longest_streak: int


class TrendsResponse(BaseModel):
    weekday_rhythm: list[int]  # Monday first
    this_month: int
    last_month: int
    change_percent: int | None


# === Helpers ===

def _task_response(template: TaskTemplate) -> TaskResponse:
    recurrence = template.recurrence
    return TaskResponse(
        id=template.id,
        title=template.title,
        category=template.category,
        recurrence_type=recurrence.kind,
        recurrence_label=describe_recurrence(recurrence),
        weekdays=sorted(recurrence.days) if isinstance(recurrence, Weekly) else [],
        month_days=sorted(recurrence.days) if isinstance(recurrence, Monthly) else [],
        start_date=template.start_date,
        sort_order=template.sort_order,
        is_active=template.is_active,
    )


def _not_found(e: TaskNotFoundError) -> HTTPException:
    return HTTPException(status_code=404, detail=str(e))


def _bad_request(e: TaskValidationError) -> HTTPException:
    return HTTPException(status_code=400, detail=str(e))


# === Endpoints ===

@router.get("/today", response_model=TodayResponse)
def today(
    db: Session = Depends(get_db),
    calendar: DayCalendar = Depends(get_calendar),
    now: datetime = Depends(get_now),
):
    result = get_today(db, calendar, now)
    return TodayResponse(
        day=calendar.day_of(now),
        items=[
            TodayItemResponse(task=_task_response(item.template), is_done=item.is_satisfied_today)
            for item in result.items
        ],
        completed_count=result.completed_count,
        total_count=result.total_count,
    )


@router.post("/", response_model=TaskResponse)
def create_task(
    body: TaskRequest,
    db: Session = Depends(get_db),
    calendar: DayCalendar = Depends(get_calendar),
    now: datetime = Depends(get_now),
):
    try:
        template = CreateTaskUseCase(db, calendar).execute(
            title=body.title,
            now=now,
            recurrence=body.to_recurrence(),
            category=body.category,
            start_date=body.start_date,
        )
    except TaskValidationError as e:
        raise _bad_request(e)
    return _task_response(template)


@router.put("/{task_id}", response_model=TaskResponse)
def update_task(
    task_id: str,
    body: TaskRequest,
    db: Session = Depends(get_db),
    calendar: DayCalendar = Depends(get_calendar),
    now: datetime = Depends(get_now),
):
    try:
        template = UpdateTaskUseCase(db, calendar).execute(
            task_id=task_id,
            title=body.title,
            now=now,
            recurrence=body.to_recurrence(),
            category=body.category,
            start_date=body.start_date,
        )
    except TaskValidationError as e:
        raise _bad_request(e)
    except TaskNotFoundError as e:
        raise _not_found(e)
    return _task_response(template)


@router.post("/{task_id}/toggle", response_model=ToggleResponse)
def toggle_task(
    task_id: str,
    db: Session = Depends(get_db),
    calendar: DayCalendar = Depends(get_calendar),
    now: datetime = Depends(get_now),
):
    try:
        is_done = ToggleTaskCompletionUseCase(db, calendar).execute(task_id, now)
    except TaskNotFoundError as e:
        raise _not_found(e)
    return ToggleResponse(task_id=task_id, is_done=is_done)


@router.delete("/{task_id}")
def delete_task(
    task_id: str,
    hard: bool = False,
    db: Session = Depends(get_db),
    calendar: DayCalendar = Depends(get_calendar),
):
    try:
        if hard:
            DeleteTaskUseCase(db, calendar).execute(task_id)
        else:
            SoftDeleteTaskUseCase(db, calendar).execute(task_id)
    except TaskNotFoundError as e:
        raise _not_found(e)
    return {"ok": True}


@router.post("/reorder", response_model=list[TaskResponse])
def reorder_tasks(
    body: ReorderRequest,
    db: Session = Depends(get_db),
    calendar: DayCalendar = Depends(get_calendar),
):
    try:
        templates = ReorderTasksUseCase(db, calendar).execute(body.task_ids)
    except TaskValidationError as e:
        raise _bad_request(e)
    except TaskNotFoundError as e:
        raise _not_found(e)
    return [_task_response(t) for t in templates]


@router.get("/history", response_model=list[HistoryDayResponse])
def history(
    db: Session = Depends(get_db),
    calendar: DayCalendar = Depends(get_calendar),
):
    return [
        HistoryDayResponse(
            day=group.day,
            completions=[
                CompletionResponse(id=c.id, task_id=c.task_id, completed_at=c.completed_at)
                for c in group.completions
            ],
        )
        for group in get_history(db, calendar)
    ]


@router.get("/history/{day}", response_model=list[CompletionResponse])
def history_day(
    day: date,
    db: Session = Depends(get_db),
    calendar: DayCalendar = Depends(get_calendar),
):
    return [
        CompletionResponse(id=c.id, task_id=c.task_id, completed_at=c.completed_at)
        for c in get_completions_on(db, calendar, day)
    ]


@router.get("/stats/year/{year}", response_model=YearSummaryResponse)
def year_stats(
    year: int,
    db: Session = Depends(get_db),
    calendar: DayCalendar = Depends(get_calendar),
):
    summary = get_year_summary(db, calendar, year)
    return YearSummaryResponse(
        year=summary.year,
        counts_by_day=summary.counts_by_day,
        total_completions=summary.total_completions,
        active_days=summary.active_days,
        best_day=summary.best_day,
        longest_streak=summary.longest_streak,
    )


@router.get("/trends", response_model=TrendsResponse)
def trends(
    task_id: str | None = None,
    db: Session = Depends(get_db),
    calendar: DayCalendar = Depends(get_calendar),
    now: datetime = Depends(get_now),
):
    result = get_completion_trends(db, calendar, now, task_id=task_id)
    monthly = result["monthly_trend"]
    return TrendsResponse(
        weekday_rhythm=result["weekday_rhythm"],
        this_month=monthly.this_month,
        last_month=monthly.last_month,
        change_percent=monthly.change_percent,
    )


@router.get("/category/{name}", response_model=list[TaskResponse])
def category_tasks(
    name: str,
    include_inactive: bool = False,
    db: Session = Depends(get_db),
):
    return [_task_response(t) for t in get_category_tasks(db, name, include_inactive=include_inactive)]


@router.post("/{task_id}/restore")
def restore_task(
    task_id: str,
    db: Session = Depends(get_db),
    calendar: DayCalendar = Depends(get_calendar),
):
    try:
        RestoreTaskUseCase(db, calendar).execute(task_id)
    except TaskNotFoundError as e:
        raise _not_found(e)
    return {"ok": True}


@router.get("/{task_id}/stats", response_model=TaskStatsResponse)
def task_stats(
    task_id: str,
    db: Session = Depends(get_db),
    calendar: DayCalendar = Depends(get_calendar),
    now: datetime = Depends(get_now),
):
    try:
        stats = get_task_stats(db, calendar, task_id, now)
    except TaskNotFoundError as e:
        raise _not_found(e)
    return TaskStatsResponse(
        task_id=task_id,
        total_completions=stats.total_completions,
        current_streak=stats.current_streak,
        completion_rate=stats.completion_rate,
        first_completed_at=stats.first_completed_at,
    )
