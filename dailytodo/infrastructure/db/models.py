"""
SQLAlchemy ORM models (task templates + completion log)
"""
from datetime import date as date_type, datetime

from sqlalchemy import Boolean, Date, ForeignKey, Index, Integer, String, Text, TIMESTAMP, func
from sqlalchemy.orm import Mapped, mapped_column

from dailytodo.infrastructure.db.session import Base


class TaskTemplateModel(Base):
    """Task templates: one-time and recurring"""
    __tablename__ = "task_templates"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str | None] = mapped_column(String(128), nullable=True)

    recurrence_type: Mapped[str] = mapped_column(String(16), nullable=False, server_default="none")  # none/daily/weekly/monthly
    selected_weekdays: Mapped[str | None] = mapped_column(String(64), nullable=True)  # "2,4,6" (1=Sun..7=Sat)
    selected_month_days: Mapped[str | None] = mapped_column(String(128), nullable=True)  # "1,15"

    start_date: Mapped[date_type | None] = mapped_column(Date, nullable=True)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, server_default="0")
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, server_default="true")

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True), server_default=func.now(), nullable=False
    )


class TaskCompletionModel(Base):
    """Completion log: one row per 'done' event, stored in UTC"""
    __tablename__ = "task_completions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    task_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("task_templates.id", ondelete="CASCADE"), nullable=False, index=True
    )
    completed_at: Mapped[datetime] = mapped_column(TIMESTAMP(timezone=True), nullable=False)

    __table_args__ = (
        Index("ix_task_completions_task_time", "task_id", "completed_at"),
    )
