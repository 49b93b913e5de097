"""Completion record - one timestamped 'done' event for a task template"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class Completion:
    task_id: str
    completed_at: datetime
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
