from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import NamedTuple, Optional

from .enums import Priority


@dataclass(frozen=True)
class TaskEntity:
    id: str
    text: str
    completed: bool
    created_at: datetime
    completed_at: Optional[datetime]
    due_date: Optional[date]
    priority: Priority = Priority.MEDIUM


class TaskStats(NamedTuple):
    total: int
    completed: int
    pending: int
