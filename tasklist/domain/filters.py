from __future__ import annotations

from .entities import TaskEntity
from .enums import TaskFilter


def parse_filter(value: str | TaskFilter | None) -> TaskFilter:
    """Map a filter key to a ``TaskFilter``; anything unknown means ``ALL``."""
    try:
        return TaskFilter(value)
    except ValueError:
        return TaskFilter.ALL


def matches(task: TaskEntity, task_filter: TaskFilter) -> bool:
    if task_filter == TaskFilter.PENDING:
        return not task.completed
    if task_filter == TaskFilter.COMPLETED:
        return task.completed
    return True
