from __future__ import annotations

from datetime import date

from tasklist.domain.entities import TaskEntity, TaskStats
from tasklist.domain.enums import Priority, Theme

PRIORITY_OPTIONS = [
    ("Low", Priority.LOW),
    ("Medium", Priority.MEDIUM),
    ("High", Priority.HIGH),
]

PRIORITY_COLORS = {
    Priority.LOW: "#7CC4A1",
    Priority.MEDIUM: "#E0B25B",
    Priority.HIGH: "#E57B63",
}

FILTERS = [
    ("All", "all"),
    ("Pending", "pending"),
    ("Completed", "completed"),
]


def format_due_date(value: date) -> str:
    return f"{value.strftime('%b')} {value.day}, {value.year}"


def is_overdue(task: TaskEntity, today: date | None = None) -> bool:
    # Due today is not overdue yet.
    if task.completed or task.due_date is None:
        return False
    return task.due_date < (today or date.today())


def due_date_text(task: TaskEntity, today: date | None = None) -> str:
    if task.due_date is None:
        return ""
    text = f"📅 {format_due_date(task.due_date)}"
    if is_overdue(task, today):
        text += " (Overdue)"
    return text


def stats_text(stats: TaskStats) -> str:
    return f"Total: {stats.total} • Completed: {stats.completed} • Pending: {stats.pending}"


def theme_icon(theme: Theme) -> str:
    return "☀️" if theme == Theme.DARK else "🌙"
