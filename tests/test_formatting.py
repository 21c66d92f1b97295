from __future__ import annotations

from datetime import date, datetime, timezone

from tasklist.domain.entities import TaskEntity, TaskStats
from tasklist.domain.enums import Priority, Theme
from tasklist.ui.formatting import due_date_text, format_due_date, is_overdue, stats_text, theme_icon

TODAY = date(2026, 1, 10)


def _task(due_date: date | None, completed: bool = False) -> TaskEntity:
    created = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return TaskEntity(
        id="t1",
        text="Pay rent",
        completed=completed,
        created_at=created,
        completed_at=created if completed else None,
        due_date=due_date,
        priority=Priority.HIGH,
    )


def test_format_due_date() -> None:
    assert format_due_date(date(2026, 1, 5)) == "Jan 5, 2026"
    assert format_due_date(date(2025, 12, 25)) == "Dec 25, 2025"


def test_overdue_only_for_past_pending_tasks() -> None:
    assert is_overdue(_task(date(2026, 1, 9)), TODAY) is True
    assert is_overdue(_task(date(2026, 1, 10)), TODAY) is False
    assert is_overdue(_task(date(2026, 1, 11)), TODAY) is False
    assert is_overdue(_task(date(2026, 1, 9), completed=True), TODAY) is False
    assert is_overdue(_task(None), TODAY) is False


def test_due_date_text() -> None:
    assert due_date_text(_task(None), TODAY) == ""
    assert due_date_text(_task(date(2026, 1, 12)), TODAY) == "📅 Jan 12, 2026"
    assert due_date_text(_task(date(2026, 1, 2)), TODAY) == "📅 Jan 2, 2026 (Overdue)"


def test_stats_text() -> None:
    assert stats_text(TaskStats(total=3, completed=1, pending=2)) == "Total: 3 • Completed: 1 • Pending: 2"


def test_theme_icon_shows_the_other_mode() -> None:
    assert theme_icon(Theme.DARK) == "☀️"
    assert theme_icon(Theme.LIGHT) == "🌙"
