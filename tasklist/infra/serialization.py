"""JSON encoding of the task sequence.

Records use the field names the stored payload has always had
(``createdAt``, ``completedAt``, ``dueDate``), so existing data keeps loading.
"""
from __future__ import annotations

import json
from datetime import date, datetime, timezone
from typing import Any, Iterable

from tasklist.domain.entities import TaskEntity
from tasklist.domain.enums import Priority
from tasklist.domain.errors import CorruptPayloadError


def task_to_record(task: TaskEntity) -> dict[str, Any]:
    return {
        "id": task.id,
        "text": task.text,
        "completed": task.completed,
        "createdAt": _format_timestamp(task.created_at),
        "completedAt": _format_timestamp(task.completed_at) if task.completed_at else None,
        "dueDate": task.due_date.isoformat() if task.due_date else None,
        "priority": task.priority.value,
    }


def task_from_record(record: Any) -> TaskEntity:
    if not isinstance(record, dict):
        raise CorruptPayloadError(f"Task record must be an object, got {type(record).__name__}")

    task_id = record.get("id")
    if not isinstance(task_id, str) or not task_id:
        raise CorruptPayloadError("Task record has no id")

    text = record.get("text")
    if not isinstance(text, str) or not text.strip():
        raise CorruptPayloadError(f"Task {task_id} has empty text")

    completed = record.get("completed", False)
    if not isinstance(completed, bool):
        raise CorruptPayloadError(f"Task {task_id} has a non-boolean completed flag")
    completed_at = _parse_timestamp(record.get("completedAt"), task_id) if completed else None
    if completed and completed_at is None:
        # Older payloads may carry completed without a completion time.
        completed_at = _parse_timestamp(record.get("createdAt"), task_id)

    try:
        priority = Priority(record.get("priority") or Priority.MEDIUM)
    except ValueError as exc:
        raise CorruptPayloadError(f"Task {task_id} has unknown priority") from exc

    created_at = _parse_timestamp(record.get("createdAt"), task_id)
    if created_at is None:
        raise CorruptPayloadError(f"Task {task_id} has no creation time")

    return TaskEntity(
        id=task_id,
        text=text.strip(),
        completed=completed,
        created_at=created_at,
        completed_at=completed_at,
        due_date=_parse_date(record.get("dueDate"), task_id),
        priority=priority,
    )


def dump_tasks(tasks: Iterable[TaskEntity]) -> str:
    return json.dumps([task_to_record(task) for task in tasks], ensure_ascii=False)


def load_tasks_payload(payload: str) -> list[TaskEntity]:
    try:
        records = json.loads(payload)
    except (TypeError, ValueError, RecursionError) as exc:
        raise CorruptPayloadError(f"Stored tasks are not valid JSON: {exc}") from exc
    if not isinstance(records, list):
        raise CorruptPayloadError("Stored tasks must be a JSON array")

    tasks = [task_from_record(record) for record in records]
    seen: set[str] = set()
    for task in tasks:
        if task.id in seen:
            raise CorruptPayloadError(f"Duplicate task id {task.id}")
        seen.add(task.id)
    return tasks


def parse_due_date(value: date | str | None) -> date | None:
    """Accept a date, an ISO ``YYYY-MM-DD`` string, or nothing."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


def _format_timestamp(value: datetime) -> str:
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _parse_timestamp(value: Any, task_id: str) -> datetime | None:
    if value is None:
        return None
    if not isinstance(value, str):
        raise CorruptPayloadError(f"Task {task_id} has a non-string timestamp")
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        # Stored in UTC so the next save cannot overflow.
        return parsed.astimezone(timezone.utc)
    except (ValueError, OverflowError) as exc:
        raise CorruptPayloadError(f"Task {task_id} has a bad timestamp {value!r}") from exc


def _parse_date(value: Any, task_id: str) -> date | None:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise CorruptPayloadError(f"Task {task_id} has a non-string due date")
    try:
        return parse_due_date(value)
    except ValueError as exc:
        raise CorruptPayloadError(f"Task {task_id} has a bad due date {value!r}") from exc
