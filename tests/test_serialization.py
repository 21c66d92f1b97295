from __future__ import annotations

import json
from datetime import date, datetime, timezone

import pytest

from tasklist.domain.entities import TaskEntity
from tasklist.domain.enums import Priority
from tasklist.domain.errors import CorruptPayloadError
from tasklist.infra.serialization import (
    dump_tasks,
    load_tasks_payload,
    parse_due_date,
    task_from_record,
    task_to_record,
)


def _task(**overrides) -> TaskEntity:
    values = {
        "id": "1767258000000abc123def",
        "text": "Buy milk",
        "completed": False,
        "created_at": datetime(2026, 1, 1, 9, 0, 0, 123456, tzinfo=timezone.utc),
        "completed_at": None,
        "due_date": None,
        "priority": Priority.MEDIUM,
    }
    values.update(overrides)
    return TaskEntity(**values)


def test_record_uses_stored_field_names() -> None:
    task = _task(
        completed=True,
        completed_at=datetime(2026, 1, 2, 10, 30, tzinfo=timezone.utc),
        due_date=date(2026, 1, 5),
        priority=Priority.HIGH,
    )

    record = task_to_record(task)

    assert record == {
        "id": "1767258000000abc123def",
        "text": "Buy milk",
        "completed": True,
        "createdAt": "2026-01-01T09:00:00.123456Z",
        "completedAt": "2026-01-02T10:30:00Z",
        "dueDate": "2026-01-05",
        "priority": "high",
    }


def test_dump_and_load_preserve_order_and_fields() -> None:
    tasks = [
        _task(id="b", text="Walk dog", due_date=date(2026, 2, 1), priority=Priority.LOW),
        _task(id="a", completed=True, completed_at=datetime(2026, 1, 3, tzinfo=timezone.utc)),
    ]

    payload = dump_tasks(tasks)

    assert isinstance(json.loads(payload), list)
    assert load_tasks_payload(payload) == tasks


def test_dump_keeps_non_ascii_text() -> None:
    payload = dump_tasks([_task(text="Купити молоко ☕")])

    assert "Купити молоко ☕" in payload


def test_legacy_record_without_optional_fields() -> None:
    task = task_from_record({"id": "x", "text": " Old task ", "createdAt": "2025-06-01T12:00:00.000Z"})

    assert task.text == "Old task"
    assert task.completed is False
    assert task.completed_at is None
    assert task.due_date is None
    assert task.priority == Priority.MEDIUM
    assert task.created_at == datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def test_completed_record_without_completion_time_falls_back_to_creation() -> None:
    task = task_from_record(
        {"id": "x", "text": "Done", "completed": True, "createdAt": "2025-06-01T12:00:00Z"}
    )

    assert task.completed_at == task.created_at


def test_pending_record_drops_stale_completion_time() -> None:
    task = task_from_record(
        {
            "id": "x",
            "text": "Reopened",
            "completed": False,
            "completedAt": "2025-06-02T12:00:00Z",
            "createdAt": "2025-06-01T12:00:00Z",
        }
    )

    assert task.completed_at is None


@pytest.mark.parametrize(
    "record",
    [
        "not an object",
        {"text": "No id", "createdAt": "2026-01-01T00:00:00Z"},
        {"id": "x", "text": "   ", "createdAt": "2026-01-01T00:00:00Z"},
        {"id": "x", "text": "A", "createdAt": "2026-01-01T00:00:00Z", "priority": "urgent"},
        {"id": "x", "text": "A", "createdAt": "yesterday"},
        {"id": "x", "text": "A"},
        {"id": "x", "text": "A", "createdAt": "2026-01-01T00:00:00Z", "dueDate": "soon"},
        {"id": "x", "text": "A", "createdAt": "2026-01-01T00:00:00Z", "dueDate": 20260101},
        {"id": "x", "text": "A", "createdAt": "0001-01-01T00:00:00+05:00"},
        {"id": "x", "text": "A", "completed": "false", "createdAt": "2026-01-01T00:00:00Z"},
        {"id": "x", "text": "A", "completed": 1, "createdAt": "2026-01-01T00:00:00Z"},
    ],
)
def test_invalid_records_are_corrupt(record) -> None:
    with pytest.raises(CorruptPayloadError):
        task_from_record(record)


def test_payload_must_be_unique_json_array() -> None:
    with pytest.raises(CorruptPayloadError):
        load_tasks_payload("")
    with pytest.raises(CorruptPayloadError):
        load_tasks_payload('{"tasks": []}')
    with pytest.raises(CorruptPayloadError):
        load_tasks_payload(dump_tasks([_task(id="same"), _task(id="same", text="Other")]))

    assert load_tasks_payload("[]") == []


def test_parse_due_date_inputs() -> None:
    assert parse_due_date(None) is None
    assert parse_due_date("") is None
    assert parse_due_date(date(2026, 1, 5)) == date(2026, 1, 5)
    assert parse_due_date(datetime(2026, 1, 5, 18, 0)) == date(2026, 1, 5)
    assert parse_due_date("2026-01-05") == date(2026, 1, 5)
    assert parse_due_date("2026-01-05T00:00:00.000Z") == date(2026, 1, 5)
    with pytest.raises(ValueError):
        parse_due_date("05/01/2026")


def test_offset_timestamps_load_as_utc() -> None:
    task = task_from_record({"id": "x", "text": "A", "createdAt": "2026-01-01T05:30:00+05:30"})

    assert task.created_at == datetime(2026, 1, 1, tzinfo=timezone.utc)
    assert task.created_at.utcoffset().total_seconds() == 0


def test_deeply_nested_payload_is_corrupt() -> None:
    with pytest.raises(CorruptPayloadError):
        load_tasks_payload("[" * 200_000 + "]" * 200_000)
