from __future__ import annotations

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Mapping

from sqlalchemy.exc import SQLAlchemyError

from tasklist.config import SETTINGS
from tasklist.domain.entities import TaskEntity, TaskStats
from tasklist.domain.enums import Priority, TaskFilter
from tasklist.domain.errors import CorruptPayloadError, ValidationError
from tasklist.domain.filters import matches, parse_filter
from tasklist.infra.serialization import dump_tasks, load_tasks_payload, parse_due_date
from tasklist.infra.storage import KeyValueStorage

logger = logging.getLogger(__name__)

TaskObserver = Callable[[list[TaskEntity]], None]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_task_id() -> str:
    return uuid.uuid4().hex


class TaskStore:
    """Ordered, most-recent-first task list mirrored to a storage slot.

    Every successful mutation is written to storage and then pushed to the
    observers before the call returns. Observers receive a fresh list and must
    not call mutating methods from inside the callback.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = SETTINGS.tasks_storage_key,
        clock: Callable[[], datetime] = utcnow,
        id_factory: Callable[[], str] = new_task_id,
    ) -> None:
        self._storage = storage
        self._key = key
        self._clock = clock
        self._id_factory = id_factory
        self._tasks: list[TaskEntity] = []
        self._observers: list[TaskObserver] = []
        self._issued_ids: set[str] = set()

    def subscribe(self, callback: TaskObserver) -> Callable[[], None]:
        self._observers.append(callback)

        def unsubscribe() -> None:
            if callback in self._observers:
                self._observers.remove(callback)

        return unsubscribe

    def get_all_tasks(self) -> list[TaskEntity]:
        return list(self._tasks)

    def get_filtered_tasks(self, task_filter: str | TaskFilter) -> list[TaskEntity]:
        key = parse_filter(task_filter)
        return [task for task in self._tasks if matches(task, key)]

    def add_task(self, data: Mapping) -> TaskEntity:
        text = str(data.get("text") or "").strip()
        if not text:
            raise ValidationError("Task text cannot be empty")

        try:
            priority = Priority(data.get("priority") or Priority.MEDIUM)
        except ValueError as exc:
            raise ValidationError(f"Unknown priority {data.get('priority')!r}") from exc

        # ``dueDate`` is the stored record's name for the same field.
        raw_due = data["due_date"] if "due_date" in data else data.get("dueDate")
        try:
            due_date = parse_due_date(raw_due)
        except ValueError as exc:
            raise ValidationError(f"Bad due date {raw_due!r}") from exc

        task = TaskEntity(
            id=self._next_id(),
            text=text,
            completed=False,
            created_at=self._clock(),
            completed_at=None,
            due_date=due_date,
            priority=priority,
        )
        self._tasks.insert(0, task)
        logger.info("Task added id=%s priority=%s", task.id, task.priority.value)
        self._commit()
        return task

    def toggle_task(self, task_id: str) -> None:
        index = self._index_of(task_id)
        if index is None:
            return
        task = self._tasks[index]
        completed = not task.completed
        self._tasks[index] = replace(
            task,
            completed=completed,
            completed_at=self._clock() if completed else None,
        )
        logger.debug("Task toggled id=%s completed=%s", task_id, completed)
        self._commit()

    def delete_task(self, task_id: str) -> bool:
        remaining = [task for task in self._tasks if task.id != task_id]
        if len(remaining) == len(self._tasks):
            return False
        self._tasks = remaining
        logger.info("Task deleted id=%s", task_id)
        self._commit()
        return True

    def reorder_tasks(self, dragged_id: str, target_id: str) -> bool:
        """Move ``dragged_id`` to the slot ``target_id`` occupies now.

        The dragged task is taken out first and then inserted at the target's
        original index, so moving down lands after the target and moving up
        lands before it.
        """
        if dragged_id == target_id:
            return False
        dragged_index = self._index_of(dragged_id)
        target_index = self._index_of(target_id)
        if dragged_index is None or target_index is None:
            return False

        dragged = self._tasks.pop(dragged_index)
        self._tasks.insert(target_index, dragged)
        logger.debug("Task moved id=%s from=%d to=%d", dragged_id, dragged_index, target_index)
        self._commit()
        return True

    def get_stats(self) -> TaskStats:
        total = len(self._tasks)
        completed = sum(1 for task in self._tasks if task.completed)
        return TaskStats(total=total, completed=completed, pending=total - completed)

    def save_tasks(self) -> None:
        try:
            self._storage.set_item(self._key, dump_tasks(self._tasks))
        except (SQLAlchemyError, OSError, TypeError, ValueError, OverflowError) as exc:
            logger.warning("Could not save tasks to storage: %s", exc)

    def load_tasks(self) -> None:
        try:
            payload = self._storage.get_item(self._key)
            if payload is None:
                return
            tasks = load_tasks_payload(payload)
        except (SQLAlchemyError, OSError, CorruptPayloadError) as exc:
            logger.warning("Could not load tasks from storage: %s", exc)
            self._tasks = []
            return

        self._tasks = tasks
        self._issued_ids.update(task.id for task in tasks)
        logger.info("Loaded %d tasks", len(tasks))
        self._notify()

    def _commit(self) -> None:
        self.save_tasks()
        self._notify()

    def _notify(self) -> None:
        for callback in list(self._observers):
            try:
                callback(self.get_all_tasks())
            except Exception:  # noqa: BLE001
                logger.exception("Task observer %r failed", callback)

    def _index_of(self, task_id: str) -> int | None:
        return next((i for i, task in enumerate(self._tasks) if task.id == task_id), None)

    def _next_id(self) -> str:
        task_id = self._id_factory()
        while task_id in self._issued_ids:
            task_id = self._id_factory()
        self._issued_ids.add(task_id)
        return task_id
