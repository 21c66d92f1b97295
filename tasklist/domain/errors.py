from __future__ import annotations


class TaskListError(Exception):
    """Base class for errors raised by the task list."""


class ValidationError(TaskListError):
    """Input rejected before any state change."""


class CorruptPayloadError(TaskListError):
    """Persisted task data could not be decoded."""
