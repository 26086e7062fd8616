"""Core task storage."""

from task_service.core.task_store import TaskNotFoundError, TaskStore

__all__ = [
    "TaskNotFoundError",
    "TaskStore",
]
