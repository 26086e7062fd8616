"""Data models for the task service."""

from task_service.models.task import Task, TaskCreate, TaskCreated

__all__ = [
    "Task",
    "TaskCreate",
    "TaskCreated",
]
