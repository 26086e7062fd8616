"""In-memory task store with tag and due-date indexes."""

import threading
from collections.abc import Iterable
from datetime import date, datetime

from task_service.models import Task


class TaskNotFoundError(LookupError):
    """Raised when an operation targets an id the store does not hold."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"task with id={task_id} not found")
        self.task_id = task_id


class TaskStore:
    """Thread-safe in-memory repository of tasks.

    Maintains:
    - tasks keyed by a monotonically increasing integer id
    - a tag index (tag -> ids currently carrying it)
    - a due index (calendar day -> ids due that day)

    Every operation runs under one lock, so readers never observe the task
    map and the indexes out of step. The due day is taken from the stored
    timestamp in its own offset; tasks without a due timestamp are not in
    the due index.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._tasks: dict[int, Task] = {}
        self._tag_index: dict[str, set[int]] = {}
        self._due_index: dict[date, set[int]] = {}
        self._next_id = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._tasks)

    def create_task(
        self,
        text: str,
        tags: Iterable[str] = (),
        due: datetime | None = None,
    ) -> int:
        """Store a new task and index it.

        Args:
            text: Task content
            tags: Tags in the order given (duplicates are kept on the task)
            due: Due timestamp, or None when unset

        Returns:
            The id assigned to the new task
        """
        with self._lock:
            task_id = self._next_id
            self._next_id += 1

            task = Task(id=task_id, text=text, tags=list(tags), due=due)
            self._tasks[task_id] = task

            for tag in task.tags:
                self._tag_index.setdefault(tag, set()).add(task_id)
            if due is not None:
                self._due_index.setdefault(due.date(), set()).add(task_id)

            return task_id

    def get_task(self, task_id: int) -> Task:
        """Return the task with the given id.

        Raises:
            TaskNotFoundError: If no task has this id
        """
        with self._lock:
            task = self._tasks.get(task_id)
            if task is None:
                raise TaskNotFoundError(task_id)
            return task.model_copy(deep=True)

    def get_all_tasks(self) -> list[Task]:
        """Return every stored task, ordered by id."""
        with self._lock:
            return self._collect(self._tasks.keys())

    def delete_task(self, task_id: int) -> None:
        """Remove a task and drop it from every index.

        Raises:
            TaskNotFoundError: If no task has this id (nothing is changed)
        """
        with self._lock:
            task = self._tasks.pop(task_id, None)
            if task is None:
                raise TaskNotFoundError(task_id)

            for tag in set(task.tags):
                self._discard(self._tag_index, tag, task_id)
            if task.due is not None:
                self._discard(self._due_index, task.due.date(), task_id)

    def delete_all_tasks(self) -> None:
        """Remove every task and clear both indexes.

        The id counter keeps its value so ids are not handed out twice.
        """
        with self._lock:
            self._tasks.clear()
            self._tag_index.clear()
            self._due_index.clear()

    def get_tasks_by_tag(self, tag: str) -> list[Task]:
        """Return tasks carrying the tag, ordered by id."""
        with self._lock:
            return self._collect(self._tag_index.get(tag, ()))

    def get_tasks_by_due_date(self, year: int, month: int, day: int) -> list[Task]:
        """Return tasks due on the given calendar day, ordered by id.

        A triple that is not a real date (e.g. February 30) matches nothing.
        """
        try:
            day_key = date(year, month, day)
        except (ValueError, OverflowError):
            return []

        with self._lock:
            return self._collect(self._due_index.get(day_key, ()))

    def _collect(self, task_ids: Iterable[int]) -> list[Task]:
        # Caller holds the lock.
        return [self._tasks[task_id].model_copy(deep=True) for task_id in sorted(task_ids)]

    @staticmethod
    def _discard(index: dict, key: object, task_id: int) -> None:
        bucket = index.get(key)
        if bucket is None:
            return
        bucket.discard(task_id)
        if not bucket:
            del index[key]
