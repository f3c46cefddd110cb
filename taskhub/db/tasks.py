"""Task persistence on top of a key-value table."""

import logging
import time
from typing import Any, Callable

from ulid import ULID

from ..models import CACHE_KEY_PREFIX, Task, TaskStatus
from ..models.task import TASK_WRITABLE_FIELDS
from .table import KeyValueTable

logger = logging.getLogger(__name__)


def now_ms(clock: Callable[[], float] = time.time) -> int:
    """Current time in epoch milliseconds."""
    return int(clock() * 1000)


class TaskStore:
    """
    CRUD for tasks.

    Not found is a return value (None / False), never an exception.
    Backend failures propagate as PersistenceError without retries.

    Updates are attribute patches: only the supplied fields and
    `updated_at` are written, everything else stays as stored.
    """

    def __init__(self, table: KeyValueTable, clock: Callable[[], float] = time.time):
        self._table = table
        self._clock = clock

    def create(self, data: dict[str, Any]) -> Task:
        """Create a new task with a fresh id and timestamps."""
        now = now_ms(self._clock)
        fields = {k: v for k, v in data.items() if k in TASK_WRITABLE_FIELDS and v is not None}
        record = {
            **fields,
            "id": str(ULID()),
            "status": TaskStatus(fields.get("status") or TaskStatus.PENDING).value,
            "created_at": now,
            "updated_at": now,
        }
        # Validate before writing so an incomplete record is never stored.
        task = Task.model_validate(record)
        self._table.put_item(task.model_dump(mode="json", exclude_none=True))
        logger.info("Created task %s", task.id)
        return task

    def list_all(self) -> list[Task]:
        """Get all tasks, in no particular order."""
        return [
            Task.model_validate(item)
            for item in self._table.scan()
            if not str(item.get("id", "")).startswith(CACHE_KEY_PREFIX)
        ]

    def get_by_id(self, task_id: str) -> Task | None:
        """Get a task by ID."""
        if task_id.startswith(CACHE_KEY_PREFIX):
            return None
        item = self._table.get_item(task_id)
        return Task.model_validate(item) if item else None

    def update(self, task_id: str, changes: dict[str, Any]) -> Task | None:
        """Patch the supplied fields of a task and refresh `updated_at`."""
        existing = self.get_by_id(task_id)
        if existing is None:
            return None

        patch = {k: v for k, v in changes.items() if k in TASK_WRITABLE_FIELDS and v is not None}
        if "status" in patch:
            patch["status"] = TaskStatus(patch["status"]).value
        # Strictly after the stored value even within the same millisecond.
        patch["updated_at"] = max(now_ms(self._clock), existing.updated_at + 1)

        item = self._table.update_item(task_id, patch)
        if item is None:
            # Deleted between the lookup and the write.
            return None
        logger.info("Updated task %s fields=%s", task_id, sorted(patch))
        return Task.model_validate(item)

    def delete(self, task_id: str) -> bool:
        """Delete a task by ID. Returns False if it did not exist."""
        if self.get_by_id(task_id) is None:
            return False
        self._table.delete_item(task_id)
        logger.info("Deleted task %s", task_id)
        return True
