"""Task operations that combine the task store with attachment storage."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..db import TaskStore
from ..errors import ObjectStorageError
from ..models import Task, TaskCreate, TaskUpdate, UploadResponse, UploadTarget
from .storage import ObjectStorage, key_from_url

logger = logging.getLogger(__name__)


class CleanupOutcome(str, Enum):
    """Result of removing a deleted task's attachment."""

    SUCCEEDED = "succeeded"
    FAILED_IGNORED = "failed-ignored"


@dataclass(frozen=True)
class AttachmentCleanup:
    task_id: str
    file_url: str
    outcome: CleanupOutcome
    error: str | None = None


@dataclass(frozen=True)
class TaskDeletion:
    task_id: str
    cleanup: AttachmentCleanup | None = None


@dataclass(frozen=True)
class TaskWrite:
    task: Task
    upload: UploadTarget | None = None


def log_cleanup(cleanup: AttachmentCleanup) -> None:
    """Default cleanup hook: report the outcome in the service log."""
    if cleanup.outcome is CleanupOutcome.FAILED_IGNORED:
        logger.warning(
            "Attachment cleanup failed for task %s (%s): %s",
            cleanup.task_id,
            cleanup.file_url,
            cleanup.error,
        )
    else:
        logger.info("Attachment removed for task %s", cleanup.task_id)


class TaskService:
    """
    Task CRUD plus attachment handling.

    When a write asks for a file upload, the upload URL is minted first and
    the object's public URL is stored on the task. Deleting a task makes one
    best-effort attempt to delete its attachment; a storage failure there is
    passed to `on_cleanup` and does not stop the task deletion.
    """

    def __init__(
        self,
        store: TaskStore,
        storage: ObjectStorage,
        on_cleanup: Callable[[AttachmentCleanup], None] = log_cleanup,
    ):
        self.store = store
        self.storage = storage
        self._on_cleanup = on_cleanup

    def _mint_upload(self, file_type: str, fields: dict) -> UploadTarget:
        upload = self.storage.generate_upload_target(file_type)
        fields["file_url"] = self.storage.public_url(upload.file_key)
        return upload

    def create_task(self, payload: TaskCreate) -> TaskWrite:
        fields = payload.task_fields()
        upload = self._mint_upload(payload.file_type, fields) if payload.wants_upload else None
        return TaskWrite(task=self.store.create(fields), upload=upload)

    def list_tasks(self) -> list[Task]:
        return self.store.list_all()

    def get_task(self, task_id: str) -> Task | None:
        return self.store.get_by_id(task_id)

    def update_task(self, task_id: str, payload: TaskUpdate) -> TaskWrite | None:
        """Returns None when the task does not exist; no upload URL is minted then."""
        if self.store.get_by_id(task_id) is None:
            return None
        fields = payload.task_fields()
        upload = self._mint_upload(payload.file_type, fields) if payload.wants_upload else None
        task = self.store.update(task_id, fields)
        if task is None:
            return None
        return TaskWrite(task=task, upload=upload)

    def delete_task(self, task_id: str) -> TaskDeletion | None:
        """Delete a task and, best effort, its attachment. None if not found."""
        task = self.store.get_by_id(task_id)
        if task is None:
            return None

        cleanup = None
        if task.file_url:
            cleanup = self._remove_attachment(task)

        if not self.store.delete(task_id):
            # Removed concurrently between the lookup and the delete.
            return None
        return TaskDeletion(task_id=task_id, cleanup=cleanup)

    def _remove_attachment(self, task: Task) -> AttachmentCleanup:
        try:
            self.storage.delete(task.file_url)
        except ObjectStorageError as e:
            cleanup = AttachmentCleanup(
                task_id=task.id,
                file_url=task.file_url,
                outcome=CleanupOutcome.FAILED_IGNORED,
                error=e.message,
            )
        else:
            cleanup = AttachmentCleanup(
                task_id=task.id, file_url=task.file_url, outcome=CleanupOutcome.SUCCEEDED
            )
        self._on_cleanup(cleanup)
        return cleanup

    def create_upload_target(self, file_type: str) -> UploadResponse:
        """Stand-alone upload URL, for clients that attach a file later."""
        upload = self.storage.generate_upload_target(file_type)
        return UploadResponse(
            upload_url=upload.upload_url,
            file_key=upload.file_key,
            file_url=self.storage.public_url(upload.file_key),
        )

    def download_url(self, task_id: str) -> str | None:
        """Pre-signed read URL for a task's attachment, or None."""
        task = self.store.get_by_id(task_id)
        if task is None or not task.file_url:
            return None
        return self.storage.generate_download_target(key_from_url(task.file_url))
