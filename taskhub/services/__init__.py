"""Services package."""

from .storage import ObjectStorage, key_from_url
from .tasks import (
    AttachmentCleanup,
    CleanupOutcome,
    TaskDeletion,
    TaskService,
    TaskWrite,
)
from .users import ExternalCollection

__all__ = [
    "ObjectStorage",
    "key_from_url",
    "ExternalCollection",
    "TaskService",
    "TaskWrite",
    "TaskDeletion",
    "AttachmentCleanup",
    "CleanupOutcome",
]
