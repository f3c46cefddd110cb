"""Models package."""

from .cache import CACHE_KEY_PREFIX, CacheEntry
from .task import (
    DownloadResponse,
    Task,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskStatus,
    TaskUpdate,
    UploadRequest,
    UploadResponse,
    UploadTarget,
)
from .user import User, UserListResponse, UserResponse

__all__ = [
    "CACHE_KEY_PREFIX",
    "CacheEntry",
    "TaskStatus",
    "Task",
    "TaskCreate",
    "TaskUpdate",
    "TaskResponse",
    "TaskListResponse",
    "UploadTarget",
    "UploadRequest",
    "UploadResponse",
    "DownloadResponse",
    "User",
    "UserResponse",
    "UserListResponse",
]
