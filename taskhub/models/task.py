"""Pydantic models for tasks."""

from enum import Enum

from pydantic import BaseModel, Field, model_validator


class TaskStatus(str, Enum):
    """Task status enumeration."""

    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


# Fields a caller may write; everything else is owned by the store.
TASK_WRITABLE_FIELDS = ("title", "description", "status", "file_url")


class Task(BaseModel):
    """A stored task. Timestamps are epoch milliseconds."""

    id: str
    title: str
    description: str
    status: TaskStatus = TaskStatus.PENDING
    file_url: str | None = None
    created_at: int
    updated_at: int


class FileUploadRequest(BaseModel):
    """Optional request for a pre-signed upload URL alongside a task write."""

    request_file_upload: bool = False
    file_type: str | None = Field(None, min_length=1, max_length=255)

    @property
    def wants_upload(self) -> bool:
        return self.request_file_upload and bool(self.file_type)


class TaskCreate(FileUploadRequest):
    """Request model for creating a task."""

    title: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    status: TaskStatus | None = None
    file_url: str | None = Field(None, min_length=1, max_length=2048)

    def task_fields(self) -> dict:
        """Return only the task attributes, without upload options."""
        return self.model_dump(
            mode="json", include=set(TASK_WRITABLE_FIELDS), exclude_none=True
        )


class TaskUpdate(FileUploadRequest):
    """Request model for updating a task. At least one field is required."""

    title: str | None = Field(None, min_length=1, max_length=100)
    description: str | None = Field(None, min_length=1, max_length=1000)
    status: TaskStatus | None = None
    file_url: str | None = Field(None, min_length=1, max_length=2048)

    @model_validator(mode="after")
    def _require_a_change(self) -> "TaskUpdate":
        if not self.task_fields() and not self.wants_upload:
            raise ValueError("at least one field must be provided")
        return self

    def task_fields(self) -> dict:
        """Return only the task attributes that were supplied."""
        return self.model_dump(
            mode="json", include=set(TASK_WRITABLE_FIELDS), exclude_none=True
        )


class UploadTarget(BaseModel):
    """A pre-signed upload URL and the object key it writes to."""

    upload_url: str
    file_key: str


class UploadResponse(UploadTarget):
    """Response model for a stand-alone upload URL request."""

    file_url: str


class UploadRequest(BaseModel):
    """Request model for a stand-alone upload URL."""

    file_type: str = Field(..., min_length=1, max_length=255)


class TaskResponse(BaseModel):
    """Response model for a task write, with an upload URL when one was requested."""

    task: Task
    upload_url: str | None = None
    file_key: str | None = None


class TaskListResponse(BaseModel):
    """Response model for task list."""

    tasks: list[Task]
    count: int


class DownloadResponse(BaseModel):
    """Response model for a task attachment download URL."""

    download_url: str
    expires_in: int
