"""Task API router."""

from fastapi import APIRouter, HTTPException, Response, status

from ..deps import TaskServiceDep
from ..models import (
    DownloadResponse,
    Task,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
    UploadRequest,
    UploadResponse,
)
from ..services import TaskWrite

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


def task_not_found(task_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"Task with ID {task_id} not found",
    )


def write_response(result: TaskWrite) -> TaskResponse:
    """Shape a task write, adding the upload URL when one was minted."""
    if result.upload is None:
        return TaskResponse(task=result.task)
    return TaskResponse(
        task=result.task,
        upload_url=result.upload.upload_url,
        file_key=result.upload.file_key,
    )


# =============================================================================
# Static routes - Must be defined BEFORE /{task_id} routes
# =============================================================================


@router.post("/upload", response_model=UploadResponse)
def create_upload_url(body: UploadRequest, service: TaskServiceDep):
    """Generate a pre-signed URL for a file upload."""
    return service.create_upload_target(body.file_type)


# =============================================================================
# REST API Endpoints (JSON)
# =============================================================================


@router.get("", response_model=TaskListResponse, response_model_exclude_none=True)
def list_tasks(service: TaskServiceDep):
    """Get all tasks."""
    tasks = service.list_tasks()
    return TaskListResponse(tasks=tasks, count=len(tasks))


@router.get("/{task_id}", response_model=Task, response_model_exclude_none=True)
def get_task(task_id: str, service: TaskServiceDep):
    """Get a task by ID."""
    task = service.get_task(task_id)
    if task is None:
        raise task_not_found(task_id)
    return task


@router.post(
    "",
    response_model=TaskResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
)
def create_task(body: TaskCreate, service: TaskServiceDep):
    """Create a new task, optionally with an upload URL for its attachment."""
    return write_response(service.create_task(body))


@router.api_route(
    "/{task_id}",
    methods=["PUT", "PATCH"],
    response_model=TaskResponse,
    response_model_exclude_none=True,
)
def update_task(task_id: str, body: TaskUpdate, service: TaskServiceDep):
    """Update any subset of a task's fields."""
    result = service.update_task(task_id, body)
    if result is None:
        raise task_not_found(task_id)
    return write_response(result)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_task(task_id: str, service: TaskServiceDep):
    """Delete a task and its attachment."""
    if service.delete_task(task_id) is None:
        raise task_not_found(task_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{task_id}/download", response_model=DownloadResponse)
def get_download_url(task_id: str, service: TaskServiceDep):
    """Generate a pre-signed URL to download a task's attachment."""
    url = service.download_url(task_id)
    if url is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Task with ID {task_id} has no attachment",
        )
    return DownloadResponse(download_url=url, expires_in=service.storage.expires_in)
