"""FastAPI dependencies resolving the components built at startup."""

from typing import Annotated

from fastapi import Depends, Request

from .services import ExternalCollection, TaskService


def get_task_service(request: Request) -> TaskService:
    return request.app.state.task_service


def get_users(request: Request) -> ExternalCollection:
    return request.app.state.users


TaskServiceDep = Annotated[TaskService, Depends(get_task_service)]
UsersDep = Annotated[ExternalCollection, Depends(get_users)]
