"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

import boto3
import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .config import BACKEND_DYNAMODB, Settings
from .db import Cache, DynamoTable, KeyValueTable, SQLiteTable, TaskStore
from .errors import TaskHubError
from .logging_setup import setup_logging
from .routers import tasks, users
from .services import ExternalCollection, ObjectStorage, TaskService

logger = logging.getLogger(__name__)


def build_table(settings: Settings) -> KeyValueTable:
    """Create the key-value table selected by configuration."""
    if settings.storage_backend == BACKEND_DYNAMODB:
        client = boto3.client(
            "dynamodb",
            region_name=settings.aws_region,
            endpoint_url=settings.dynamodb_endpoint_url,
        )
        return DynamoTable(client, settings.dynamodb_table_name)

    table = SQLiteTable(settings.database_path)
    table.init_db()
    return table


def build_s3_client(settings: Settings):
    return boto3.client(
        "s3",
        region_name=settings.aws_region,
        endpoint_url=settings.s3_endpoint_url,
    )


def build_http_client(settings: Settings) -> httpx.Client:
    return httpx.Client(
        base_url=settings.external_api_url,
        timeout=settings.external_api_timeout,
    )


def create_app(
    settings: Settings | None = None,
    *,
    table: KeyValueTable | None = None,
    s3_client=None,
    http_client: httpx.Client | None = None,
) -> FastAPI:
    """
    Build the application.

    Clients not passed in are created once at startup from `settings` and
    shared by every request. Tests pass fakes for all three.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Wire storage, attachments and the user directory on startup."""
        cfg = settings or Settings.from_env()
        cfg.validate()

        kv_table = table if table is not None else build_table(cfg)
        owns_http = http_client is None
        remote = build_http_client(cfg) if owns_http else http_client
        storage = ObjectStorage(
            s3_client if s3_client is not None else build_s3_client(cfg),
            bucket=cfg.s3_bucket_name,
            region=cfg.aws_region,
        )

        app.state.settings = cfg
        app.state.task_service = TaskService(TaskStore(kv_table), storage)
        app.state.users = ExternalCollection(
            remote, Cache(kv_table), collection="users", ttl_seconds=cfg.api_cache_ttl
        )
        logger.info("taskhub started backend=%s", cfg.storage_backend)
        try:
            yield
        finally:
            if owns_http:
                remote.close()

    app = FastAPI(
        title="taskhub",
        description="Task tracking with file attachments and a cached user directory",
        version="0.1.0",
        lifespan=lifespan,
    )

    @app.exception_handler(TaskHubError)
    async def taskhub_error_handler(request: Request, exc: TaskHubError):
        """Translate core errors into JSON responses."""
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

    @app.get("/health")
    def health():
        """Liveness check."""
        return {"status": "OK"}

    app.include_router(tasks.router)
    app.include_router(users.router)
    return app


app = create_app()


def main():
    """Run the application with uvicorn."""
    import uvicorn

    settings = Settings.from_env()
    setup_logging(settings.log_level)
    uvicorn.run(
        "taskhub.main:app",
        host=settings.host,
        port=settings.port,
        log_config=None,
    )


if __name__ == "__main__":
    main()
