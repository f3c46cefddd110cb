# tests/conftest.py

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from taskhub.config import Settings
from taskhub.db import Cache, TaskStore
from taskhub.main import create_app
from taskhub.services import ExternalCollection, ObjectStorage, TaskService

from .fakes import FakeClock, FakeRemote, FakeS3Client, MemoryTable

USERS = [
    {"id": 1, "name": "Leanne Graham", "username": "Bret", "email": "Sincere@april.biz"},
    {"id": 2, "name": "Ervin Howell", "username": "Antonette", "email": "Shanna@melissa.tv"},
]


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def table() -> MemoryTable:
    return MemoryTable()


@pytest.fixture()
def store(table: MemoryTable, clock: FakeClock) -> TaskStore:
    return TaskStore(table, clock=clock)


@pytest.fixture()
def cache(table: MemoryTable, clock: FakeClock) -> Cache:
    return Cache(table, clock=clock)


@pytest.fixture()
def s3() -> FakeS3Client:
    return FakeS3Client()


@pytest.fixture()
def storage(s3: FakeS3Client) -> ObjectStorage:
    return ObjectStorage(s3, bucket="task-attachments", region="ap-south-1")


@pytest.fixture()
def cleanups() -> list:
    """Collects attachment cleanup outcomes reported by the task service."""
    return []


@pytest.fixture()
def service(store: TaskStore, storage: ObjectStorage, cleanups: list) -> TaskService:
    return TaskService(store, storage, on_cleanup=cleanups.append)


@pytest.fixture()
def remote() -> FakeRemote:
    return FakeRemote(users=[dict(u) for u in USERS])


@pytest.fixture()
def users(remote: FakeRemote, cache: Cache) -> ExternalCollection:
    return ExternalCollection(remote.client(), cache, collection="users", ttl_seconds=300)


@pytest.fixture()
def client(table: MemoryTable, s3: FakeS3Client, remote: FakeRemote) -> Iterator[TestClient]:
    """HTTP client against an app wired entirely with fakes."""
    app = create_app(
        Settings(s3_bucket_name="task-attachments", aws_region="ap-south-1"),
        table=table,
        s3_client=s3,
        http_client=remote.client(),
    )
    with TestClient(app) as test_client:
        yield test_client
