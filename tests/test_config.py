# tests/test_config.py

from pathlib import Path

import pytest

from taskhub.config import Settings


def test_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "TASKHUB_STORAGE_BACKEND",
        "TASKHUB_DATABASE_PATH",
        "AWS_REGION",
        "EXTERNAL_API_URL",
        "API_CACHE_TTL",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = Settings.from_env(dotenv=False)

    assert settings.storage_backend == "sqlite"
    assert settings.database_path == Path("tasks.db")
    assert settings.aws_region == "us-east-1"
    assert settings.external_api_url == "https://jsonplaceholder.typicode.com"
    assert settings.api_cache_ttl == 300
    settings.validate()


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_CACHE_TTL", "60")
    monkeypatch.setenv("EXTERNAL_API_URL", "https://remote.example/")
    monkeypatch.setenv("S3_BUCKET_NAME", "bucket")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = Settings.from_env(dotenv=False)

    assert settings.api_cache_ttl == 60
    assert settings.external_api_url == "https://remote.example"
    assert settings.s3_bucket_name == "bucket"
    assert settings.log_level == "DEBUG"


def test_bad_integer_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_CACHE_TTL", "five minutes")
    assert Settings.from_env(dotenv=False).api_cache_ttl == 300


def test_dynamodb_requires_aws_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TASKHUB_STORAGE_BACKEND", "dynamodb")
    monkeypatch.delenv("AWS_SECRET_ACCESS_KEY", raising=False)

    with pytest.raises(ValueError, match="AWS_SECRET_ACCESS_KEY"):
        Settings.from_env(dotenv=False).validate()


def test_unknown_backend_is_rejected() -> None:
    with pytest.raises(ValueError):
        Settings(storage_backend="postgres").validate()
