"""Settings loaded from environment variables (and a local .env file)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

BACKEND_SQLITE = "sqlite"
BACKEND_DYNAMODB = "dynamodb"

# Required only when tasks live in DynamoDB; SQLite runs without AWS.
DYNAMODB_REQUIRED_ENV = (
    "AWS_REGION",
    "AWS_ACCESS_KEY_ID",
    "AWS_SECRET_ACCESS_KEY",
    "DYNAMODB_TABLE_NAME",
    "S3_BUCKET_NAME",
)


def _env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _env_optional(name: str) -> str | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class Settings:
    """Process configuration. Build once at startup with `Settings.from_env()`."""

    storage_backend: str = BACKEND_SQLITE
    database_path: Path = Path("tasks.db")
    aws_region: str = "us-east-1"
    dynamodb_table_name: str = "tasks"
    dynamodb_endpoint_url: str | None = None
    s3_bucket_name: str = "task-attachments"
    s3_endpoint_url: str | None = None
    external_api_url: str = "https://jsonplaceholder.typicode.com"
    api_cache_ttl: int = 300
    external_api_timeout: float = 10.0
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> "Settings":
        """Read settings from the environment, loading .env first if present."""
        if dotenv:
            load_dotenv(override=False)
        return cls(
            storage_backend=_env("TASKHUB_STORAGE_BACKEND", BACKEND_SQLITE).lower(),
            database_path=Path(_env("TASKHUB_DATABASE_PATH", "tasks.db")).expanduser(),
            aws_region=_env("AWS_REGION", "us-east-1"),
            dynamodb_table_name=_env("DYNAMODB_TABLE_NAME", "tasks"),
            dynamodb_endpoint_url=_env_optional("DYNAMODB_ENDPOINT_URL"),
            s3_bucket_name=_env("S3_BUCKET_NAME", "task-attachments"),
            s3_endpoint_url=_env_optional("S3_ENDPOINT_URL"),
            external_api_url=_env(
                "EXTERNAL_API_URL", "https://jsonplaceholder.typicode.com"
            ).rstrip("/"),
            api_cache_ttl=_env_int("API_CACHE_TTL", 300),
            external_api_timeout=_env_float("EXTERNAL_API_TIMEOUT", 10.0),
            log_level=_env("LOG_LEVEL", "INFO").upper(),
            host=_env("HOST", "0.0.0.0"),
            port=_env_int("PORT", 8000),
        )

    def validate(self) -> None:
        """Raise ValueError if the configuration cannot start the service."""
        if self.storage_backend not in (BACKEND_SQLITE, BACKEND_DYNAMODB):
            raise ValueError(
                f"Unknown TASKHUB_STORAGE_BACKEND: {self.storage_backend!r} "
                f"(expected {BACKEND_SQLITE!r} or {BACKEND_DYNAMODB!r})"
            )
        if self.api_cache_ttl <= 0:
            raise ValueError("API_CACHE_TTL must be a positive number of seconds")
        if self.storage_backend == BACKEND_DYNAMODB:
            missing = [name for name in DYNAMODB_REQUIRED_ENV if not os.getenv(name)]
            if missing:
                raise ValueError(
                    f"Missing required environment variables: {', '.join(missing)}"
                )
