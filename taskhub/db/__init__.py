"""Database package."""

from .cache import Cache
from .dynamo import DynamoTable
from .sqlite import SQLiteTable
from .table import KeyValueTable
from .tasks import TaskStore

__all__ = [
    "KeyValueTable",
    "SQLiteTable",
    "DynamoTable",
    "TaskStore",
    "Cache",
]
