# tests/test_cache.py

import pytest

from taskhub.db import Cache
from taskhub.errors import PersistenceError

from .fakes import FakeClock, MemoryTable


def test_put_then_get_returns_payload(cache: Cache) -> None:
    cache.put("users", [{"id": 1, "name": "A"}], 300)

    entry = cache.get("users")

    assert entry is not None
    assert entry.data == [{"id": 1, "name": "A"}]
    assert entry.key == "users"


def test_get_absent_is_miss(cache: Cache) -> None:
    assert cache.get("users") is None


def test_entry_expires_after_ttl(cache: Cache, clock: FakeClock) -> None:
    clock.now = 1000.0
    cache.put("users", [1, 2], 300)

    clock.now = 1299.0
    assert cache.get("users") is not None

    # Valid only strictly before expires_at.
    clock.now = 1300.0
    assert cache.get("users") is None


def test_expired_row_is_left_in_storage(cache: Cache, clock: FakeClock, table: MemoryTable) -> None:
    cache.put("users", [], 10)
    clock.advance(60)

    assert cache.get("users") is None
    assert "cache:users" in table.items


def test_empty_payload_is_a_hit(cache: Cache) -> None:
    cache.put("users", [], 300)
    entry = cache.get("users")
    assert entry is not None
    assert entry.data == []


def test_put_overwrites_and_refreshes_expiry(cache: Cache, clock: FakeClock) -> None:
    clock.now = 1000.0
    cache.put("users", ["old"], 100)
    clock.now = 1050.0
    cache.put("users", ["new"], 100)

    clock.now = 1120.0
    entry = cache.get("users")
    assert entry is not None
    assert entry.data == ["new"]
    assert entry.expires_at == 1150


def test_rows_are_namespaced(cache: Cache, table: MemoryTable) -> None:
    cache.put("users", {"a": 1}, 300)
    assert list(table.items) == ["cache:users"]


def test_backend_failure_propagates(table: MemoryTable, clock: FakeClock) -> None:
    cache = Cache(table, clock=clock)
    table.fail = True
    with pytest.raises(PersistenceError):
        cache.put("users", [], 300)
    with pytest.raises(PersistenceError):
        cache.get("users")
