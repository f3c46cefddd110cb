"""TTL cache stored in the same key-value table as tasks."""

import json
import logging
import time
from typing import Any, Callable

from ..models import CACHE_KEY_PREFIX, CacheEntry
from .table import KeyValueTable

logger = logging.getLogger(__name__)


class Cache:
    """
    Cache-aside storage with lazy expiry.

    Callers populate the cache on a miss; nothing here fetches, refreshes or
    evicts. Expired rows stay in the table and are simply read as misses.
    """

    def __init__(self, table: KeyValueTable, clock: Callable[[], float] = time.time):
        self._table = table
        self._clock = clock

    @staticmethod
    def _row_id(key: str) -> str:
        return f"{CACHE_KEY_PREFIX}{key}"

    def put(self, key: str, payload: Any, ttl_seconds: int) -> CacheEntry:
        """Store `payload` under `key` for `ttl_seconds`, overwriting any entry."""
        expires_at = int(self._clock()) + ttl_seconds
        self._table.put_item(
            {
                "id": self._row_id(key),
                # JSON text keeps any payload shape storable in every backend.
                "data": json.dumps(payload),
                "expires_at": expires_at,
            }
        )
        logger.debug("Cache put key=%s expires_at=%s", key, expires_at)
        return CacheEntry(id=self._row_id(key), data=payload, expires_at=expires_at)

    def get(self, key: str) -> CacheEntry | None:
        """Return the live entry for `key`, or None on a miss or expiry."""
        item = self._table.get_item(self._row_id(key))
        if item is None:
            logger.debug("Cache miss key=%s", key)
            return None

        entry = CacheEntry(
            id=item["id"],
            data=json.loads(item["data"]),
            expires_at=int(item["expires_at"]),
        )
        if not entry.is_valid(self._clock()):
            logger.debug("Cache expired key=%s expires_at=%s", key, entry.expires_at)
            return None

        logger.debug("Cache hit key=%s", key)
        return entry
