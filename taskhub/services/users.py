"""Read-only access to a remote JSON collection, cached in the task table."""

import logging
from typing import Any

import httpx

from ..db import Cache
from ..errors import RemoteUnavailable

logger = logging.getLogger(__name__)

DEFAULT_CACHE_TTL = 300  # 5 minutes


class ExternalCollection:
    """
    `GET /<collection>` and `GET /<collection>/<id>` behind a cache.

    The full collection is cached under the collection name. Point lookups
    are answered from that cached list when possible and are not cached
    themselves. A remote 404 on a point lookup is returned as None.
    """

    def __init__(
        self,
        client: httpx.Client,
        cache: Cache,
        collection: str = "users",
        ttl_seconds: int = DEFAULT_CACHE_TTL,
    ):
        self._client = client
        self._cache = cache
        self.collection = collection
        self._ttl = ttl_seconds

    def _get(self, path: str) -> httpx.Response:
        try:
            return self._client.get(path)
        except httpx.HTTPError as e:
            logger.error("External API request %s failed: %s", path, e)
            raise RemoteUnavailable(
                f"Failed to fetch {self.collection} from external service"
            ) from e

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            logger.error("External API returned invalid JSON for %s", response.url)
            raise RemoteUnavailable(
                f"Failed to fetch {self.collection} from external service"
            ) from e

    def _check_record(self, record: Any) -> dict[str, Any]:
        """Records must be objects with an integer `id`."""
        record_id = record.get("id") if isinstance(record, dict) else None
        if not isinstance(record_id, int) or isinstance(record_id, bool):
            logger.error("External API returned a malformed %s record", self.collection)
            raise RemoteUnavailable(
                f"Unexpected {self.collection} payload from external service"
            )
        return record

    def list_all(self) -> list[dict[str, Any]]:
        """Return the whole collection, from cache when fresh."""
        cached = self._cache.get(self.collection)
        if cached is not None:
            logger.info("Returning %s from cache", self.collection)
            return cached.data

        logger.info("Fetching %s from external API", self.collection)
        response = self._get(f"/{self.collection}")
        if not response.is_success:
            logger.error(
                "External API error: %s %s", response.status_code, response.reason_phrase
            )
            raise RemoteUnavailable(
                f"Failed to fetch {self.collection} from external service"
            )

        items = self._json(response)
        if not isinstance(items, list):
            raise RemoteUnavailable(
                f"Unexpected {self.collection} payload from external service"
            )
        items = [self._check_record(item) for item in items]
        self._cache.put(self.collection, items, self._ttl)
        return items

    def get_by_id(self, item_id: int | str) -> dict[str, Any] | None:
        """Return one record, or None if the remote API reports it absent."""
        cached = self._cache.get(self.collection)
        if cached is not None:
            for item in cached.data:
                if isinstance(item, dict) and str(item.get("id")) == str(item_id):
                    logger.info("Returning %s %s from cache", self.collection, item_id)
                    return item

        logger.info("Fetching %s %s from external API", self.collection, item_id)
        response = self._get(f"/{self.collection}/{item_id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            return None
        if not response.is_success:
            logger.error(
                "External API error: %s %s", response.status_code, response.reason_phrase
            )
            raise RemoteUnavailable(
                f"Failed to fetch {self.collection} from external service"
            )
        return self._check_record(self._json(response))
