"""Cache entry model."""

from typing import Any

from pydantic import BaseModel

CACHE_KEY_PREFIX = "cache:"


class CacheEntry(BaseModel):
    """A cached payload stored next to tasks under a reserved id prefix."""

    id: str
    data: Any
    expires_at: int

    @property
    def key(self) -> str:
        """The caller-supplied key, without the namespace prefix."""
        return self.id.removeprefix(CACHE_KEY_PREFIX)

    def is_valid(self, now: float) -> bool:
        """Valid only while `now` is strictly before `expires_at`."""
        return now < self.expires_at
