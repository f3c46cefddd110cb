"""Key-value table interface shared by the task store and the cache."""

from typing import Any, Protocol

Item = dict[str, Any]


class KeyValueTable(Protocol):
    """
    A table of JSON-like items keyed by a single string attribute `id`.

    Implementations raise `PersistenceError` for every backend failure.
    """

    def put_item(self, item: Item) -> None:
        """Write `item`, replacing any item with the same id."""

    def get_item(self, key: str) -> Item | None:
        """Return the item with id `key`, or None."""

    def scan(self) -> list[Item]:
        """Return every item in the table."""

    def update_item(self, key: str, changes: Item) -> Item | None:
        """
        Set only the attributes in `changes` and return the full new item.

        Returns None, writing nothing, when no item with id `key` exists.
        """

    def delete_item(self, key: str) -> None:
        """Remove the item with id `key` if present."""
