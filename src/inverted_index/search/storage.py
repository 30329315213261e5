"""In-memory registry of built indexes keyed by source location."""

from __future__ import annotations

import logging
import threading

from inverted_index.search.models import Index


logger = logging.getLogger(__name__)


class IndexNotFoundError(LookupError):
    """Raised when a query targets an index that was never built or was removed."""


class IndexStore:
    """Central registry of built indexes.

    Insertion order matters: :meth:`recent` returns the index stored by the
    latest :meth:`put` of a new source. Re-storing an existing source replaces
    its index in place; the source keeps its original position.

    Usage:
        store = IndexStore()
        store.put("books.json", index)
        store.get("books.json")
        store.recent()
    """

    def __init__(self) -> None:
        self._indexes: dict[str, Index] = {}
        self._lock = threading.RLock()

    def put(self, source_id: str, index: Index) -> None:
        with self._lock:
            replaced = source_id in self._indexes
            self._indexes[source_id] = index
        logger.debug("%s index for %s", "Replaced" if replaced else "Stored", source_id)

    def get(self, source_id: str) -> Index | None:
        with self._lock:
            return self._indexes.get(source_id)

    def get_all(self) -> dict[str, Index]:
        """Return a snapshot of every stored index."""
        with self._lock:
            return dict(self._indexes)

    def recent_source(self) -> str | None:
        with self._lock:
            if not self._indexes:
                return None
            return next(reversed(self._indexes))

    def recent(self) -> Index:
        """Return the most recently stored index.

        Raises:
            IndexNotFoundError: No index has been stored yet.
        """
        with self._lock:
            source_id = self.recent_source()
            if source_id is None:
                raise IndexNotFoundError("No index has been created yet")
            return self._indexes[source_id]

    def remove(self, source_id: str) -> None:
        with self._lock:
            removed = self._indexes.pop(source_id, None)
        if removed is not None:
            logger.debug("Removed index for %s", source_id)

    def clear(self) -> None:
        with self._lock:
            self._indexes.clear()

    def __contains__(self, source_id: object) -> bool:
        with self._lock:
            return source_id in self._indexes

    def __len__(self) -> int:
        with self._lock:
            return len(self._indexes)
