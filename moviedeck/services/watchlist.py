# moviedeck/services/watchlist.py
"""
Watch Later list persisted in a single storage slot as a JSON array.

Every mutation is a whole-list read-modify-write; two writers racing on the
same slot resolve as last-write-wins for the entire list.
"""
import json
from datetime import datetime, timezone
from typing import Any, Callable, List, Optional, Set

from moviedeck.core.errors import StorageError
from moviedeck.core.logger import setup_logger
from moviedeck.core.models.movie import MovieSummary, WatchlistEntry
from moviedeck.core.storage import KeyValueStorage

logger = setup_logger(__name__)

DEFAULT_KEY = "watchLaterMovies"


def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class WatchlistStore:
    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = DEFAULT_KEY,
        clock: Callable[[], str] = _utc_now,
    ):
        self.storage = storage
        self.key = key
        self.clock = clock

    # ─── Serialization ───────────────────────────────────────────────────────
    def _decode(self, raw: str) -> List[WatchlistEntry]:
        try:
            data = json.loads(raw)
        except ValueError as e:
            raise StorageError(f"slot {self.key!r} is not valid JSON: {e}") from e
        if not isinstance(data, list):
            raise StorageError(f"slot {self.key!r} does not hold a JSON array")
        try:
            return [WatchlistEntry.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise StorageError(f"slot {self.key!r} holds a malformed entry: {e}") from e

    def _raw_items(self) -> List[Any]:
        """
        Slot contents for a read-modify-write. Elements that do not decode
        are carried over untouched; only a slot that is not a JSON array at
        all starts over empty.
        """
        raw = self.storage.get_item(self.key)
        if raw is None:
            return []
        try:
            data = json.loads(raw)
        except ValueError as e:
            logger.error("[WATCHLIST] ❌ Replacing unreadable Watch Later slot: %s", e)
            return []
        if not isinstance(data, list):
            logger.error("[WATCHLIST] ❌ Replacing Watch Later slot that is not a JSON array")
            return []
        return data

    @staticmethod
    def _item_id(item: Any) -> Optional[int]:
        if not isinstance(item, dict):
            return None
        try:
            return int(item["id"])
        except (KeyError, TypeError, ValueError):
            return None

    def _write(self, items: List[Any]) -> None:
        self.storage.set_item(self.key, json.dumps(items))

    # ─── Public API ──────────────────────────────────────────────────────────
    def list(self) -> List[WatchlistEntry]:
        """Entries in insertion order; an absent or corrupt slot reads as empty."""
        raw = self.storage.get_item(self.key)
        if raw is None:
            return []
        try:
            return self._decode(raw)
        except StorageError as e:
            logger.error("[WATCHLIST] ❌ Error retrieving Watch Later movies: %s", e)
            return []

    def add(self, movie: MovieSummary) -> None:
        items = self._raw_items()
        if any(self._item_id(i) == movie.id for i in items):
            logger.info("[WATCHLIST] Movie already in Watch Later list: %s", movie.id)
            return
        items.append(WatchlistEntry(movie=movie, date_added=self.clock()).to_dict())
        self._write(items)
        logger.info('[WATCHLIST] ✅ Movie "%s" added to Watch Later list', movie.title)

    def remove(self, movie_id: int) -> None:
        items = self._raw_items()
        self._write([i for i in items if self._item_id(i) != movie_id])
        logger.info("[WATCHLIST] Movie with ID %s removed from Watch Later list", movie_id)

    def contains(self, movie_id: int) -> bool:
        return any(e.id == movie_id for e in self.list())

    def ids(self) -> Set[int]:
        return {e.id for e in self.list()}

    def toggle(self, movie: MovieSummary) -> bool:
        """Flip membership; returns True when the movie is now listed."""
        if self.contains(movie.id):
            self.remove(movie.id)
            return False
        self.add(movie)
        return True

    def clear(self) -> None:
        self.storage.remove_item(self.key)
        logger.info("[WATCHLIST] Watch Later list cleared")

    def count(self) -> int:
        return len(self.list())

    def movies(self) -> List[MovieSummary]:
        return [e.movie for e in self.list()]
