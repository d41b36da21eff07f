"""
Demo Catalog — Backend Contract and In-Memory Backend

Every backend exposes the same three collections ("Demo", "Tag", "DemoTag"),
each with:

    list(**eq_filters)      -> list of row dicts
    get(id)                 -> row dict or None
    create(fields)          -> created row dict
    update(id, **fields)    -> updated row dict
    delete(id)              -> None
    observe_query(on_snapshot, on_error=None, **eq_filters) -> Subscription

observe_query() delivers the full current contents of the collection on
every change (and once immediately). Failures raise BackendError.

MemoryBackend keeps everything in process. It backs the local demo mode
and the test suite; CatalogSupabase (catalog_supabase.py) is the real one.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Set

from .models import COLLECTIONS

logger = logging.getLogger(__name__)

SnapshotCallback = Callable[[List[Dict]], None]
ErrorCallback = Callable[[Exception], None]


class BackendError(RuntimeError):
    pass


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# =============================================================================
# Subscriptions
# =============================================================================

class Subscription:
    """Handle returned by observe_query(). unsubscribe() is idempotent."""

    def __init__(self, collection: str, stop: Callable[[], None]):
        self.collection = collection
        self._stop = stop
        self.active = True

    def unsubscribe(self):
        if not self.active:
            return
        self.active = False
        self._stop()
        logger.debug(f"Unsubscribed from {self.collection}")


def _matches(row: Dict, filters: Dict) -> bool:
    return all(row.get(key) == value for key, value in filters.items())


# =============================================================================
# In-Memory Backend
# =============================================================================

class MemoryCollection:
    """One in-process table with snapshot subscribers."""

    def __init__(self, name: str):
        self.name = name
        self._rows: List[Dict] = []
        self._observers: List[tuple] = []

    def list(self, **filters) -> List[Dict]:
        return [dict(row) for row in self._rows if _matches(row, filters)]

    def get(self, record_id: str) -> Optional[Dict]:
        row = self._find(record_id)
        return dict(row) if row else None

    def create(self, fields: Dict) -> Dict:
        now = utc_now_iso()
        row = {**fields, "id": fields.get("id") or str(uuid.uuid4()), "created_at": now, "updated_at": now}
        self._rows.append(row)
        self._notify()
        return dict(row)

    def update(self, record_id: str, **fields) -> Dict:
        row = self._find(record_id)
        if row is None:
            raise BackendError(f"{self.name} {record_id} not found")
        row.update(fields)
        row["updated_at"] = utc_now_iso()
        self._notify()
        return dict(row)

    def delete(self, record_id: str) -> None:
        row = self._find(record_id)
        if row is None:
            return
        self._rows.remove(row)
        self._notify()

    def observe_query(
        self,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
        **filters
    ) -> Subscription:
        observer = (on_snapshot, on_error, filters)
        self._observers.append(observer)
        on_snapshot(self.list(**filters))

        def stop():
            if observer in self._observers:
                self._observers.remove(observer)

        return Subscription(self.name, stop)

    def break_streams(self, error: Exception):
        """Fail every open stream on this collection; failed streams stop updating."""
        observers, self._observers = self._observers, []
        for _, on_error, _ in observers:
            if on_error:
                on_error(error)

    def _find(self, record_id: str) -> Optional[Dict]:
        for row in self._rows:
            if row.get("id") == record_id:
                return row
        return None

    def _notify(self):
        for on_snapshot, _, filters in list(self._observers):
            on_snapshot(self.list(**filters))


class MemoryBackend:
    """In-process backend with the Demo / Tag / DemoTag collections."""

    def __init__(self, collections=COLLECTIONS):
        self._collections = {name: MemoryCollection(name) for name in collections}

    def collection(self, name: str) -> MemoryCollection:
        try:
            return self._collections[name]
        except KeyError:
            raise BackendError(f"Unknown collection: {name}")

    def available_collections(self) -> Set[str]:
        return set(self._collections)
