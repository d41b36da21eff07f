"""
Demo Catalog — Supabase Integration

Backend for the gallery and admin apps. Wraps supabase-py and exposes the
Demo / Tag / DemoTag collections with the same contract as MemoryBackend
(see backend.py).

Usage:
    from catalog_utils.catalog_supabase import CatalogSupabase

    db = CatalogSupabase(url, key)
    demos = db.collection("Demo").list()
    sub = db.collection("Tag").observe_query(on_snapshot, on_error)
    ...
    sub.unsubscribe()

SETUP:
------
1. pip install supabase
2. Create tables (RLS: public read, anon key write for the admin):
   - demos(id uuid pk default gen_random_uuid(), project_name text,
           github_link text, project_link text, image_url text,
           created_at timestamptz default now(), updated_at timestamptz default now())
   - tags(id uuid pk default gen_random_uuid(), name text not null, color text not null, created_at, updated_at)
   - demo_tags(id uuid pk default gen_random_uuid(), demo_id uuid not null references demos,
               tag_id uuid not null references tags, created_at, updated_at)
3. Set SUPABASE_URL / SUPABASE_KEY, or a [supabase] section in secrets.toml

observe_query() polls the table on a background thread and emits a full
snapshot whenever the rows differ from the last emitted snapshot.
"""

import logging
import threading
from typing import Callable, Dict, List, Optional, Set

from supabase import create_client, Client

from .backend import BackendError, Subscription, SnapshotCallback, ErrorCallback, utc_now_iso
from .models import DEMO, TAG, DEMO_TAG

logger = logging.getLogger(__name__)

TABLE_NAMES = {
    DEMO: "demos",
    TAG: "tags",
    DEMO_TAG: "demo_tags",
}

DEFAULT_POLL_SECONDS = 5.0


# =============================================================================
# Polling Subscription
# =============================================================================

class PollingSubscription(Subscription):
    """
    Re-lists a table every `interval` seconds on a daemon thread.

    The first poll always emits. Later polls emit only when the rows changed.
    A failed poll reports through on_error and ends the stream.
    """

    def __init__(
        self,
        collection: str,
        fetch: Callable[[], List[Dict]],
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
        interval: float = DEFAULT_POLL_SECONDS,
    ):
        self._stop_event = threading.Event()
        super().__init__(collection, self._stop_event.set)
        self._fetch = fetch
        self._on_snapshot = on_snapshot
        self._on_error = on_error
        self._interval = interval
        self._last_rows: Optional[List[Dict]] = None
        self._thread = threading.Thread(target=self._run, name=f"observe-{collection}", daemon=True)

    def start(self) -> 'PollingSubscription':
        self._thread.start()
        return self

    def poll_once(self) -> bool:
        """Fetch once; returns True when a snapshot was emitted."""
        rows = self._fetch()
        if rows == self._last_rows:
            return False
        self._last_rows = rows
        self._on_snapshot(rows)
        return True

    def _run(self):
        while not self._stop_event.is_set():
            try:
                self.poll_once()
            except Exception as e:
                logger.error(f"Polling {self.collection} failed: {e}")
                self.active = False
                if self._on_error:
                    self._on_error(e)
                return
            self._stop_event.wait(self._interval)


# =============================================================================
# Collections
# =============================================================================

class SupabaseCollection:
    """One Supabase table behind the catalog collection contract."""

    def __init__(self, client: Client, name: str, table: str, poll_interval: float = DEFAULT_POLL_SECONDS):
        self.client = client
        self.name = name
        self.table = table
        self.poll_interval = poll_interval

    def list(self, **filters) -> List[Dict]:
        try:
            query = self.client.table(self.table).select("*")
            for column, value in filters.items():
                query = query.eq(column, value)
            response = query.order("created_at").execute()
            return response.data or []
        except Exception as e:
            raise BackendError(f"Error listing {self.table}: {e}") from e

    def get(self, record_id: str) -> Optional[Dict]:
        try:
            response = self.client.table(self.table).select("*").eq("id", record_id).limit(1).execute()
        except Exception as e:
            raise BackendError(f"Error getting {self.table} {record_id}: {e}") from e
        return response.data[0] if response.data else None

    def create(self, fields: Dict) -> Dict:
        try:
            response = self.client.table(self.table).insert(fields).execute()
        except Exception as e:
            raise BackendError(f"Error creating {self.table} row: {e}") from e
        if not response.data:
            raise BackendError(f"Insert into {self.table} returned no row")
        return response.data[0]

    def update(self, record_id: str, **fields) -> Dict:
        updates = {**fields, "updated_at": utc_now_iso()}
        try:
            response = self.client.table(self.table).update(updates).eq("id", record_id).execute()
        except Exception as e:
            raise BackendError(f"Error updating {self.table} {record_id}: {e}") from e
        if not response.data:
            raise BackendError(f"{self.name} {record_id} not found")
        return response.data[0]

    def delete(self, record_id: str) -> None:
        try:
            self.client.table(self.table).delete().eq("id", record_id).execute()
        except Exception as e:
            raise BackendError(f"Error deleting {self.table} {record_id}: {e}") from e

    def observe_query(
        self,
        on_snapshot: SnapshotCallback,
        on_error: Optional[ErrorCallback] = None,
        **filters
    ) -> PollingSubscription:
        subscription = PollingSubscription(
            self.name,
            lambda: self.list(**filters),
            on_snapshot,
            on_error,
            interval=self.poll_interval,
        )
        return subscription.start()


# =============================================================================
# Backend
# =============================================================================

class CatalogSupabase:
    """
    Supabase client wrapper for the demo catalog.

    Args:
        url: Supabase project URL
        key: Supabase anon key
        poll_interval: Seconds between polls for observe_query()
    """

    def __init__(self, url: str, key: str, poll_interval: float = DEFAULT_POLL_SECONDS, client: Client = None):
        if not client and (not url or not key):
            raise ValueError(
                "Supabase URL and key required. "
                "Set SUPABASE_URL and SUPABASE_KEY environment variables, "
                "or add a [supabase] section to secrets.toml"
            )
        self.client: Client = client or create_client(url, key)
        self._collections = {
            name: SupabaseCollection(self.client, name, table, poll_interval)
            for name, table in TABLE_NAMES.items()
        }

    def collection(self, name: str) -> SupabaseCollection:
        try:
            return self._collections[name]
        except KeyError:
            raise BackendError(f"Unknown collection: {name}")

    def available_collections(self) -> Set[str]:
        """Collections whose table answers a one-row probe."""
        available = set()
        for name, table in TABLE_NAMES.items():
            try:
                self.client.table(table).select("id").limit(1).execute()
                available.add(name)
            except Exception as e:
                logger.warning(f"Table {table} not reachable: {e}")
        return available
