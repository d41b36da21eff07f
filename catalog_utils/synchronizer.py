"""
Demo Catalog — Collection Synchronizer

Keeps a CatalogState in step with the backend's three change streams.

Subscription callbacks may fire on any thread and in any interleaving, so
they only post messages to an inbox. pump() drains the inbox on the UI
thread and applies the messages in arrival order:

    CollectionSnapshot  -> replace that collection wholesale (validated)
    StreamFailure       -> log; for Tag, issue a one-shot list() fetch

Relationship snapshots re-run the enricher in full. References that do not
resolve are dropped, never waited on.
"""

import logging
import queue
from dataclasses import dataclass
from functools import partial
from typing import Dict, List, Optional

from .backend import BackendError
from .enricher import enrich_relationships
from .models import COLLECTIONS, DEMO, TAG, DEMO_TAG, Demo, Tag, DemoTag, filter_valid_records
from .state import CatalogState
from .tag_allocator import seed_predefined_tags

logger = logging.getLogger(__name__)


# =============================================================================
# Messages
# =============================================================================

@dataclass(frozen=True)
class CollectionSnapshot:
    collection: str
    items: List[Dict]


@dataclass(frozen=True)
class StreamFailure:
    collection: str
    error: str


# =============================================================================
# Synchronizer
# =============================================================================

class CatalogSynchronizer:
    """
    Single writer of a CatalogState.

    Args:
        backend: MemoryBackend or CatalogSupabase
        state: State to fill (a fresh CatalogState by default)
        seed_tags: Create the predefined tags on start if none exist (admin)
    """

    def __init__(self, backend, state: CatalogState = None, seed_tags: bool = False):
        self.backend = backend
        self.state = state or CatalogState()
        self.seed_tags = seed_tags
        self.inbox: "queue.Queue" = queue.Queue()
        self._subscriptions = []

    @property
    def started(self) -> bool:
        return bool(self._subscriptions)

    def start(self) -> bool:
        """
        Check configuration, then subscribe to Demo, Tag and DemoTag once.

        Returns False (and subscribes to nothing) when the backend lacks
        any of the catalog collections.
        """
        if self._subscriptions:
            return True

        missing = sorted(set(COLLECTIONS) - set(self.backend.available_collections()))
        if missing:
            message = f"Catalog collections missing from backend: {', '.join(missing)}"
            logger.error(message)
            self.state.config_issue = message
            self.state.loading = False
            self.state.add_diagnostic(message)
            return False

        if self.seed_tags:
            try:
                seed_predefined_tags(self.backend)
            except BackendError as e:
                self._diagnose(f"Error initializing tags: {e}")

        for name in COLLECTIONS:
            try:
                subscription = self.backend.collection(name).observe_query(
                    partial(self._post_snapshot, name),
                    partial(self._post_failure, name),
                )
            except BackendError as e:
                self._post_failure(name, e)
                continue
            self._subscriptions.append(subscription)

        # Backup load in case the tag stream is slow to deliver
        self.fetch_tags()
        self.pump()
        return True

    def stop(self):
        for subscription in self._subscriptions:
            subscription.unsubscribe()
        self._subscriptions = []

    def pump(self) -> int:
        """Apply every queued message; returns how many were applied."""
        applied = 0
        while True:
            try:
                message = self.inbox.get_nowait()
            except queue.Empty:
                return applied
            if isinstance(message, CollectionSnapshot):
                self.apply_snapshot(message.collection, message.items)
            else:
                self.apply_failure(message.collection, message.error)
            applied += 1

    def fetch_tags(self) -> bool:
        """One-shot full tag listing, queued as a snapshot."""
        try:
            items = self.backend.collection(TAG).list()
        except BackendError as e:
            self._diagnose(f"Error loading tags: {e}")
            return False
        self.inbox.put(CollectionSnapshot(TAG, items))
        return True

    # -------------------------------------------------------------------------
    # Applying messages
    # -------------------------------------------------------------------------

    def apply_snapshot(self, collection: str, items: Optional[List[Dict]]):
        if collection == DEMO:
            valid = self._validated(DEMO, items)
            self.state.demos = [Demo.from_dict(r) for r in valid]
            self.state.loading = False
            logger.debug(f"Demos loaded: {len(valid)}")
        elif collection == TAG:
            valid = self._validated(TAG, items)
            self.state.tags = [Tag.from_dict(r) for r in valid]
            logger.debug(f"Tags loaded: {len(valid)}")
        elif collection == DEMO_TAG:
            items = [r for r in (items or []) if r]
            self.state.relationships = [DemoTag.from_dict(r) for r in items]
            self.state.enriched = enrich_relationships(items, self.backend.collection(TAG).get)
            logger.debug(f"Demo-Tag relationships processed: {len(self.state.enriched)}")
        else:
            logger.warning(f"Snapshot for unknown collection {collection} ignored")

    def apply_failure(self, collection: str, error: str):
        self._diagnose(f"Error in {collection} subscription: {error}")
        if collection == DEMO:
            self.state.loading = False
        elif collection == TAG:
            self.fetch_tags()

    # -------------------------------------------------------------------------
    # Internal Helpers
    # -------------------------------------------------------------------------

    def _post_snapshot(self, collection: str, items: List[Dict]):
        self.inbox.put(CollectionSnapshot(collection, list(items or [])))

    def _post_failure(self, collection: str, error: Exception):
        self.inbox.put(StreamFailure(collection, str(error)))

    def _validated(self, collection: str, items: Optional[List[Dict]]) -> List[Dict]:
        valid, dropped = filter_valid_records(items, collection)
        if dropped:
            self.state.dropped[collection] = self.state.dropped.get(collection, 0) + dropped
            logger.warning(f"Filtered {dropped} invalid {collection} records")
            self.state.add_diagnostic(f"Filtered {dropped} invalid {collection} records")
        return valid

    def _diagnose(self, message: str):
        logger.error(message)
        self.state.add_diagnostic(message)
