"""
test_synchronizer.py
--------------------
Tests for catalog_utils.synchronizer against the in-memory backend.

Covers:
- Initial load and snapshot replacement
- Validation counters
- Stream failures (tag fallback fetch, demo loading flag)
- Missing-collection configuration
- Subscription lifecycle
"""
from catalog_utils.backend import BackendError, MemoryBackend
from catalog_utils.catalog_ops import delete_demo
from catalog_utils.models import DEMO, DEMO_TAG, PREDEFINED_TAGS, TAG
from catalog_utils.synchronizer import CatalogSynchronizer, CollectionSnapshot, StreamFailure

from factories import add_demo


# =============================================================================
# Loading
# =============================================================================

class TestInitialLoad:

    def test_start_loads_all_collections(self, tagged_backend, tag_ids):
        demo_id = add_demo(tagged_backend, "RoboTax", [tag_ids["ML"], tag_ids["Analytics"]])
        sync = CatalogSynchronizer(tagged_backend)

        assert sync.start()

        state = sync.state
        assert not state.loading
        assert [d.id for d in state.demos] == [demo_id]
        assert len(state.tags) == len(PREDEFINED_TAGS)
        assert sorted(state.tag_ids_for(demo_id)) == sorted([tag_ids["ML"], tag_ids["Analytics"]])
        sync.stop()

    def test_empty_catalog_is_not_loading(self, sync):
        assert not sync.state.loading
        assert sync.state.demos == []

    def test_start_twice_subscribes_once(self, sync):
        assert sync.start()
        assert len(sync._subscriptions) == 3

    def test_seed_tags_on_start(self, backend):
        sync = CatalogSynchronizer(backend, seed_tags=True)

        sync.start()

        assert [t.name for t in sync.state.tags] == [name for name, _ in PREDEFINED_TAGS]
        sync.stop()


# =============================================================================
# Snapshots
# =============================================================================

class TestSnapshots:

    def test_changes_arrive_after_pump(self, sync, tagged_backend, tag_ids):
        demo_id = add_demo(tagged_backend, "Pixel Quest", [tag_ids["Games"]])

        assert sync.state.demos == []
        sync.pump()

        assert [d.project_name for d in sync.state.demos] == ["Pixel Quest"]
        assert sync.state.tag_ids_for(demo_id) == [tag_ids["Games"]]

    def test_empty_snapshot_replaces_everything(self, sync, tagged_backend):
        add_demo(tagged_backend, "Alpha")
        sync.pump()

        sync.apply_snapshot(DEMO, [])

        assert sync.state.demos == []

    def test_invalid_tags_dropped_and_counted(self, sync):
        sync.apply_snapshot(TAG, [
            {"id": "t1", "name": "Games", "color": "#e74c3c"},
            {"id": "t2", "name": None},
            {"name": "No id"},
        ])

        assert [t.id for t in sync.state.tags] == ["t1"]
        assert sync.state.dropped[TAG] == 2
        assert "Filtered 2 invalid Tag records" in sync.state.diagnostics

    def test_relationship_to_deleted_tag_not_shown(self, sync, tagged_backend, tag_ids):
        demo_id = add_demo(tagged_backend, "Alpha", [tag_ids["Games"], tag_ids["ML"]])
        tagged_backend.collection(TAG).delete(tag_ids["ML"])
        sync.pump()

        assert sync.state.tag_ids_for(demo_id) == [tag_ids["Games"]]
        assert len(sync.state.relationships) == 2

    def test_cascade_delete_leaves_no_relationships(self, sync, tagged_backend, tag_ids):
        demo_id = add_demo(tagged_backend, "Alpha", [tag_ids["Games"], tag_ids["ML"]])
        sync.pump()

        success, error = delete_demo(tagged_backend, demo_id)
        sync.pump()

        assert success and error is None
        assert sync.state.find_demo(demo_id) is None
        assert [r for r in sync.state.relationships if r.demo_id == demo_id] == []

    def test_messages_apply_in_arrival_order(self, sync):
        sync.inbox.put(CollectionSnapshot(DEMO, [{"id": "d1", "project_name": "First"}]))
        sync.inbox.put(CollectionSnapshot(DEMO, [{"id": "d2", "project_name": "Second"}]))

        assert sync.pump() == 2
        assert [d.id for d in sync.state.demos] == ["d2"]


# =============================================================================
# Stream Failures
# =============================================================================

class TestStreamFailures:

    def test_tag_failure_falls_back_to_fetch(self, sync, tagged_backend):
        tagged_backend.collection(TAG).break_streams(BackendError("stream closed"))
        sync.pump()

        assert len(sync.state.tags) == len(PREDEFINED_TAGS)
        assert any("Error in Tag subscription" in d for d in sync.state.diagnostics)

        # The failed stream stays closed; later tags are not streamed
        tagged_backend.collection(TAG).create({"name": "Robotics", "color": "#1abc9c"})
        sync.pump()
        assert len(sync.state.tags) == len(PREDEFINED_TAGS)

    def test_tag_fallback_failure_keeps_existing_tags(self, sync, tagged_backend, monkeypatch):
        def failing_list(**filters):
            raise BackendError("offline")

        monkeypatch.setattr(tagged_backend.collection(TAG), "list", failing_list)

        sync.inbox.put(StreamFailure(TAG, "stream closed"))
        sync.pump()

        assert len(sync.state.tags) == len(PREDEFINED_TAGS)
        assert any("Error loading tags: offline" in d for d in sync.state.diagnostics)

    def test_demo_failure_clears_loading(self, tagged_backend):
        sync = CatalogSynchronizer(tagged_backend)
        assert sync.state.loading

        sync.inbox.put(StreamFailure(DEMO, "stream closed"))
        sync.pump()

        assert not sync.state.loading
        assert sync.state.demos == []


# =============================================================================
# Configuration and Lifecycle
# =============================================================================

class TestConfiguration:

    def test_missing_collection_blocks_start(self):
        backend = MemoryBackend(collections=(DEMO, TAG))
        sync = CatalogSynchronizer(backend)

        assert not sync.start()

        assert not sync.started
        assert not sync.state.loading
        assert DEMO_TAG in sync.state.config_issue
        assert sync.state.demos == []

    def test_stop_unsubscribes(self, tagged_backend):
        sync = CatalogSynchronizer(tagged_backend)
        sync.start()
        subscriptions = list(sync._subscriptions)

        sync.stop()
        add_demo(tagged_backend, "After Stop")

        assert all(not s.active for s in subscriptions)
        assert sync.pump() == 0
        assert sync.state.demos == []
