"""
test_streamlit_session.py
-------------------------
Tests for catalog_utils.streamlit_session (per-session catalog wiring).

A plain dict stands in for st.session_state; the shared backend factory
is patched to hand out one in-memory backend.
"""
import gc

import pytest

from catalog_utils import streamlit_session
from catalog_utils.models import COLLECTIONS, DEMO
from catalog_utils.streamlit_session import SESSION_KEY, end_catalog_session, init_catalog_session

from factories import add_demo


@pytest.fixture
def shared_backend(tagged_backend, monkeypatch):
    for name in ("CATALOG_BACKEND", "CATALOG_POLL_SECONDS"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(streamlit_session, "_shared_backend", lambda config: tagged_backend)
    return tagged_backend


def observer_count(backend):
    return sum(len(backend.collection(name)._observers) for name in COLLECTIONS)


# =============================================================================
# Session Lifecycle
# =============================================================================

class TestSessionLifecycle:

    def test_first_run_starts_sync(self, shared_backend):
        session_state = {}

        session = init_catalog_session(session_state)

        assert session_state[SESSION_KEY] is session
        assert session.sync.started
        assert not session.state.loading

    def test_rerun_reuses_session_and_pumps(self, shared_backend):
        session_state = {}
        session = init_catalog_session(session_state)
        add_demo(shared_backend, "Alpha")

        again = init_catalog_session(session_state)

        assert again is session
        assert [d.project_name for d in again.state.demos] == ["Alpha"]

    def test_end_session_unsubscribes(self, shared_backend):
        session_state = {}
        init_catalog_session(session_state)

        end_catalog_session(session_state)

        assert SESSION_KEY not in session_state
        assert observer_count(shared_backend) == 0

    def test_dropped_sessions_release_their_streams(self, shared_backend):
        for _ in range(20):
            init_catalog_session({})
        gc.collect()

        for i in range(10):
            add_demo(shared_backend, f"Demo {i}")

        assert len(shared_backend.collection(DEMO)._observers) == 0
        assert observer_count(shared_backend) == 0

    def test_live_session_keeps_its_streams(self, shared_backend):
        session_state = {}
        init_catalog_session(session_state)
        init_catalog_session({})
        gc.collect()

        assert observer_count(shared_backend) == len(COLLECTIONS)


# =============================================================================
# Backend Failures
# =============================================================================

class TestBackendFailure:

    def test_backend_error_becomes_config_issue(self, monkeypatch):
        def failing_backend(config):
            raise ValueError("Supabase URL and key required")

        monkeypatch.setattr(streamlit_session, "_shared_backend", failing_backend)
        session_state = {}

        session = init_catalog_session(session_state)

        assert session.sync is None
        assert not session.state.loading
        assert "Supabase URL and key required" in session.state.config_issue
