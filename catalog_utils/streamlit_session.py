"""
Demo Catalog — Streamlit Session Helpers

One CatalogSynchronizer per browser session, started on the first run and
pumped at the top of every rerun. The backend itself is shared by all
sessions of the process (st.cache_resource), so in memory mode the admin
app's edits show up in the gallery.

A session's streams stop when its CatalogSession is garbage collected,
which happens once Streamlit drops the browser session's state.

Usage:
    session = init_catalog_session(st.session_state, st.secrets, admin=False)
    demos = session.view.get_filtered_demos()
"""

import logging
import weakref
from dataclasses import dataclass
from typing import Any, Mapping, Optional

import streamlit as st

from .config import get_config, configure_logging, create_backend
from .demo_form import DemoForm
from .projector import CatalogView
from .state import CatalogState
from .synchronizer import CatalogSynchronizer

logger = logging.getLogger(__name__)

SESSION_KEY = "catalog_session"


@dataclass
class CatalogSession:
    backend: Any
    sync: Optional[CatalogSynchronizer]
    view: CatalogView
    form: DemoForm

    @property
    def state(self) -> CatalogState:
        return self.view.state


@st.cache_resource(show_spinner=False)
def _shared_backend(config):
    return create_backend(config)


def init_catalog_session(st_session_state, secrets: Optional[Mapping[str, Any]] = None, admin: bool = False) -> CatalogSession:
    """
    Create (first run) or refresh (later reruns) this session's catalog.

    Backend construction failures leave a session with no synchronizer and
    a configuration notice on the state.
    """
    session = st_session_state.get(SESSION_KEY)
    if session is not None:
        if session.sync:
            session.sync.pump()
        return session

    state = CatalogState()
    backend, sync = None, None
    try:
        config = get_config(secrets)
        configure_logging(config.log_level)
        backend = _shared_backend(config)
    except Exception as e:
        logger.error(f"Could not initialize catalog backend: {e}")
        state.config_issue = str(e)
        state.loading = False
    else:
        sync = CatalogSynchronizer(backend, state, seed_tags=admin)
        sync.start()

    session = CatalogSession(backend=backend, sync=sync, view=CatalogView(state), form=DemoForm())
    if sync is not None:
        weakref.finalize(session, sync.stop)
    st_session_state[SESSION_KEY] = session
    return session


def end_catalog_session(st_session_state):
    """Unsubscribe and forget this session's catalog (next run starts fresh)."""
    session = st_session_state.pop(SESSION_KEY, None)
    if session is not None and session.sync:
        session.sync.stop()
