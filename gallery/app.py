# =============================================================================
# Demo Gallery — Public Catalog
#
# Read-only Streamlit app showing every demo as a card (name, links, image,
# coloured tags) with search and tag filters.
#
# Run:  streamlit run gallery/app.py
#
# VERSION HISTORY:
# v0.1.0: Initial release
# =============================================================================

# =============================================================================
# PAGE CONFIG — MUST BE FIRST (before any other st.* calls)
# =============================================================================
import streamlit as st

st.set_page_config(
    page_title="Demo Gallery",
    page_icon="🚀",
    layout="wide",
    initial_sidebar_state="expanded",
)

# =============================================================================
# REST OF IMPORTS
# =============================================================================
from catalog_utils.cards import (
    inject_catalog_theme,
    render_config_notice,
    render_demo_grid,
    render_diagnostics,
    render_filter_panel,
)
from catalog_utils.streamlit_session import CatalogSession, end_catalog_session, init_catalog_session

# =============================================================================
# Constants
# =============================================================================
APP_VERSION = "0.1.0"
REFRESH_SECONDS = 5
GRID_COLUMNS = 3


# =============================================================================
# Gallery
# =============================================================================
@st.fragment(run_every=REFRESH_SECONDS)
def render_gallery(session: CatalogSession):
    """Re-runs on its own timer so streamed snapshots show up without a click."""
    if session.sync:
        session.sync.pump()

    state = session.state
    if state.loading:
        st.info("Loading demos...")
        return

    if not state.demos:
        st.info("No demos yet. Check back soon!")
        return

    demos = session.view.get_filtered_demos()
    if not demos:
        st.warning("No demos match the current search and tag filters.")
        return

    st.markdown(f"**{len(demos)} of {len(state.demos)} demo(s)**")
    render_demo_grid(session.view, demos, columns=GRID_COLUMNS)


# =============================================================================
# Main App
# =============================================================================
def main():
    inject_catalog_theme()

    st.title("🚀 Demo Gallery")
    st.caption(f"Browse the projects we've built • v{APP_VERSION}")

    session = init_catalog_session(st.session_state, st.secrets, admin=False)

    if render_config_notice(session.state):
        st.caption("The catalog tables are not available yet, so there is nothing to show.")
        return

    render_filter_panel(session.view, session.state.tags)

    st.sidebar.divider()
    if st.sidebar.button("🔄 Reconnect", use_container_width=True):
        end_catalog_session(st.session_state)
        st.rerun()

    st.divider()
    render_gallery(session)
    render_diagnostics(session.state)


if __name__ == "__main__":
    main()
