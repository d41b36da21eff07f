# =============================================================================
# Demo Admin — Catalog Management
#
# Streamlit app for creating, editing and deleting demos and adding tags.
# Shares the catalog (and the filters) with the public gallery.
#
# Run:  streamlit run admin/app.py
#
# VERSION HISTORY:
# v0.1.0: Initial release
# =============================================================================

# =============================================================================
# PAGE CONFIG — MUST BE FIRST (before any other st.* calls)
# =============================================================================
import streamlit as st

st.set_page_config(
    page_title="Demo Admin",
    page_icon="🛠️",
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
from catalog_utils.catalog_ops import delete_demo
from catalog_utils.demo_form import FormMode
from catalog_utils.models import DEMO_FIELDS
from catalog_utils.streamlit_session import CatalogSession, end_catalog_session, init_catalog_session
from catalog_utils.tag_allocator import create_tag

# =============================================================================
# Constants
# =============================================================================
APP_VERSION = "0.1.0"
GRID_COLUMNS = 3

FIELD_LABELS = {
    "project_name": "Project Name",
    "github_link": "GitHub Link",
    "project_link": "Project Link",
    "image_url": "Image URL",
}


# =============================================================================
# Session State
# =============================================================================
def init_session_state():
    """Initialize admin-only session state."""
    if "pending_delete" not in st.session_state:
        st.session_state.pending_delete = None
    if "admin_error" not in st.session_state:
        st.session_state.admin_error = None


# =============================================================================
# Add Tag
# =============================================================================
def render_add_tag(session: CatalogSession):
    """Sidebar popup for creating a tag with the next free colour."""
    with st.sidebar.expander("🏷️ Add Tag", expanded=False):
        name = st.text_input("Tag name", key="new_tag_name", placeholder="e.g. Robotics")
        if st.button("Add Tag", key="add_tag_btn", use_container_width=True):
            tag, error = create_tag(session.backend, name, session.state.tags)
            if error:
                st.error(error)
            else:
                st.toast(f"✅ Tag '{tag.name}' created")
                st.session_state.pop("new_tag_name", None)
                st.rerun()


# =============================================================================
# Demo Form
# =============================================================================
def render_demo_form(session: CatalogSession):
    """Create/edit form. Contents survive a failed submit."""
    form = session.form
    title = "✏️ Edit Demo" if form.mode == FormMode.OPEN_FOR_EDIT else "➕ New Demo"
    st.markdown(f"### {title}")

    with st.form("demo_form"):
        values = {}
        for name in DEMO_FIELDS:
            values[name] = st.text_input(FIELD_LABELS[name], value=form.fields[name])
            if form.errors.get(name):
                st.caption(f":red[{FIELD_LABELS[name]} is required]")

        st.markdown("**Tags**")
        chosen = []
        cols = st.columns(4)
        for i, tag in enumerate(session.state.tags):
            with cols[i % 4]:
                if st.checkbox(tag.name, value=tag.id in form.selected_tags, key=f"form_tag_{form.editing_id}_{tag.id}"):
                    chosen.append(tag.id)
        if form.errors.get("tags"):
            st.caption(":red[Select at least one tag]")

        col1, col2 = st.columns(2)
        with col1:
            submitted = st.form_submit_button("💾 Save", type="primary", use_container_width=True)
        with col2:
            cancelled = st.form_submit_button("Cancel", use_container_width=True)

    if form.diagnostic:
        st.error(form.diagnostic)

    if cancelled:
        form.close()
        st.rerun()

    if submitted:
        for name, value in values.items():
            form.set_field(name, value)
        for tag_id in set(form.selected_tags) ^ set(chosen):
            form.toggle_tag(tag_id)

        with st.spinner("Saving..."):
            saved = form.submit(session.backend)
        if saved:
            st.toast("✅ Demo saved")
        st.rerun()


# =============================================================================
# Delete Confirmation
# =============================================================================
def render_delete_confirmation(session: CatalogSession):
    demo = session.state.find_demo(st.session_state.pending_delete)
    if demo is None:
        st.session_state.pending_delete = None
        return

    st.warning(f"⚠️ **Delete '{demo.project_name or demo.id}'?** This cannot be undone.")
    col1, col2 = st.columns(2)
    with col1:
        if st.button("❌ Yes, Delete", use_container_width=True, type="primary"):
            _, error = delete_demo(session.backend, demo.id)
            st.session_state.pending_delete = None
            st.session_state.admin_error = error
            st.rerun()
    with col2:
        if st.button("Cancel", key="cancel_delete", use_container_width=True):
            st.session_state.pending_delete = None
            st.rerun()


# =============================================================================
# Main App
# =============================================================================
def main():
    init_session_state()
    inject_catalog_theme()

    st.title("🛠️ Demo Admin")
    st.caption(f"Manage the demo catalog • v{APP_VERSION}")

    session = init_catalog_session(st.session_state, st.secrets, admin=True)

    if render_config_notice(session.state):
        st.caption("Create the demos, tags and demo_tags tables, then reload.")
        return

    # Sidebar
    render_filter_panel(session.view, session.state.tags)
    st.sidebar.divider()
    render_add_tag(session)
    if st.sidebar.button("🔄 Reconnect", use_container_width=True):
        end_catalog_session(st.session_state)
        st.rerun()

    if st.session_state.admin_error:
        st.error(st.session_state.admin_error)
        st.session_state.admin_error = None

    # Form / actions
    if session.form.is_open:
        render_demo_form(session)
        st.divider()
    elif st.button("➕ New Demo", type="primary"):
        session.form.open_for_create()
        st.rerun()

    if st.session_state.pending_delete:
        render_delete_confirmation(session)

    # Catalog
    state = session.state
    if state.loading:
        st.info("Loading demos...")
    elif not state.demos:
        st.info("No demos yet. Add the first one with ➕ New Demo.")
    else:
        demos = session.view.get_filtered_demos()
        st.markdown(f"**{len(demos)} of {len(state.demos)} demo(s)**")

        clicked = render_demo_grid(session.view, demos, columns=GRID_COLUMNS, admin=True)
        if clicked:
            action, demo = clicked
            if action == "edit":
                session.form.open_for_edit(demo, state.enriched)
            else:
                st.session_state.pending_delete = demo.id
            st.rerun()

        with st.expander("📋 Catalog table", expanded=False):
            st.dataframe(session.view.catalog_frame(), use_container_width=True, hide_index=True)

    render_diagnostics(state)


if __name__ == "__main__":
    main()
