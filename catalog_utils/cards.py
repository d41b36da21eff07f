"""
Demo Catalog UI helpers (Streamlit)
Shared styling + components used by the gallery and admin apps.

from catalog_utils.cards import inject_catalog_theme, render_filter_panel, render_demo_card
"""

from __future__ import annotations

from html import escape
from typing import List, Optional, Sequence, Tuple

import streamlit as st

from .models import Demo, Tag
from .projector import CatalogView
from .state import CatalogState


_CSS = r"""<style>
:root{
  --cat-orange:#f89520;
  --cat-ink:#f5f5f5;
  --cat-muted:#a3a3a3;
  --cat-card:#1e1e1e;
  --cat-border:#2e2e2e;
  --cat-bg:#121212;
}

html, body, [data-testid="stAppViewContainer"]{
  background: var(--cat-bg);
  color: var(--cat-ink);
}

.cat-card-title{
  color: var(--cat-orange);
  font-weight: 700;
  font-size: 1.1rem;
  margin: 0.4rem 0 0.3rem 0;
}

.cat-tag{
  display: inline-block;
  padding: 2px 10px;
  margin: 0 6px 6px 0;
  border-radius: 999px;
  color: #ffffff;
  font-size: 0.78rem;
  font-weight: 600;
}

.cat-notice{
  border: 1px solid var(--cat-orange);
  border-radius: 10px;
  padding: 0.8rem 1rem;
  color: var(--cat-ink);
}
</style>"""


def inject_catalog_theme() -> None:
    """Call once right after st.set_page_config."""
    st.markdown(_CSS, unsafe_allow_html=True)


def tag_badge(name: str, color: str) -> str:
    """Return a coloured tag pill as HTML."""
    return f"<span class='cat-tag' style='background:{escape(color)};'>{escape(name)}</span>"


def render_tag_badges(tags: Sequence[Tuple[str, str]]) -> None:
    if tags:
        st.markdown("".join(tag_badge(name, color) for name, color in tags), unsafe_allow_html=True)


def render_config_notice(state: CatalogState) -> bool:
    """Show the configuration notice. Returns True when one was shown."""
    if not state.config_issue:
        return False
    st.markdown(
        f"<div class='cat-notice'>⚠️ <b>Configuration issue</b><br/>{escape(state.config_issue)}</div>",
        unsafe_allow_html=True,
    )
    return True


def render_filter_panel(view: CatalogView, tags: List[Tag], container=None) -> None:
    """Search box, tag toggles and a clear button. Mutates view.filters."""
    box = container or st.sidebar
    box.markdown("### 🔍 Filters")

    search = box.text_input(
        "🔎 Search demos",
        value=view.filters.search_term,
        placeholder="Project name...",
        key="catalog_search",
    )
    if search != view.filters.search_term:
        view.set_search_term(search)

    if tags:
        box.caption("Show demos with ALL selected tags")
    for tag in tags:
        selected = tag.id in view.filters.selected_tags
        if box.checkbox(tag.name, value=selected, key=f"filter_tag_{tag.id}") != selected:
            view.toggle_filter_tag(tag.id)

    if view.filters.is_active and box.button("Clear filters", use_container_width=True):
        view.clear_filters()
        for tag in tags:
            st.session_state.pop(f"filter_tag_{tag.id}", None)
        st.session_state.pop("catalog_search", None)
        st.rerun()


def render_demo_card(demo: Demo, tags: Sequence[Tuple[str, str]], admin: bool = False) -> Optional[str]:
    """
    Render one demo card.

    Returns:
        "edit" or "delete" when an admin action button was clicked, else None.
    """
    with st.container(border=True):
        if demo.image_url:
            st.image(demo.image_url, use_container_width=True)
        st.markdown(
            f"<div class='cat-card-title'>{escape(demo.project_name or 'Untitled demo')}</div>",
            unsafe_allow_html=True,
        )
        render_tag_badges(tags)

        col1, col2 = st.columns(2)
        with col1:
            if demo.github_link:
                st.link_button("GitHub", demo.github_link, use_container_width=True)
        with col2:
            if demo.project_link:
                st.link_button("Live demo", demo.project_link, use_container_width=True)

        if not admin:
            return None

        col1, col2 = st.columns(2)
        with col1:
            if st.button("✏️ Edit", key=f"edit_{demo.id}", use_container_width=True):
                return "edit"
        with col2:
            if st.button("🗑️ Delete", key=f"delete_{demo.id}", use_container_width=True):
                return "delete"
    return None


def render_demo_grid(view: CatalogView, demos: Sequence[Demo], columns: int = 3, admin: bool = False) -> Optional[Tuple[str, Demo]]:
    """Cards in a grid. Returns (action, demo) for the first clicked admin action."""
    clicked = None
    cols = st.columns(columns)
    for i, demo in enumerate(demos):
        with cols[i % columns]:
            action = render_demo_card(demo, view.get_tag_info(demo), admin=admin)
            if action and clicked is None:
                clicked = (action, demo)
    return clicked


def render_diagnostics(state: CatalogState) -> None:
    """Collapsed panel with dropped-record counts and recent diagnostics."""
    if not state.diagnostics and not state.dropped:
        return
    with st.expander("🩺 Diagnostics", expanded=False):
        for collection, count in state.dropped.items():
            st.caption(f"**{collection}:** {count} invalid record(s) dropped")
        lines = "\n".join(escape(line) for line in state.diagnostics[-50:])
        if lines:
            st.markdown(f"<pre>{lines}</pre>", unsafe_allow_html=True)
