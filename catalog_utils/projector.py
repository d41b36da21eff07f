"""
Demo Catalog — View Projection

project() derives the visible demos from the current state and the active
filters. CatalogView is the surface the Streamlit apps talk to.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Set, Tuple

import pandas as pd

from .models import Demo, EnrichedDemoTag
from .state import CatalogState


@dataclass
class FilterState:
    """Search text plus the tag ids a demo must ALL carry."""
    search_term: str = ""
    selected_tags: List[str] = field(default_factory=list)

    def toggle(self, tag_id: str):
        if tag_id in self.selected_tags:
            self.selected_tags.remove(tag_id)
        else:
            self.selected_tags.append(tag_id)

    def clear(self):
        self.search_term = ""
        self.selected_tags = []

    @property
    def is_active(self) -> bool:
        return bool(self.search_term) or bool(self.selected_tags)


def tag_index(enriched: Iterable[EnrichedDemoTag]) -> Dict[str, Set[str]]:
    """demo id -> set of linked tag ids"""
    index = defaultdict(set)
    for rel in enriched:
        index[rel.demo_id].add(rel.tag_id)
    return index


def matches_search(demo: Demo, search_term: str) -> bool:
    if not search_term:
        return True
    return bool(demo.project_name) and search_term.lower() in demo.project_name.lower()


def project(demos: Iterable[Demo], enriched: Iterable[EnrichedDemoTag], filters: FilterState) -> List[Demo]:
    """
    Filter demos by search term (case-insensitive substring of the name)
    and by selected tags (conjunctive). Input order is preserved.
    """
    index = tag_index(enriched)
    required = set(filters.selected_tags)
    return [
        demo for demo in demos
        if matches_search(demo, filters.search_term) and required <= index.get(demo.id, set())
    ]


class CatalogView:
    """Accessors and filter mutators over one session's CatalogState."""

    def __init__(self, state: CatalogState, filters: FilterState = None):
        self.state = state
        self.filters = filters or FilterState()

    def get_filtered_demos(self) -> List[Demo]:
        return project(self.state.demos, self.state.enriched, self.filters)

    def get_tag_info(self, demo: Demo) -> List[Tuple[str, str]]:
        """(name, colour) for each resolved tag of a demo."""
        return [(rel.tag_name, rel.tag_color) for rel in self.state.enriched if rel.demo_id == demo.id]

    def toggle_filter_tag(self, tag_id: str):
        self.filters.toggle(tag_id)

    def clear_filters(self):
        self.filters.clear()

    def set_search_term(self, text: str):
        self.filters.search_term = text or ""

    def catalog_frame(self) -> pd.DataFrame:
        """Filtered demos as a table, tag names joined, for the admin overview."""
        rows = []
        for demo in self.get_filtered_demos():
            rows.append({
                "name": demo.project_name or "",
                "tags": ", ".join(name for name, _ in self.get_tag_info(demo)),
                "github": demo.github_link or "",
                "live": demo.project_link or "",
                "updated": demo.updated_at,
                "id": demo.id,
            })
        return pd.DataFrame(rows, columns=["name", "tags", "github", "live", "updated", "id"])
