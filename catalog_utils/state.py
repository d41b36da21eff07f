"""
Demo Catalog — Session State

CatalogState is the single in-memory copy of the catalog for one client
session. CatalogSynchronizer is its only writer; views read it.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .models import Demo, Tag, DemoTag, EnrichedDemoTag

logger = logging.getLogger(__name__)

MAX_DIAGNOSTICS = 200


@dataclass
class CatalogState:
    demos: List[Demo] = field(default_factory=list)
    tags: List[Tag] = field(default_factory=list)
    relationships: List[DemoTag] = field(default_factory=list)
    enriched: List[EnrichedDemoTag] = field(default_factory=list)

    # True until the first Demo snapshot (or Demo stream failure)
    loading: bool = True
    # Set when the backend lacks the catalog collections
    config_issue: Optional[str] = None

    # Records dropped by validation, per collection
    dropped: Dict[str, int] = field(default_factory=dict)
    diagnostics: List[str] = field(default_factory=list)

    def add_diagnostic(self, message: str):
        self.diagnostics.append(message)
        del self.diagnostics[:-MAX_DIAGNOSTICS]

    def tag_ids_for(self, demo_id: str) -> List[str]:
        """Tag ids currently linked to a demo (resolved relationships only)."""
        return [rel.tag_id for rel in self.enriched if rel.demo_id == demo_id]

    def find_demo(self, demo_id: str) -> Optional[Demo]:
        for demo in self.demos:
            if demo.id == demo_id:
                return demo
        return None
