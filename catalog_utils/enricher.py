"""
Demo Catalog — Relationship Enrichment

Joins demo_tags rows against tags so the views can show
demo -> [(tag name, tag colour)] without further lookups.
"""

import logging
from typing import Callable, Dict, Iterable, List, Optional

from .models import DemoTag, EnrichedDemoTag, Tag

logger = logging.getLogger(__name__)

TagResolver = Callable[[str], Optional[Dict]]


def enrich_relationships(relationships: Iterable[Dict], resolve_tag: TagResolver) -> List[EnrichedDemoTag]:
    """
    Resolve the tag behind every relationship.

    Relationships with a missing demo/tag reference, or whose tag cannot be
    resolved to a named record, are left out. Each tag id is resolved at most
    once per call.

    Args:
        relationships: Raw demo_tags rows
        resolve_tag: Point lookup returning a tag row or None (may raise)

    Returns:
        List of EnrichedDemoTag
    """
    resolved: Dict[str, Optional[Tag]] = {}
    enriched = []
    skipped = 0

    for row in relationships:
        if not row:
            skipped += 1
            continue
        rel = DemoTag.from_dict(row)
        if not rel.demo_id or not rel.tag_id:
            logger.debug(f"Skipping invalid DemoTag item: {row}")
            skipped += 1
            continue

        if rel.tag_id not in resolved:
            resolved[rel.tag_id] = _resolve(rel.tag_id, resolve_tag)
        tag = resolved[rel.tag_id]
        if tag is None:
            skipped += 1
            continue

        enriched.append(EnrichedDemoTag(id=rel.id, demo_id=rel.demo_id, tag_id=rel.tag_id, tag=tag))

    if skipped:
        logger.info(f"Enrichment kept {len(enriched)} relationships, skipped {skipped}")
    return enriched


def _resolve(tag_id: str, resolve_tag: TagResolver) -> Optional[Tag]:
    try:
        record = resolve_tag(tag_id)
    except Exception as e:
        logger.error(f"Error fetching tag {tag_id}: {e}")
        return None
    if not record or not record.get("id") or not record.get("name"):
        logger.info(f"Tag {tag_id} not found or invalid")
        return None
    return Tag.from_dict(record)
