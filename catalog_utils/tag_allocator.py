"""
Demo Catalog — Tag Allocation (admin only)

Colour assignment for new tags, name uniqueness, and first-run seeding
of the predefined tags.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from .backend import BackendError
from .models import TAG, TAG_COLORS, PREDEFINED_TAGS, Tag

logger = logging.getLogger(__name__)


def next_color(existing_tags: Iterable[Tag], palette: List[str] = TAG_COLORS) -> str:
    """First palette colour no tag uses yet; wraps to the first entry when all are taken."""
    used = {tag.color for tag in existing_tags}
    for color in palette:
        if color not in used:
            return color
    return palette[0]


def normalize_tag_name(name: str) -> str:
    return (name or "").strip().lower()


def is_duplicate_tag_name(name: str, existing_tags: Iterable[Tag]) -> bool:
    wanted = normalize_tag_name(name)
    return any(normalize_tag_name(tag.name) == wanted for tag in existing_tags)


def create_tag(backend, name: str, existing_tags: List[Tag]) -> Tuple[Optional[Tag], Optional[str]]:
    """
    Create a tag with the next free colour.

    Blank or duplicate names are rejected before the backend is called.

    Returns:
        Tuple of (Tag, error_message)
    """
    clean_name = (name or "").strip()
    if not clean_name:
        return None, "Tag name is required"
    if is_duplicate_tag_name(clean_name, existing_tags):
        return None, f"Tag '{clean_name}' already exists"

    color = next_color(existing_tags)
    try:
        record = backend.collection(TAG).create({"name": clean_name, "color": color})
    except BackendError as e:
        logger.error(f"Error creating tag: {e}")
        return None, f"Error creating tag: {e}"

    logger.info(f"New tag '{clean_name}' created with colour {color}")
    return Tag.from_dict(record), None


def seed_predefined_tags(backend) -> int:
    """
    Create the predefined tags when the tag collection is empty.

    Returns:
        Number of tags created (0 when tags already exist).
    """
    tags = backend.collection(TAG)
    if tags.list():
        return 0

    for name, color in PREDEFINED_TAGS:
        tags.create({"name": name, "color": color})
    logger.info(f"Predefined tags created: {len(PREDEFINED_TAGS)}")
    return len(PREDEFINED_TAGS)
