"""
Demo Catalog — Admin Mutations

Multi-step write procedures issued by the admin app. Each step is awaited
in turn; nothing here reads back into CatalogState (the synchronizer picks
up the resulting snapshots).

Partial failure:
- delete_demo: if any relationship delete fails, the demo is NOT deleted.
  Relationships removed before the failure stay removed.
- save_demo: a failure after the demo write leaves the demo saved with an
  incomplete tag set. Retrying an edit re-lists and replaces the demo's
  relationships, so it converges. Retrying a create writes a second demo;
  the half-created one shows up in the admin list and can be deleted there.

All functions return (result, error_message) tuples and never raise
BackendError to the caller.
"""

import logging
from typing import Dict, Iterable, Optional, Tuple

from .backend import BackendError
from .models import DEMO, DEMO_TAG, DEMO_FIELDS

logger = logging.getLogger(__name__)


def delete_demo_tags(backend, demo_id: str) -> int:
    """Delete every relationship of a demo. Raises BackendError on the first failure."""
    demo_tags = backend.collection(DEMO_TAG)
    existing = demo_tags.list(demo_id=demo_id)
    for row in existing:
        demo_tags.delete(row["id"])
    return len(existing)


def delete_demo(backend, demo_id: str) -> Tuple[bool, Optional[str]]:
    """
    Delete a demo and its relationships (relationships first).

    Returns:
        Tuple of (success, error_message)
    """
    try:
        removed = delete_demo_tags(backend, demo_id)
    except BackendError as e:
        logger.error(f"Aborted delete of demo {demo_id}: {e}")
        return False, f"Error deleting demo: {e}"

    try:
        backend.collection(DEMO).delete(demo_id)
    except BackendError as e:
        logger.error(f"Relationships of demo {demo_id} removed but demo delete failed: {e}")
        return False, f"Error deleting demo: {e}"

    logger.info(f"Deleted demo {demo_id} and {removed} relationship(s)")
    return True, None


def save_demo(
    backend,
    fields: Dict[str, str],
    tag_ids: Iterable[str],
    editing_id: Optional[str] = None,
) -> Tuple[Optional[str], Optional[str]]:
    """
    Create or update a demo and replace its tag relationships.

    Args:
        fields: Demo columns (project_name, github_link, project_link, image_url)
        tag_ids: Tag ids the demo should carry
        editing_id: Existing demo id, or None to create

    Returns:
        Tuple of (demo_id, error_message)
    """
    values = {name: (fields.get(name) or "").strip() for name in DEMO_FIELDS}
    demo_id = editing_id
    try:
        if editing_id:
            backend.collection(DEMO).update(editing_id, **values)
            delete_demo_tags(backend, editing_id)
        else:
            demo_id = backend.collection(DEMO).create(values)["id"]

        demo_tags = backend.collection(DEMO_TAG)
        for tag_id in tag_ids:
            demo_tags.create({"demo_id": demo_id, "tag_id": tag_id})
    except BackendError as e:
        logger.error(f"Error in form submit for demo {demo_id or '(new)'}: {e}")
        return None, f"Error in form submit: {e}"

    logger.info(f"Saved demo {demo_id}")
    return demo_id, None
