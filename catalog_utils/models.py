"""
Demo Catalog — Records

Dataclasses for the three catalog collections (demos, tags, demo_tags),
the tag colour palette, and the record validation used when snapshots
arrive from the backend.

Rows come from the backend as plain dicts (snake_case columns). Each
dataclass has a from_dict() that tolerates missing keys.
"""

from dataclasses import dataclass, asdict
from typing import Optional, Dict, List, Iterable, Tuple


# =============================================================================
# Constants
# =============================================================================

# Collection names as exposed by every backend
DEMO = "Demo"
TAG = "Tag"
DEMO_TAG = "DemoTag"
COLLECTIONS = (DEMO, TAG, DEMO_TAG)

# 10 tag colours that work with the orange-black theme
TAG_COLORS = [
    "#e74c3c",  # Red
    "#3498db",  # Blue
    "#2ecc71",  # Green
    "#9b59b6",  # Purple
    "#f39c12",  # Orange
    "#1abc9c",  # Teal
    "#e67e22",  # Dark Orange
    "#34495e",  # Dark Blue-Gray
    "#27ae60",  # Dark Green
    "#8e44ad",  # Dark Purple
]

# Created on first run when the tag collection is empty
PREDEFINED_TAGS = [
    ("Games", TAG_COLORS[0]),
    ("ML", TAG_COLORS[1]),
    ("Analytics", TAG_COLORS[2]),
    ("M&E", TAG_COLORS[3]),
    ("Generative AI", TAG_COLORS[4]),
]

# Editable demo columns, in form order
DEMO_FIELDS = ("project_name", "github_link", "project_link", "image_url")


# =============================================================================
# Data Classes
# =============================================================================

@dataclass(frozen=True)
class Demo:
    """A showcased project card."""
    id: str
    project_name: Optional[str] = None
    github_link: Optional[str] = None
    project_link: Optional[str] = None
    image_url: Optional[str] = None
    created_at: str = ""
    updated_at: str = ""

    @classmethod
    def from_dict(cls, data: Dict) -> 'Demo':
        return cls(
            id=data.get('id', ''),
            project_name=data.get('project_name'),
            github_link=data.get('github_link'),
            project_link=data.get('project_link'),
            image_url=data.get('image_url'),
            created_at=data.get('created_at') or '',
            updated_at=data.get('updated_at') or '',
        )

    def form_fields(self) -> Dict[str, str]:
        """Editable fields with None mapped to empty strings."""
        return {name: getattr(self, name) or "" for name in DEMO_FIELDS}

    def to_dict(self) -> Dict:
        return asdict(self)


@dataclass(frozen=True)
class Tag:
    """A coloured label that can be attached to demos."""
    id: str
    name: str
    color: str = TAG_COLORS[0]

    @classmethod
    def from_dict(cls, data: Dict) -> 'Tag':
        return cls(
            id=data.get('id', ''),
            name=data.get('name') or '',
            color=data.get('color') or TAG_COLORS[0],
        )


@dataclass(frozen=True)
class DemoTag:
    """One demo-has-tag edge of the many-to-many join."""
    id: str
    demo_id: Optional[str]
    tag_id: Optional[str]

    @classmethod
    def from_dict(cls, data: Dict) -> 'DemoTag':
        return cls(
            id=data.get('id', ''),
            demo_id=data.get('demo_id'),
            tag_id=data.get('tag_id'),
        )


@dataclass(frozen=True)
class EnrichedDemoTag:
    """A relationship whose tag reference has been resolved."""
    id: str
    demo_id: str
    tag_id: str
    tag: Tag

    @property
    def tag_name(self) -> str:
        return self.tag.name

    @property
    def tag_color(self) -> str:
        return self.tag.color


# =============================================================================
# Validation
# =============================================================================

REQUIRED_FIELDS = {
    DEMO: ("id",),
    TAG: ("id", "name"),
}


def is_valid_record(record: Optional[Dict], required: Iterable[str]) -> bool:
    """A record is valid when it is a dict and every required field is truthy."""
    if not isinstance(record, dict):
        return False
    return all(record.get(field) for field in required)


def filter_valid_records(records: Optional[List[Dict]], collection: str) -> Tuple[List[Dict], int]:
    """
    Drop records missing their identity or name-like fields.

    Returns:
        (valid_records, dropped_count)
    """
    records = list(records or [])
    required = REQUIRED_FIELDS.get(collection, ("id",))
    valid = [r for r in records if is_valid_record(r, required)]
    return valid, len(records) - len(valid)
