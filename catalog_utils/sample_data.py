"""
Demo Catalog — Sample Data

A handful of demos for the in-memory backend so the gallery has something
to show without Supabase credentials.
"""

from .models import DEMO, DEMO_TAG, TAG
from .tag_allocator import seed_predefined_tags

SAMPLE_DEMOS = [
    {
        "project_name": "RoboTax",
        "github_link": "https://github.com/example/robotax",
        "project_link": "https://robotax.example.com",
        "image_url": "https://placehold.co/400x200?text=RoboTax",
        "tags": ["ML", "Analytics"],
    },
    {
        "project_name": "Pixel Quest",
        "github_link": "https://github.com/example/pixel-quest",
        "project_link": "https://pixelquest.example.com",
        "image_url": "https://placehold.co/400x200?text=Pixel+Quest",
        "tags": ["Games", "Generative AI"],
    },
    {
        "project_name": "Highlight Reel",
        "github_link": "https://github.com/example/highlight-reel",
        "project_link": "https://highlights.example.com",
        "image_url": "https://placehold.co/400x200?text=Highlight+Reel",
        "tags": ["M&E", "ML"],
    },
]


def seed_sample_catalog(backend) -> int:
    """Seed predefined tags plus the sample demos. Returns demos created."""
    seed_predefined_tags(backend)
    tag_ids = {row["name"]: row["id"] for row in backend.collection(TAG).list()}

    for sample in SAMPLE_DEMOS:
        fields = {k: v for k, v in sample.items() if k != "tags"}
        demo = backend.collection(DEMO).create(fields)
        for name in sample["tags"]:
            if name in tag_ids:
                backend.collection(DEMO_TAG).create({"demo_id": demo["id"], "tag_id": tag_ids[name]})
    return len(SAMPLE_DEMOS)
