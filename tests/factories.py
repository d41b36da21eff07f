"""
factories.py
------------
Record factories shared by the demo catalog tests.
"""
from catalog_utils.models import DEMO, DEMO_TAG, TAG_COLORS, Demo, EnrichedDemoTag, Tag


def add_demo(backend, name, tag_ids=()):
    """Create a demo row plus one relationship per tag id; returns the demo id."""
    demo = backend.collection(DEMO).create({
        "project_name": name,
        "github_link": f"https://github.com/example/{name.lower()}",
        "project_link": f"https://{name.lower()}.example.com",
        "image_url": f"https://placehold.co/400x200?text={name}",
    })
    for tag_id in tag_ids:
        backend.collection(DEMO_TAG).create({"demo_id": demo["id"], "tag_id": tag_id})
    return demo["id"]


def make_tag(tag_id, name=None, color=TAG_COLORS[0]):
    return Tag(id=tag_id, name=name or tag_id, color=color)


def make_link(demo_id, tag_id, color=TAG_COLORS[0]):
    return EnrichedDemoTag(id=f"{demo_id}-{tag_id}", demo_id=demo_id, tag_id=tag_id, tag=make_tag(tag_id, color=color))


def make_demo(demo_id, name=None):
    return Demo(id=demo_id, project_name=name)
