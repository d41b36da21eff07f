"""
test_tag_allocator.py
---------------------
Unit tests for catalog_utils.tag_allocator.

Covers colour allocation, case/whitespace-insensitive name uniqueness,
ad-hoc tag creation and first-run seeding.
"""
import pytest

from catalog_utils.backend import BackendError
from catalog_utils.models import PREDEFINED_TAGS, TAG, TAG_COLORS, Tag
from catalog_utils.tag_allocator import (
    create_tag,
    is_duplicate_tag_name,
    next_color,
    seed_predefined_tags,
)

from factories import make_tag


# =============================================================================
# next_color()
# =============================================================================

class TestNextColor:

    def test_first_unused_entry(self):
        tags = [make_tag(f"t{i}", color=TAG_COLORS[i]) for i in (0, 1, 2)]

        assert next_color(tags) == TAG_COLORS[3]

    def test_skips_used_entries_out_of_order(self):
        tags = [make_tag("t0", color=TAG_COLORS[0]), make_tag("t2", color=TAG_COLORS[2])]

        assert next_color(tags) == TAG_COLORS[1]

    def test_wraps_when_palette_exhausted(self):
        tags = [make_tag(f"t{i}", color=color) for i, color in enumerate(TAG_COLORS)]

        assert next_color(tags) == TAG_COLORS[0]

    def test_no_tags(self):
        assert next_color([]) == TAG_COLORS[0]


# =============================================================================
# Name uniqueness
# =============================================================================

class TestDuplicateNames:

    @pytest.mark.parametrize("proposed", [" Games ", "games", "GAMES", "Games"])
    def test_duplicates_ignore_case_and_whitespace(self, proposed):
        assert is_duplicate_tag_name(proposed, [make_tag("t1", "Games")])

    def test_distinct_name(self):
        assert not is_duplicate_tag_name("Gaming", [make_tag("t1", "Games")])


# =============================================================================
# create_tag()
# =============================================================================

class TestCreateTag:

    def test_creates_with_next_color(self, backend):
        existing = [make_tag("t0", "Games", TAG_COLORS[0])]

        tag, error = create_tag(backend, "  Robotics ", existing)

        assert error is None
        assert tag.name == "Robotics"
        assert tag.color == TAG_COLORS[1]
        assert backend.collection(TAG).get(tag.id)["name"] == "Robotics"

    def test_duplicate_rejected_without_backend_call(self, backend):
        tag, error = create_tag(backend, " games ", [make_tag("t0", "Games")])

        assert tag is None
        assert "already exists" in error
        assert backend.collection(TAG).list() == []

    def test_blank_rejected(self, backend):
        tag, error = create_tag(backend, "   ", [])

        assert tag is None
        assert error == "Tag name is required"

    def test_backend_failure_returned_as_error(self, backend, monkeypatch):
        def failing_create(fields):
            raise BackendError("insert refused")

        monkeypatch.setattr(backend.collection(TAG), "create", failing_create)

        tag, error = create_tag(backend, "Robotics", [])

        assert tag is None
        assert "insert refused" in error


# =============================================================================
# seed_predefined_tags()
# =============================================================================

class TestSeedPredefinedTags:

    def test_seeds_empty_collection(self, backend):
        created = seed_predefined_tags(backend)

        tags = [Tag.from_dict(r) for r in backend.collection(TAG).list()]
        assert created == len(PREDEFINED_TAGS)
        assert [(t.name, t.color) for t in tags] == PREDEFINED_TAGS

    def test_leaves_existing_tags_alone(self, backend):
        backend.collection(TAG).create({"name": "Custom", "color": TAG_COLORS[9]})

        assert seed_predefined_tags(backend) == 0
        assert len(backend.collection(TAG).list()) == 1
