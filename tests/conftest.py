"""
conftest.py
-----------
Shared pytest fixtures for the demo catalog tests.

Provides fixtures for:
- In-memory backends (empty and with the predefined tags)
- A started synchronizer

Record factories live in factories.py.
"""
import pytest

from catalog_utils.backend import MemoryBackend
from catalog_utils.models import TAG
from catalog_utils.synchronizer import CatalogSynchronizer
from catalog_utils.tag_allocator import seed_predefined_tags


# ----- Backend Fixtures -----

@pytest.fixture
def backend():
    """Empty in-memory backend."""
    return MemoryBackend()


@pytest.fixture
def tagged_backend(backend):
    """Backend holding the five predefined tags."""
    seed_predefined_tags(backend)
    return backend


@pytest.fixture
def tag_ids(tagged_backend):
    """Predefined tag name -> id."""
    return {row["name"]: row["id"] for row in tagged_backend.collection(TAG).list()}


@pytest.fixture
def sync(tagged_backend):
    """Started synchronizer over the tagged backend."""
    synchronizer = CatalogSynchronizer(tagged_backend)
    synchronizer.start()
    yield synchronizer
    synchronizer.stop()

