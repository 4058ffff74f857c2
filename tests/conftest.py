"""Shared pytest fixtures for docmap tests."""

from typing import Generator

import pytest

from docmap import collection_binder, document_registry, reset_database
from tests.memory_collection import MemoryDatabase


@pytest.fixture(autouse=True)
def registered_classes() -> Generator[None, None, None]:
    """Forget the Document classes a test defines once it is over."""
    before = set(document_registry)

    yield

    for cls in document_registry:
        if cls not in before:
            document_registry.unregister(cls)


@pytest.fixture(autouse=True)
def memory_db() -> Generator[MemoryDatabase, None, None]:
    """
    Bind every Document class to an in-memory collection.

    Yields:
        The MemoryDatabase collections are created in
    """
    database = MemoryDatabase()
    collection_binder.configure(
        database_factory=lambda: database,
        collection_factory=lambda collection: collection,
    )

    yield database

    collection_binder.reset()
    reset_database()


@pytest.fixture
def people(memory_db: MemoryDatabase):
    """The people collection."""
    return memory_db["people"]


@pytest.fixture
def tickets(memory_db: MemoryDatabase):
    """The tickets collection, seeded with two open tickets and one closed one."""
    collection = memory_db["tickets"]
    collection.insert_raw(
        {"status": "open", "title": "Broken login"},
        {"status": "open", "title": "Slow search"},
        {"status": "closed", "title": "Typo on homepage"},
    )
    return collection
