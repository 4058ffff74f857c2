"""Tests for binding Document classes to collections."""

import threading
import time

import pytest

pytestmark = pytest.mark.unit

from docmap import StorageCollection, collection_binder, configure_database
from docmap.document.collection_binder import CollectionBinder, collection_name_for
from tests.memory_collection import MemoryDatabase
from tests.models import Address, Person, Ticket, Widget


class TestCollectionNames:
    """Tests for deriving collection names from class names."""

    def test_tableized_class_name(self):
        assert collection_name_for(Person) == "people"
        assert collection_name_for(Address) == "addresses"
        assert collection_name_for(Ticket) == "tickets"

    def test_explicit_collection_name(self):
        assert collection_name_for(Widget) == "gadgets"


class TestCollectionBinder:
    """Tests for memoizing collections per class."""

    def test_resolves_once_per_class(self, memory_db):
        first = Person.get_collection()
        second = Person().collection
        assert first is second
        assert first.name == "people"
        assert memory_db.lookups.count("people") == 1

    def test_classes_get_their_own_collections(self, memory_db):
        assert Person.get_collection() is not Ticket.get_collection()
        assert collection_binder.is_bound(Person)
        assert collection_binder.is_bound(Ticket)
        assert not collection_binder.is_bound(Address)

    def test_configure_forgets_bindings(self, memory_db):
        Person.get_collection()
        collection_binder.configure(database_factory=lambda: memory_db)
        assert not collection_binder.is_bound(Person)
        Person.get_collection()
        assert memory_db.lookups.count("people") == 2

    def test_concurrent_first_access_binds_once(self):
        lookups = []

        class SlowDatabase:
            def __getitem__(self, name):
                lookups.append(name)
                time.sleep(0.01)
                return MemoryDatabase()[name]

        binder = CollectionBinder(database_factory=SlowDatabase, collection_factory=lambda collection: collection)
        results = []
        barrier = threading.Barrier(8)

        def bind():
            barrier.wait()
            results.append(binder.collection_for(Person))

        threads = [threading.Thread(target=bind) for _ in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert lookups == ["people"]
        assert len(results) == 8
        assert all(result is results[0] for result in results)

    def test_default_factories_wrap_the_configured_database(self):
        """After reset() the binder reads the module-level database and wraps pymongo collections."""
        database = MemoryDatabase()
        collection_binder.reset()
        configure_database(database)
        collection = Person.get_collection()
        assert isinstance(collection, StorageCollection)
        assert collection.name == "people"
        assert database.lookups == ["people"]
