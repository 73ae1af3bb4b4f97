import mongomock
import pytest
from relodm import Mapper, MongoStore, SchemaRegistry


@pytest.fixture()
def store():
    """Store over an in-memory mongomock database, fresh for each test."""
    client = mongomock.MongoClient()
    yield MongoStore(client["relodm_test"])
    client.close()


@pytest.fixture()
def registry():
    return SchemaRegistry()


@pytest.fixture()
def mapper(store, registry):
    return Mapper(store, registry=registry)
