# tests/conftest.py

import copy
from types import SimpleNamespace

import pytest
from bson import ObjectId
from fastapi.testclient import TestClient

from locations_api.main import create_app
from locations_api.store import LocationStore


class FakeCollection:
    """Just enough of a pymongo collection for the store's operations."""

    def __init__(self):
        self.documents = []
        self.indexes = []
        self.fail_with = None
        self.index_error = None
        self.calls = 0

    def _check(self):
        self.calls += 1
        if self.fail_with is not None:
            raise self.fail_with

    def _find_one(self, query):
        for document in self.documents:
            if document["_id"] == query["_id"]:
                return document
        return None

    def create_index(self, keys):
        if self.index_error is not None:
            raise self.index_error
        self.indexes.append(keys)
        return "geometry_2dsphere"

    def insert_one(self, document):
        self._check()
        document = copy.deepcopy(document)
        document.setdefault("_id", ObjectId())
        self.documents.append(document)
        return SimpleNamespace(inserted_id=document["_id"], acknowledged=True)

    def find(self, query):
        self._check()
        assert query == {}
        return iter(copy.deepcopy(self.documents))

    def update_one(self, query, update):
        self._check()
        document = self._find_one(query)
        if document is None:
            return SimpleNamespace(matched_count=0, modified_count=0)
        document.update(copy.deepcopy(update["$set"]))
        return SimpleNamespace(matched_count=1, modified_count=1)

    def delete_one(self, query):
        self._check()
        document = self._find_one(query)
        if document is None:
            return SimpleNamespace(deleted_count=0)
        self.documents.remove(document)
        return SimpleNamespace(deleted_count=1)


class FakeAdmin:
    def __init__(self, client):
        self.client = client

    def command(self, name):
        if self.client.ping_error is not None:
            raise self.client.ping_error
        self.client.pings += 1
        return {"ok": 1.0}


class FakeMongoClient:
    """Stands in for ``pymongo.MongoClient``; records every instance created."""

    instances = []
    ping_error = None

    def __init__(self, uri, **kwargs):
        self.uri = uri
        self.pings = 0
        self.closed = False
        self.collection = FakeCollection()
        self.admin = FakeAdmin(self)
        self.databases = {}
        FakeMongoClient.instances.append(self)

    def __getitem__(self, database_name):
        self.databases.setdefault(database_name, {})
        return _FakeDatabase(self, database_name)

    def close(self):
        self.closed = True


class _FakeDatabase:
    def __init__(self, client, name):
        self.client = client
        self.name = name

    def __getitem__(self, collection_name):
        self.client.databases[self.name][collection_name] = self.client.collection
        return self.client.collection


@pytest.fixture(autouse=True)
def reset_fake_clients():
    FakeMongoClient.instances = []
    FakeMongoClient.ping_error = None
    yield
    FakeMongoClient.instances = []
    FakeMongoClient.ping_error = None


@pytest.fixture
def store():
    return LocationStore("mongodb://fake:27017", client_factory=FakeMongoClient)


@pytest.fixture
def collection(client, store) -> FakeCollection:
    return store.collection


@pytest.fixture
def client(store):
    app = create_app(store=store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def feature_payload():
    return {
        "properties": {"name": "Monas", "description": "National Monument"},
        "geometry": {"type": "Point", "coordinates": [106.8272, -6.1754]},
    }
