# locations_api/store.py

import logging
import threading
from typing import List

import pymongo
from bson import ObjectId
from pymongo import GEOSPHERE, MongoClient
from pymongo.errors import PyMongoError

from .exceptions import StoreConnectionError
from .schemas import LocationFeature

logger = logging.getLogger(__name__)

DATABASE_NAME = "gis_db"
COLLECTION_NAME = "locations"

# Client-side operation timeouts, in seconds
CONNECT_TIMEOUT = 10
READ_TIMEOUT = 10
WRITE_TIMEOUT = 5


def is_valid_id(value: str) -> bool:
    """Return True if ``value`` is a 24 character hex ObjectId."""
    return ObjectId.is_valid(value)


def feature_to_document(feature: LocationFeature) -> dict:
    """Map a feature onto its stored shape. The store assigns ``_id``."""
    return {
        "type": feature.type,
        "properties": feature.properties.model_dump(),
        "geometry": feature.geometry.model_dump(),
    }


def document_to_feature(document: dict) -> LocationFeature:
    return LocationFeature(
        id=str(document["_id"]),
        type=document.get("type") or "",
        properties=document.get("properties") or {},
        geometry=document.get("geometry") or {},
    )


def by_id(object_id: ObjectId) -> dict:
    return {"_id": object_id}


def replace_content(feature: LocationFeature) -> dict:
    """Overwrite properties and geometry as whole sub-documents."""
    return {
        "$set": {
            "properties": feature.properties.model_dump(),
            "geometry": feature.geometry.model_dump(),
        }
    }


class LocationStore:
    """Location features kept in a single MongoDB collection.

    One instance is created at startup and shared by every request; the
    underlying ``MongoClient`` is thread-safe. ``open`` connects and creates
    the 2dsphere index at most once, however many times it is called.
    """

    def __init__(
        self,
        uri: str,
        database_name: str = DATABASE_NAME,
        collection_name: str = COLLECTION_NAME,
        client_factory=MongoClient,
    ):
        self.uri = uri
        self.database_name = database_name
        self.collection_name = collection_name
        self._client_factory = client_factory
        self._client = None
        self._collection = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        return self._collection is not None

    @property
    def collection(self):
        if self._collection is None:
            raise RuntimeError("LocationStore.open() must be called before use")
        return self._collection

    def open(self) -> None:
        with self._lock:
            if self._collection is not None:
                return

            logger.info("Connecting to MongoDB...")
            client = None
            try:
                client = self._client_factory(self.uri)
                with pymongo.timeout(CONNECT_TIMEOUT):
                    client.admin.command("ping")
            except PyMongoError as e:
                if client is not None:
                    client.close()
                raise StoreConnectionError(f"Failed to connect to MongoDB: {e}") from e

            collection = client[self.database_name][self.collection_name]
            self._ensure_geo_index(collection)

            self._client = client
            self._collection = collection
            logger.info("Connected to MongoDB (%s.%s)", self.database_name, self.collection_name)

    def _ensure_geo_index(self, collection) -> None:
        # Best effort: the index is never queried, so failing here is not fatal
        try:
            with pymongo.timeout(CONNECT_TIMEOUT):
                collection.create_index([("geometry", GEOSPHERE)])
        except PyMongoError as e:
            logger.warning("Could not create 2dsphere index, it might already exist: %s", e)
        else:
            logger.info("2dsphere index ensured on 'geometry' field.")

    def close(self) -> None:
        with self._lock:
            if self._client is not None:
                self._client.close()
                logger.info("MongoDB connection closed")
            self._client = None
            self._collection = None

    def insert(self, feature: LocationFeature) -> ObjectId:
        with pymongo.timeout(WRITE_TIMEOUT):
            result = self.collection.insert_one(feature_to_document(feature))
        return result.inserted_id

    def list_features(self) -> List[LocationFeature]:
        with pymongo.timeout(READ_TIMEOUT):
            documents = list(self.collection.find({}))
        return [document_to_feature(document) for document in documents]

    def update(self, object_id: ObjectId, feature: LocationFeature) -> int:
        """Replace properties and geometry; returns the number of matched records."""
        with pymongo.timeout(WRITE_TIMEOUT):
            result = self.collection.update_one(by_id(object_id), replace_content(feature))
        return result.matched_count

    def delete(self, object_id: ObjectId) -> int:
        with pymongo.timeout(WRITE_TIMEOUT):
            result = self.collection.delete_one(by_id(object_id))
        return result.deleted_count
