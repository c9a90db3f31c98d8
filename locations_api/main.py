# locations_api/main.py

import logging
from contextlib import asynccontextmanager
from typing import Optional

from bson import ObjectId
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from pydantic import ValidationError
from pymongo.errors import PyMongoError

from .config import Settings, load_settings
from .cors import PermissiveCORSMiddleware
from .schemas import (
    FEATURE_TYPE,
    FeatureCollection,
    InsertResult,
    LocationFeature,
    MessageResponse,
)
from .store import LocationStore, is_valid_id

logger = logging.getLogger(__name__)

router = APIRouter()


def get_store(request: Request) -> LocationStore:
    return request.app.state.store


async def decode_feature(request: Request) -> LocationFeature:
    """Decode the body as a feature whatever its Content-Type.

    Decoding is strict: a string or boolean where a number belongs is a
    client error, not something to coerce.
    """
    body = await request.body()
    try:
        return LocationFeature.model_validate_json(body, strict=True)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=jsonable_encoder(e.errors(include_url=False, include_input=False)))


def parse_location_id(location_id: str) -> ObjectId:
    if not is_valid_id(location_id):
        raise HTTPException(status_code=400, detail="Invalid ID format")
    return ObjectId(location_id)


def store_failure(action: str, e: Exception) -> HTTPException:
    # Store errors are forwarded to the client as-is
    logger.error("Failed to %s location(s): %s", action, e)
    return HTTPException(status_code=500, detail=str(e))


# Handlers are plain functions: FastAPI runs them in its thread pool, so the
# blocking pymongo calls never stall the event loop.

@router.post("/locations", response_model=InsertResult)
def create_location(
    feature: LocationFeature = Depends(decode_feature),
    store: LocationStore = Depends(get_store),
):
    """Insert a new feature. Client supplied ``id`` and ``type`` are ignored."""
    feature = feature.model_copy(update={"id": None, "type": FEATURE_TYPE})
    try:
        inserted_id = store.insert(feature)
    except PyMongoError as e:
        raise store_failure("create", e)
    logger.debug("Created location %s", inserted_id)
    return InsertResult(inserted_id=str(inserted_id))


@router.get("/locations", response_model=FeatureCollection)
def list_locations(store: LocationStore = Depends(get_store)):
    try:
        features = store.list_features()
    except (PyMongoError, ValueError) as e:
        raise store_failure("list", e)
    return FeatureCollection(features=features)


@router.put("/locations/{location_id}", response_model=LocationFeature)
def update_location(
    location_id: str,
    feature: LocationFeature = Depends(decode_feature),
    store: LocationStore = Depends(get_store),
):
    """Overwrite properties and geometry, echoing the submitted feature.

    There is no existence check: an unknown id still answers 200.
    """
    object_id = parse_location_id(location_id)
    try:
        matched = store.update(object_id, feature)
    except PyMongoError as e:
        raise store_failure("update", e)
    if not matched:
        logger.debug("Update matched no location for id %s", location_id)
    return feature


@router.delete("/locations/{location_id}", response_model=MessageResponse)
def delete_location(location_id: str, store: LocationStore = Depends(get_store)):
    object_id = parse_location_id(location_id)
    try:
        deleted = store.delete(object_id)
    except PyMongoError as e:
        raise store_failure("delete", e)
    if deleted == 0:
        raise HTTPException(status_code=404, detail="Location not found")
    return MessageResponse(message="Location deleted successfully")


def create_app(store: Optional[LocationStore] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Build the application.

    Without an explicit ``store`` one is created from ``settings`` (or the
    environment) when the application starts; a missing ``MONGO_URI`` or an
    unreachable database aborts startup.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_store = app.state.store is None
        if owns_store:
            app.state.store = LocationStore((settings or load_settings()).mongo_uri)
        await run_in_threadpool(app.state.store.open)
        yield
        if owns_store:
            await run_in_threadpool(app.state.store.close)
            app.state.store = None
        logger.info("Shutting down...")

    app = FastAPI(title="Locations API", lifespan=lifespan)
    app.state.store = store
    app.add_middleware(PermissiveCORSMiddleware)
    app.include_router(router)
    return app


app = create_app()
