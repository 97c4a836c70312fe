"""MongoDB client helpers."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING, GEOSPHERE
from pymongo.errors import PyMongoError

from beacon.core.config import settings
from beacon.core.errors import StorageError

logger = logging.getLogger(__name__)

USERS = "users"
LOCATIONS = "locations"

_client: Any | None = None


def get_mongo_client() -> Any:
    """Return a singleton Motor client."""
    global _client
    if _client is None:
        _client = AsyncIOMotorClient(settings.mongo_uri)
    return _client


def get_database() -> Any:
    return get_mongo_client()[settings.mongo_db_name]


def get_users_collection() -> Any:
    return get_database()[USERS]


def get_locations_collection() -> Any:
    return get_database()[LOCATIONS]


async def ensure_indexes() -> None:
    """Create the indexes the proximity queries depend on.

    ``$near`` refuses to run without the 2dsphere index on ``users.location``.
    """
    await get_users_collection().create_index([("location", GEOSPHERE)])
    await get_users_collection().create_index([("lastLocationAt", ASCENDING)])
    await get_locations_collection().create_index([("latitude", ASCENDING), ("longitude", ASCENDING)])
    logger.info("Mongo indexes ensured on %s", settings.mongo_db_name)


def close_mongo_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None


@contextmanager
def storage_errors(operation: str) -> Iterator[None]:
    """Re-raise driver failures as StorageError."""
    try:
        yield
    except PyMongoError as exc:
        logger.error("Mongo %s failed: %s", operation, exc)
        raise StorageError(f"Storage unavailable during {operation}") from exc


def to_object_id(value: str) -> ObjectId | None:
    """Parse a hex id; None when it is not a valid ObjectId."""
    if isinstance(value, ObjectId):
        return value
    if not ObjectId.is_valid(value):
        return None
    return ObjectId(value)


def id_query_value(value: str) -> ObjectId | str:
    """Stored ``_id`` values are ObjectIds, but fixtures/imports may use plain strings."""
    return to_object_id(value) or value
