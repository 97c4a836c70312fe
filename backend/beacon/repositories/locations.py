"""Mongo-backed store for emergency-service locations."""

from __future__ import annotations

from typing import Any

from beacon.db.mongo import storage_errors
from beacon.models.coordinate import Coordinate
from beacon.models.location import ServiceLocation
from beacon.services.geo_service import BoundingBox

_LOCATION_FIELDS = {
    "name": 1,
    "address": 1,
    "email": 1,
    "phone1": 1,
    "latitude": 1,
    "longitude": 1,
    "serviceId": 1,
    "isDisabled": 1,
}


def _location_from_doc(doc: dict[str, Any]) -> ServiceLocation:
    service_id = doc.get("serviceId")
    return ServiceLocation(
        id=str(doc["_id"]),
        name=doc.get("name") or "",
        email=doc.get("email") or "",
        coordinate=Coordinate.from_fields(doc.get("latitude"), doc.get("longitude")),
        address=doc.get("address") or "",
        phone=doc.get("phone1") or "",
        service_id=str(service_id) if service_id is not None else None,
        is_disabled=bool(doc.get("isDisabled", False)),
    )


class MongoLocationStore:
    """LocationStore over the ``locations`` collection.

    Locations keep plain ``latitude``/``longitude`` numbers (no GeoJSON), so
    the only spatial query available is a range match on both fields.
    """

    def __init__(self, collection: Any) -> None:
        self._locations = collection

    async def find_in_bounding_box(
        self,
        box: BoundingBox,
        *,
        must_have_email: bool,
        limit: int,
    ) -> list[ServiceLocation]:
        if limit <= 0:
            return []
        query: dict[str, Any] = {
            "isDisabled": {"$ne": True},
            "latitude": {"$gte": box.min_lat, "$lte": box.max_lat},
            "longitude": {"$gte": box.min_lng, "$lte": box.max_lng},
        }
        if must_have_email:
            query["email"] = {"$exists": True, "$nin": [None, ""]}

        with storage_errors("location bounding-box query"):
            cursor = self._locations.find(query, _LOCATION_FIELDS).limit(limit)
            docs = await cursor.to_list(length=limit)
        return [_location_from_doc(d) for d in docs]
