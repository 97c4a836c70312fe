"""Mongo-backed user store (requester lookups, nearby users, SOS contacts)."""

from __future__ import annotations

from collections.abc import Collection
from datetime import datetime
from typing import Any

from bson import ObjectId

from beacon.db.mongo import id_query_value, storage_errors
from beacon.models.coordinate import Coordinate
from beacon.models.user import NearbyUser, PersonalContact, Requester

_REQUESTER_FIELDS = {
    "name": 1,
    "email": 1,
    "mobile": 1,
    "location": 1,
    "lastLocationAt": 1,
    "sosContacts": 1,
}
_NEARBY_FIELDS = {"name": 1, "email": 1, "location": 1, "lastLocationAt": 1}
_CONTACT_FIELDS = ("name", "relation", "email", "mobile")


def _contact_from_doc(doc: dict[str, Any]) -> PersonalContact:
    return PersonalContact(
        id=str(doc.get("_id", "")),
        name=doc.get("name") or "",
        relation=doc.get("relation") or "",
        email=doc.get("email") or "",
        mobile=doc.get("mobile") or "",
    )


def _requester_from_doc(doc: dict[str, Any]) -> Requester:
    return Requester(
        id=str(doc["_id"]),
        name=doc.get("name") or "",
        email=doc.get("email") or "",
        mobile=doc.get("mobile") or None,
        coordinate=Coordinate.from_geojson(doc.get("location")),
        last_location_at=doc.get("lastLocationAt"),
        contacts=[_contact_from_doc(c) for c in doc.get("sosContacts") or []],
    )


def _nearby_from_doc(doc: dict[str, Any]) -> NearbyUser:
    return NearbyUser(
        id=str(doc["_id"]),
        name=doc.get("name") or "",
        email=doc.get("email") or "",
        coordinate=Coordinate.from_geojson(doc.get("location")),
        last_location_at=doc.get("lastLocationAt"),
    )


class MongoUserStore:
    """UserStore over the ``users`` collection.

    Users carry a GeoJSON ``location`` with a 2dsphere index, so nearby
    lookups use ``$near`` which already returns documents nearest first.
    """

    def __init__(self, collection: Any) -> None:
        self._users = collection

    async def get_requester(self, user_id: str) -> Requester | None:
        with storage_errors("requester lookup"):
            doc = await self._users.find_one({"_id": id_query_value(user_id)}, _REQUESTER_FIELDS)
        return _requester_from_doc(doc) if doc else None

    async def find_users_near(
        self,
        center: Coordinate,
        radius_m: float,
        *,
        exclude_ids: Collection[str],
        fresh_since: datetime | None,
        limit: int,
    ) -> list[NearbyUser]:
        if limit <= 0:
            return []
        query: dict[str, Any] = {
            "_id": {"$nin": [id_query_value(i) for i in exclude_ids]},
            "email": {"$nin": [None, ""]},
            "location": {
                "$near": {
                    "$geometry": center.to_geojson(),
                    "$maxDistance": radius_m,
                }
            },
        }
        if fresh_since is not None:
            query["lastLocationAt"] = {"$gte": fresh_since}

        with storage_errors("nearby users query"):
            cursor = self._users.find(query, _NEARBY_FIELDS).limit(limit)
            docs = await cursor.to_list(length=limit)
        return [_nearby_from_doc(d) for d in docs]

    # ---------- SOS contacts ----------

    async def list_contacts(self, user_id: str) -> list[PersonalContact] | None:
        with storage_errors("contact listing"):
            doc = await self._users.find_one({"_id": id_query_value(user_id)}, {"sosContacts": 1})
        if not doc:
            return None
        return [_contact_from_doc(c) for c in doc.get("sosContacts") or []]

    async def add_contact(self, user_id: str, contact: dict[str, Any]) -> PersonalContact:
        doc = {"_id": ObjectId(), **{k: contact.get(k, "") for k in _CONTACT_FIELDS}}
        with storage_errors("contact insert"):
            await self._users.update_one(
                {"_id": id_query_value(user_id)},
                {"$push": {"sosContacts": doc}},
            )
        return _contact_from_doc(doc)

    async def update_contact(self, user_id: str, contact_id: str, changes: dict[str, Any]) -> bool:
        update = {f"sosContacts.$.{k}": v for k, v in changes.items() if k in _CONTACT_FIELDS}
        if not update:
            return True
        with storage_errors("contact update"):
            result = await self._users.update_one(
                {"_id": id_query_value(user_id), "sosContacts._id": id_query_value(contact_id)},
                {"$set": update},
            )
        return result.matched_count > 0

    async def delete_contact(self, user_id: str, contact_id: str) -> bool:
        with storage_errors("contact delete"):
            result = await self._users.update_one(
                {"_id": id_query_value(user_id)},
                {"$pull": {"sosContacts": {"_id": id_query_value(contact_id)}}},
            )
        return result.modified_count > 0
