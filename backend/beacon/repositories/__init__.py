"""Storage boundaries consumed by the SOS core."""

from __future__ import annotations

from beacon.repositories.interfaces import LocationStore, UserStore
from beacon.repositories.locations import MongoLocationStore
from beacon.repositories.users import MongoUserStore

__all__ = ["LocationStore", "MongoLocationStore", "MongoUserStore", "UserStore"]
