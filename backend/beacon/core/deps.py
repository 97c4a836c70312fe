"""FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from beacon.core.security import token_subject
from beacon.db.mongo import get_locations_collection, get_users_collection
from beacon.repositories import LocationStore, MongoLocationStore, MongoUserStore, UserStore
from beacon.services.mailer import Mailer
from beacon.services.mailer import get_mailer as _mailer_from_settings

security = HTTPBearer(auto_error=False)


def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> str:
    """Require a valid bearer token. Returns the user id from ``sub``."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user_id = token_subject(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def get_user_store() -> UserStore:
    return MongoUserStore(get_users_collection())


def get_location_store() -> LocationStore:
    return MongoLocationStore(get_locations_collection())


def get_mailer() -> Mailer:
    return _mailer_from_settings()
