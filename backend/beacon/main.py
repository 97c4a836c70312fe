"""beacon FastAPI application."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from beacon.api import contacts, health, sos
from beacon.core.config import settings
from beacon.db.mongo import close_mongo_client, ensure_indexes

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)


@asynccontextmanager
async def lifespan(_: FastAPI):
    if settings.mongo_ensure_indexes:
        await ensure_indexes()
    yield
    close_mongo_client()


app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(sos.router)
app.include_router(contacts.router)
