"""
Inventory API - Document Store Connection
==========================================

What:  MongoDB client construction, startup ping, and FastAPI dependencies.
How:   `create_mongo_client()` builds one AsyncMongoClient per process. The
       lifespan handler in main.py stores it on `app.state.mongo_client`;
       route handlers receive the database/collection through Depends().
Who:   main.py (lifecycle), routes (dependencies), tests (dependency overrides).
When:  Client created once at startup, closed at shutdown. Collections are
       resolved per request from the shared client.

The driver connects lazily and keeps its own connection pool, so a single
client serves every concurrent request on the event loop.
"""

import logging
from typing import Optional

from fastapi import Depends, Request
from pymongo import AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError

from app.config import Settings, settings
from app.exceptions import StoreError
from app.models.product import PRODUCTS_COLLECTION

logger = logging.getLogger(__name__)


# ── Client Lifecycle ──────────────────────────────────────────────────────
def create_mongo_client(config: Settings = settings) -> AsyncMongoClient:
    """
    Build the process-wide MongoDB client.

    tz_aware=True makes the driver return timezone-aware UTC datetimes,
    matching the aware timestamps the service writes.
    """
    return AsyncMongoClient(
        config.mongodb_uri,
        serverSelectionTimeoutMS=config.mongodb_timeout_ms,
        tz_aware=True,
    )


def get_default_database(
    client: AsyncMongoClient, config: Settings = settings
) -> AsyncDatabase:
    """Database named in the URI, or MONGODB_DATABASE when the URI has none."""
    return client.get_default_database(default=config.mongodb_database)


async def ping_database(client: AsyncMongoClient) -> bool:
    """
    Check that the server answers a `ping`.

    Returns False instead of raising; callers decide whether an unreachable
    store is fatal (at startup it is only logged).
    """
    try:
        await client.admin.command("ping")
        return True
    except PyMongoError as e:
        logger.error("MongoDB ping failed: %s", str(e))
        return False


async def close_mongo_client(client: AsyncMongoClient) -> None:
    """Close all pooled connections. Called during application shutdown."""
    await client.close()


# ── Request Dependencies ──────────────────────────────────────────────────
def get_mongo_client(request: Request) -> AsyncMongoClient:
    """
    The client created by the lifespan handler.

    Raises:
        StoreError: the client could not be created at startup.
    """
    client = getattr(request.app.state, "mongo_client", None)
    if client is None:
        raise StoreError(context={"operation": "connect", "error": "no MongoDB client"})
    return client


def get_optional_database(request: Request) -> Optional[AsyncDatabase]:
    """Like get_database, but None instead of an error when there is no client."""
    client = getattr(request.app.state, "mongo_client", None)
    return None if client is None else get_default_database(client)


def get_database(client: AsyncMongoClient = Depends(get_mongo_client)) -> AsyncDatabase:
    """
    FastAPI dependency providing the application database.

    Raises StoreError (500) through get_mongo_client when startup could not
    build a client. get_products_collection builds on it.
    """
    return get_default_database(client)


def get_products_collection(
    db: AsyncDatabase = Depends(get_database),
) -> AsyncCollection:
    """FastAPI dependency providing the `productos` collection."""
    return db[PRODUCTS_COLLECTION]
