"""
Product API: MongoDB Connection Management
=============================================

What:  Async MongoDB client creation, teardown, and collection lookup.
How:   One AsyncIOMotorClient per process, created in the application
       lifespan and closed on shutdown. The client pools connections
       internally; every request reuses it.
Who:   Called by the lifespan handler in main.py; the resulting collection
       is wrapped in a ProductStore and injected into routes.

Connection Strategy:
    serverSelectionTimeoutMS bounds how long an operation waits for a
    reachable server, so a dead database turns into a DatabaseError (500)
    instead of a request that hangs forever.
    The client connects lazily: creating it never fails because the server
    is down. connect_to_mongo() pings once so the startup log tells the truth.
"""

import logging

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo.errors import PyMongoError

from app.config import settings

logger = logging.getLogger(__name__)


def create_client(url: str | None = None) -> AsyncIOMotorClient:
    """Create a Motor client with the configured timeouts (no I/O happens here)."""
    return AsyncIOMotorClient(
        url or settings.database_url,
        serverSelectionTimeoutMS=settings.mongo_server_selection_timeout_ms,
    )


def get_database(client: AsyncIOMotorClient) -> AsyncIOMotorDatabase:
    """Database named in the connection URL path, or settings.database_name."""
    return client.get_default_database(default=settings.database_name)


def get_products_collection(client: AsyncIOMotorClient) -> AsyncIOMotorCollection:
    return get_database(client)[settings.products_collection]


async def connect_to_mongo() -> AsyncIOMotorClient:
    """
    Create the process-wide client and verify the server answers.

    A failed ping is logged, not raised: the service still starts, requests
    fail with 500 until the database comes back, and /health reports it.
    """
    client = create_client()
    try:
        await client.admin.command("ping")
        logger.info("Connected to MongoDB (database=%s)", get_database(client).name)
    except PyMongoError as e:
        logger.error("Error connecting to MongoDB: %s", str(e))
    return client


def close_mongo_connection(client: AsyncIOMotorClient | None) -> None:
    """Close all pooled connections. Safe to call with None."""
    if client is not None:
        client.close()
        logger.info("MongoDB connection closed")
