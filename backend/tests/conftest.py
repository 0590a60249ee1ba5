"""
Product API: Test Configuration (conftest.py)
================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixture Hierarchy:
    ├── product_payload:    The Galaxy S21 example body
    ├── mock_collection:    AsyncMock standing in for a Motor collection
    ├── memory_collection:  In-memory collection double (real CRUD semantics)
    ├── product_store:      ProductStore over memory_collection
    └── test_client:        HTTPX AsyncClient against a fresh app whose
                            get_product_store dependency returns product_store
"""

import copy
import os
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo.errors import ServerSelectionTimeoutError

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set before any app import so the settings singleton never sees a real database
os.environ["DATABASE_URL"] = "mongodb://127.0.0.1:27017/products_test"
os.environ["LOG_LEVEL"] = "WARNING"

from app.services.product_store import ProductStore  # noqa: E402


# ══════════════════════════════════════════════════════════════════════════
# In-Memory Collection Double
# ══════════════════════════════════════════════════════════════════════════

class _InMemoryCursor:
    def __init__(self, documents):
        self._documents = documents

    async def to_list(self, length=None):
        return self._documents if length is None else self._documents[:length]


class _InMemoryDatabase:
    def __init__(self):
        self.reachable = True

    async def command(self, name):
        if not self.reachable:
            raise ServerSelectionTimeoutError("127.0.0.1:27017: connection refused")
        return {"ok": 1.0}


class InMemoryCollection:
    """
    The subset of the Motor collection API that ProductStore uses.

    Documents are copied on the way in and out, like a real round trip
    through the driver. Dict order gives natural insertion order.
    """

    def __init__(self):
        self.documents = {}
        self.database = _InMemoryDatabase()

    async def insert_one(self, document):
        document.setdefault("_id", ObjectId())
        self.documents[document["_id"]] = copy.deepcopy(document)
        return SimpleNamespace(inserted_id=document["_id"], acknowledged=True)

    def find(self, filter=None):
        return _InMemoryCursor([copy.deepcopy(d) for d in self.documents.values()])

    async def find_one(self, filter):
        document = self.documents.get(filter["_id"])
        return copy.deepcopy(document) if document is not None else None

    async def find_one_and_update(self, filter, update, return_document=None):
        document = self.documents.get(filter["_id"])
        if document is None:
            return None
        document.update(copy.deepcopy(update["$set"]))
        return copy.deepcopy(document)

    async def delete_one(self, filter):
        removed = self.documents.pop(filter["_id"], None)
        return SimpleNamespace(deleted_count=0 if removed is None else 1, acknowledged=True)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def product_payload():
    """The canonical example product (no id)."""
    return {
        "name": "Galaxy S21",
        "brand": "Samsung",
        "ram": 8,
        "camera": "64 MP",
        "network": "5G",
        "fingerprint": True,
        "price": 799,
    }


@pytest.fixture
def mock_collection():
    """
    A mock Motor collection for driver-level unit tests.

    Usage:
        mock_collection.find_one.return_value = {"_id": oid, ...}
        await ProductStore(mock_collection).get_product_by_id(str(oid))
    """
    collection = MagicMock()
    collection.insert_one = AsyncMock()
    collection.find_one = AsyncMock()
    collection.find_one_and_update = AsyncMock()
    collection.delete_one = AsyncMock()
    collection.database.command = AsyncMock(return_value={"ok": 1.0})
    return collection


@pytest.fixture
def memory_collection():
    return InMemoryCollection()


@pytest.fixture
def product_store(memory_collection):
    return ProductStore(memory_collection)


@pytest_asyncio.fixture
async def test_client(product_store):
    """
    HTTPX AsyncClient wired to a fresh app instance.

    raise_app_exceptions=False lets tests observe the 500 response produced
    by the catch-all handler instead of the re-raised exception.
    """
    from app.main import create_app
    from app.routes.products import get_product_store

    app = create_app()
    app.dependency_overrides[get_product_store] = lambda: product_store
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
