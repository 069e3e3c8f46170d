"""
Inventory API - Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   pytest auto-discovers conftest.py and makes fixtures available to all tests.

Fixtures (function-scoped):
    ├── fake_collection: In-memory stand-in for the `productos` collection
    ├── failing_collection: Collection whose every driver call raises
    ├── sample_product_data: Create payload used across test files
    └── test_client: HTTPX AsyncClient wired to the app with the fake collection
"""

import copy
import os
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo.errors import ServerSelectionTimeoutError
from pymongo.results import InsertOneResult

# ══════════════════════════════════════════════════════════════════════════
# Environment Setup
# ══════════════════════════════════════════════════════════════════════════

# Set before any app import so Settings() picks these values up
os.environ["MONGODB_URI"] = "mongodb://localhost:27017/productos_test"
os.environ["LOG_LEVEL"] = "WARNING"


# ══════════════════════════════════════════════════════════════════════════
# In-memory collection double
# ══════════════════════════════════════════════════════════════════════════


class FakeCursor:
    """Mimics the `to_list()` part of pymongo's AsyncCursor."""

    def __init__(self, documents):
        self._documents = documents

    async def to_list(self, length=None):
        docs = [copy.deepcopy(d) for d in self._documents]
        return docs if length is None else docs[:length]


class FakeCollection:
    """
    Supports the subset of AsyncCollection used by ProductService.

    Documents are kept in insertion order keyed by `_id`; every read returns
    a deep copy so tests cannot mutate stored state by accident.
    Only `{"_id": ...}` filters are understood.
    """

    def __init__(self):
        self.documents = {}

    async def insert_one(self, document):
        document.setdefault("_id", ObjectId())
        self.documents[document["_id"]] = copy.deepcopy(document)
        return InsertOneResult(document["_id"], acknowledged=True)

    def find(self, filter=None):
        return FakeCursor(list(self.documents.values()))

    async def find_one(self, filter, projection=None):
        document = self.documents.get(filter["_id"])
        return copy.deepcopy(document) if document is not None else None

    async def find_one_and_update(self, filter, update, return_document=False):
        document = self.documents.get(filter["_id"])
        if document is None:
            return None
        before = copy.deepcopy(document)
        document.update(update.get("$set", {}))
        # ReturnDocument.AFTER is True, ReturnDocument.BEFORE is False
        return copy.deepcopy(document) if return_document else before

    async def find_one_and_delete(self, filter):
        return self.documents.pop(filter["_id"], None)


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════


@pytest.fixture
def fake_collection():
    """A fresh, empty in-memory collection for each test."""
    return FakeCollection()


@pytest.fixture
def failing_collection():
    """
    A collection whose driver calls all fail as if MongoDB were down.

    Usage:
        with pytest.raises(StoreError):
            await service.list_all(failing_collection)
    """
    error = ServerSelectionTimeoutError("localhost:27017: connection refused")
    collection = MagicMock()
    collection.insert_one = AsyncMock(side_effect=error)
    collection.find.return_value.to_list = AsyncMock(side_effect=error)
    collection.find_one = AsyncMock(side_effect=error)
    collection.find_one_and_update = AsyncMock(side_effect=error)
    collection.find_one_and_delete = AsyncMock(side_effect=error)
    return collection


@pytest.fixture
def sample_product_data():
    """The product used in the API documentation examples."""
    return {
        "name": "Teclado mecánico",
        "price": 89.99,
        "quantity": 15,
        "brand": "Magik",
    }


@pytest_asyncio.fixture
async def test_client(fake_collection):
    """
    HTTPX AsyncClient talking to the FastAPI app through ASGITransport.

    ASGITransport does not run the lifespan, so no MongoDB client is created;
    the products collection dependency is overridden with `fake_collection`.

    Usage:
        async def test_list(test_client):
            response = await test_client.get("/api/productos")
            assert response.status_code == 200
    """
    from app.database import get_products_collection
    from app.main import app

    app.dependency_overrides[get_products_collection] = lambda: fake_collection
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
