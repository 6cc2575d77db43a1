"""Shared fixtures: in-memory Mongo behind the Database manager, and an HTTP client."""

from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from app.core.database import Database
from app.main import app


@pytest.fixture
async def db():
    client = AsyncMongoMockClient()
    Database.client = client
    Database.db = client["plants_catalog_test"]
    await Database.create_indexes()
    yield Database.db
    Database.client = None
    Database.db = None


@pytest.fixture
async def client(db):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def base_time():
    return datetime(2024, 3, 1, 12, 0, 0)


@pytest.fixture
async def category(db, base_time):
    doc = {
        "name": "Indoor",
        "description": "House plants",
        "status": "active",
        "created_at": base_time,
        "updated_at": base_time,
    }
    result = await db["categories"].insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc


@pytest.fixture
async def make_plant(db, base_time):
    counter = {"n": 0}

    async def _make(name=None, category_ids=(), **fields):
        counter["n"] += 1
        created = base_time + timedelta(days=counter["n"])
        doc = {
            "name": name or f"Plant {counter['n']:02d}",
            "description": f"Description {counter['n']}",
            "image": f"plant-{counter['n']}.jpg",
            "status": "active",
            "category_ids": list(category_ids),
            "favorite_count": 0,
            "created_at": created,
            "updated_at": created,
        }
        doc.update(fields)
        result = await db["plants"].insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    return _make


@pytest.fixture
async def user(db, base_time):
    doc = {
        "first_name": "Ada",
        "last_name": "Gardener",
        "email": "ada@example.com",
        "status": "active",
        "created_at": base_time,
        "updated_at": base_time,
    }
    result = await db["users"].insert_one(doc)
    doc["_id"] = result.inserted_id
    return doc
