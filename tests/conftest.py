"""Shared fixtures: a Database over the in-memory fake client, and an httpx client for the app.

get_database is overridden for these fixtures; test_startup.py drives the real startup hook instead.
"""

import os

os.environ.setdefault("MONGODB_URI", "mongodb://localhost:27017/studentdb_test")

import pytest
from httpx import ASGITransport, AsyncClient

from database import Database, get_database
from main import app
from tests.mock_motor import FakeMongoClient


@pytest.fixture
def mongo():
    return FakeMongoClient()


@pytest.fixture
async def database(mongo):
    db = Database(mongo, "studentdb_test")
    await db.connect()
    return db


@pytest.fixture
def students_collection(database):
    return database.students.collection


@pytest.fixture
async def client(database):
    app.dependency_overrides[get_database] = lambda: database
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def dana():
    return {"name": "Dana Kim", "age": 21, "course": "Civil Engineering"}


@pytest.fixture
async def created(client, dana):
    res = await client.post("/students", json=dana)
    assert res.status_code == 201
    return res.json()
