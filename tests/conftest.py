"""Shared fixtures: an in-memory motor client swapped into the Mongo holder."""

import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from family_tree.db.mongo import mongo
from family_tree.services.person_service import create_person


@pytest_asyncio.fixture
async def db():
    """Fresh in-memory database per test."""
    mongo.client = AsyncMongoMockClient()
    yield mongo.client
    mongo.client = None


@pytest.fixture
def make_person(db):
    """Factory creating stored persons by name."""

    async def _make(name, birth_date=None):
        return await create_person(name, birth_date)

    return _make
