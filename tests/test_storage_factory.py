"""
Tests for startup storage selection.
"""

import pytest

from core.exceptions import StorageUnavailableError
from core.storage import StorageMode, create_storage_context, get_storage_mode
from core.storage.mongodb import MongoDBStorage


@pytest.fixture
def mongo_settings(test_settings):
    return test_settings.model_copy(update={
        "storage_backend": "mongodb",
        "mongodb_url": "mongodb://unreachable.invalid:27017",
        "mongodb_connect_timeout_ms": 50,
    })


def test_get_storage_mode(test_settings, mongo_settings):
    assert get_storage_mode(test_settings) == StorageMode.MEMORY
    assert get_storage_mode(mongo_settings) == StorageMode.MONGODB


@pytest.mark.asyncio
async def test_memory_backend_skips_connection(test_settings, monkeypatch):
    async def fail_setup(self):
        raise AssertionError("MongoDB must not be contacted")

    monkeypatch.setattr(MongoDBStorage, "setup", fail_setup)

    storage = await create_storage_context(test_settings)

    assert storage.mode == StorageMode.MEMORY
    assert await storage.events.count() == 2


@pytest.mark.asyncio
async def test_unreachable_mongodb_falls_back_to_seeded_memory(mongo_settings, monkeypatch):
    async def unavailable(self):
        raise StorageUnavailableError("MongoDB unreachable: timed out")

    monkeypatch.setattr(MongoDBStorage, "setup", unavailable)

    storage = await create_storage_context(mongo_settings)

    assert storage.mode == StorageMode.MEMORY
    assert storage.is_fallback
    assert await storage.events.count() == 2
    assert await storage.news.count() == 3
    assert await storage.members.count() == 6


@pytest.mark.asyncio
async def test_fallback_without_seed(mongo_settings, monkeypatch):
    async def unavailable(self):
        raise StorageUnavailableError()

    monkeypatch.setattr(MongoDBStorage, "setup", unavailable)
    settings = mongo_settings.model_copy(update={"seed_fallback_data": False})

    storage = await create_storage_context(settings)

    assert storage.mode == StorageMode.MEMORY
    assert await storage.events.count() == 0


@pytest.mark.asyncio
async def test_reachable_mongodb_is_used(mongo_settings, monkeypatch):
    sentinel = object()

    async def connected(self):
        return None

    monkeypatch.setattr(MongoDBStorage, "setup", connected)
    monkeypatch.setattr(MongoDBStorage, "context", lambda self: sentinel)

    assert await create_storage_context(mongo_settings) is sentinel
