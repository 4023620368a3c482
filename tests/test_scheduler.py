"""
Tests for the startup bootstrap scheduler.
"""

import asyncio

import pytest

from core.storage import Query
from services.scheduler import BootstrapScheduler


class FailingCredentials:
    """Credential service stand-in whose bootstrap always fails."""

    def __init__(self, settings):
        self.settings = settings
        self.calls = 0

    async def ensure_default_admin(self) -> bool:
        self.calls += 1
        raise RuntimeError("users collection unavailable")


@pytest.mark.asyncio
async def test_bootstrap_runs_once_after_start(credentials, storage):
    scheduler = BootstrapScheduler(credentials, delay_seconds=0)
    await scheduler.start()
    try:
        assert scheduler.is_running
        await asyncio.wait_for(scheduler.completed.wait(), timeout=5)
    finally:
        await scheduler.shutdown()

    assert not scheduler.is_running
    admins = await storage.users.find_many(Query(equals={"role": "admin"}))
    assert len(admins) == 1


@pytest.mark.asyncio
async def test_delay_defaults_to_settings(credentials, test_settings):
    scheduler = BootstrapScheduler(credentials)
    assert scheduler.delay_seconds == test_settings.admin_bootstrap_delay_seconds


@pytest.mark.asyncio
async def test_failed_bootstrap_is_contained(test_settings):
    failing = FailingCredentials(test_settings)
    scheduler = BootstrapScheduler(failing, delay_seconds=0)
    await scheduler.start()
    try:
        await asyncio.wait_for(scheduler.completed.wait(), timeout=5)
        assert scheduler.is_running
    finally:
        await scheduler.shutdown()

    assert failing.calls == 1


@pytest.mark.asyncio
async def test_run_bootstrap_directly(credentials, storage):
    scheduler = BootstrapScheduler(credentials, delay_seconds=60)

    await scheduler.run_bootstrap()
    await scheduler.run_bootstrap()

    assert scheduler.completed.is_set()
    assert await storage.users.count() == 1


@pytest.mark.asyncio
async def test_shutdown_without_start_is_noop(credentials):
    scheduler = BootstrapScheduler(credentials)
    await scheduler.shutdown()
    assert not scheduler.is_running
