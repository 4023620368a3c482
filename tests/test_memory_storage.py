"""
Tests for the in-memory storage backend.
"""

import asyncio

import pytest

from core.entities import APPLICATIONS, EVENTS, MEMBERS
from core.exceptions import DuplicateError, NotFoundError
from core.storage import (
    ASCENDING,
    InMemoryCollection,
    Page,
    Query,
    StorageMode,
    create_memory_context,
)
from core.storage.seed import demo_seed


@pytest.fixture
def events():
    return InMemoryCollection(EVENTS)


@pytest.mark.asyncio
async def test_insert_stamps_id_and_timestamps(events):
    event = await events.insert({"title": "Meetup"})

    assert len(event["id"]) == 32
    assert event["createdAt"] is not None
    assert event["updatedAt"] == event["createdAt"]
    assert event["createdAt"].tzinfo is not None


@pytest.mark.asyncio
async def test_application_uses_submitted_at():
    applications = InMemoryCollection(APPLICATIONS)
    application = await applications.insert({"email": "a@b.org", "rollNo": "1"})

    assert "submittedAt" in application
    assert "createdAt" not in application


@pytest.mark.asyncio
async def test_returned_documents_are_copies(events):
    event = await events.insert({"title": "Meetup", "tags": ["a"]})
    event["tags"].append("mutated")

    stored = await events.find_one(Query.by_id(event["id"]))
    assert stored["tags"] == ["a"]

    stored["title"] = "changed"
    again = await events.find_one(Query.by_id(event["id"]))
    assert again["title"] == "Meetup"


@pytest.mark.asyncio
async def test_unique_fields_enforced():
    applications = InMemoryCollection(APPLICATIONS)
    await applications.insert({"email": "a@b.org", "rollNo": "1", "applicationId": "X"})

    with pytest.raises(DuplicateError) as exc_info:
        await applications.insert({"email": "a@b.org", "rollNo": "2", "applicationId": "Y"})
    assert exc_info.value.field == "email"

    with pytest.raises(DuplicateError) as exc_info:
        await applications.insert({"email": "c@b.org", "rollNo": "1", "applicationId": "Z"})
    assert exc_info.value.field == "rollNo"


@pytest.mark.asyncio
async def test_duplicate_id_rejected(events):
    await events.insert({"id": "event-1", "title": "A"})
    with pytest.raises(DuplicateError):
        await events.insert({"id": "event-1", "title": "B"})


@pytest.mark.asyncio
async def test_find_one_missing_raises_not_found(events):
    with pytest.raises(NotFoundError) as exc_info:
        await events.find_one(Query.by_id("nope"))
    assert exc_info.value.message == "Event not found"


@pytest.mark.asyncio
async def test_first_returns_none(events):
    assert await events.first(Query.by_id("nope")) is None


@pytest.mark.asyncio
async def test_update_refreshes_updated_at(events):
    event = await events.insert({"title": "Meetup"})
    await asyncio.sleep(0.01)

    updated = await events.update(Query.by_id(event["id"]), {"title": "Workshop", "id": "hijack"})

    assert updated["title"] == "Workshop"
    assert updated["id"] == event["id"]
    assert updated["createdAt"] == event["createdAt"]
    assert updated["updatedAt"] > event["updatedAt"]


@pytest.mark.asyncio
async def test_update_missing_raises(events):
    with pytest.raises(NotFoundError):
        await events.update(Query.by_id("nope"), {"title": "x"})


@pytest.mark.asyncio
async def test_update_cannot_break_uniqueness():
    applications = InMemoryCollection(APPLICATIONS)
    await applications.insert({"email": "a@b.org", "rollNo": "1"})
    second = await applications.insert({"email": "c@b.org", "rollNo": "2"})

    with pytest.raises(DuplicateError):
        await applications.update(Query.by_id(second["id"]), {"email": "a@b.org"})


@pytest.mark.asyncio
async def test_delete(events):
    event = await events.insert({"title": "Meetup"})
    removed = await events.delete(Query.by_id(event["id"]))

    assert removed["id"] == event["id"]
    assert await events.count() == 0
    with pytest.raises(NotFoundError):
        await events.delete(Query.by_id(event["id"]))


@pytest.mark.asyncio
async def test_find_many_sorted_and_paged():
    members = InMemoryCollection(MEMBERS)
    for order in (3, 1, 2, 5, 4):
        await members.insert({"name": f"M{order}", "order": order})

    page = await members.find_many(None, [("order", ASCENDING)], Page(2, 2))
    assert [m["order"] for m in page] == [3, 4]


@pytest.mark.asyncio
async def test_find_page_reports_total():
    members = InMemoryCollection(MEMBERS)
    for i in range(25):
        await members.insert({"name": f"M{i}", "order": i})

    result = await members.find_page(Query(), [("order", ASCENDING)], Page(2, 10))

    assert result.total == 25
    assert result.total_pages == 3
    assert [m["order"] for m in result.items] == list(range(10, 20))


@pytest.mark.asyncio
async def test_increment_treats_missing_as_zero(events):
    event = await events.insert({"title": "Talk"})
    updated = await events.increment(Query.by_id(event["id"]), "currentParticipants")
    assert updated["currentParticipants"] == 1


@pytest.mark.asyncio
async def test_increment_respects_limit(events):
    event = await events.insert({"title": "Talk", "maxParticipants": 2, "currentParticipants": 1})
    query = Query.by_id(event["id"])

    first = await events.increment(query, "currentParticipants", limit_field="maxParticipants")
    assert first["currentParticipants"] == 2

    second = await events.increment(query, "currentParticipants", limit_field="maxParticipants")
    assert second is None

    stored = await events.find_one(query)
    assert stored["currentParticipants"] == 2


@pytest.mark.asyncio
@pytest.mark.parametrize("limit", [None, 0])
async def test_increment_without_cap_is_unlimited(events, limit):
    event = await events.insert({"title": "Talk", "maxParticipants": limit, "currentParticipants": 500})
    updated = await events.increment(
        Query.by_id(event["id"]),
        "currentParticipants",
        limit_field="maxParticipants",
    )
    assert updated["currentParticipants"] == 501


@pytest.mark.asyncio
async def test_increment_missing_raises(events):
    with pytest.raises(NotFoundError):
        await events.increment(Query.by_id("nope"), "views")


@pytest.mark.asyncio
async def test_concurrent_increments_never_exceed_cap(events):
    event = await events.insert({"title": "Talk", "maxParticipants": 10, "currentParticipants": 0})
    query = Query.by_id(event["id"])

    results = await asyncio.gather(*[
        events.increment(query, "currentParticipants", limit_field="maxParticipants")
        for _ in range(25)
    ])

    assert sum(1 for r in results if r is not None) == 10
    stored = await events.find_one(query)
    assert stored["currentParticipants"] == 10


@pytest.mark.asyncio
async def test_concurrent_view_increments_are_not_lost(events):
    event = await events.insert({"title": "News", "views": 0})
    query = Query.by_id(event["id"])

    await asyncio.gather(*[events.increment(query, "views") for _ in range(50)])

    stored = await events.find_one(query)
    assert stored["views"] == 50


@pytest.mark.asyncio
async def test_memory_context_with_seed():
    storage = create_memory_context(demo_seed())

    assert storage.mode == StorageMode.MEMORY
    assert storage.is_fallback
    assert await storage.events.count() == 2
    assert await storage.news.count() == 3
    assert await storage.members.count() == 6
    assert await storage.users.count() == 0

    event = await storage.events.find_one(Query.by_id("event-1"))
    assert event["title"] == "DigiCon 3.0 Hackathon"
    assert set(storage.collections()) == {
        "users", "applications", "contacts", "events", "members", "news",
    }


@pytest.mark.asyncio
async def test_seed_is_not_shared_between_contexts():
    first = create_memory_context(demo_seed())
    second = create_memory_context(demo_seed())

    await first.events.update(Query.by_id("event-1"), {"title": "Changed"})

    event = await second.events.find_one(Query.by_id("event-1"))
    assert event["title"] == "DigiCon 3.0 Hackathon"
