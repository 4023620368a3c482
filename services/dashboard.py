"""Admin dashboard figures, counted from the active storage."""

from typing import Any

from core.entities import ApplicationStatus, ContactStatus, EventStatus
from core.storage import Query, StorageContext


async def dashboard_stats(storage: StorageContext) -> dict[str, Any]:
    applications = storage.applications
    events = storage.events

    return {
        "storageMode": storage.mode.value,
        "applications": {
            "total": await applications.count(),
            **{
                status.value: await applications.count(Query(equals={"status": status.value}))
                for status in ApplicationStatus
            },
        },
        "events": {
            "total": await events.count(),
            "upcoming": await events.count(Query(equals={"status": EventStatus.UPCOMING.value})),
            "completed": await events.count(Query(equals={"status": EventStatus.COMPLETED.value})),
        },
        "members": {
            "total": await storage.members.count(),
            "active": await storage.members.count(Query(equals={"isActive": True})),
        },
        "news": {
            "total": await storage.news.count(),
            "published": await storage.news.count(Query(equals={"isPublished": True})),
        },
        "contacts": {
            "total": await storage.contacts.count(),
            "unread": await storage.contacts.count(Query(equals={"status": ContactStatus.NEW.value})),
        },
    }
