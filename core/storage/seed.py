"""
Baseline demo records loaded into the fallback store.

Also used by scripts/setup_db.py to populate an empty MongoDB database.
"""

import copy
from datetime import datetime, timezone
from typing import Any


def _utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


DEMO_EVENTS: list[dict[str, Any]] = [
    {
        "id": "event-1",
        "title": "DigiCon 3.0 Hackathon",
        "description": "Annual hackathon competition for innovative solutions in embedded systems and IoT.",
        "shortDescription": "Annual hackathon for embedded systems innovation",
        "eventType": "hackathon",
        "date": _utc(2026, 2, 15),
        "endDate": _utc(2026, 2, 16),
        "time": "9:00 AM - 6:00 PM",
        "venue": "Main Auditorium, KARE",
        "isOnline": False,
        "maxParticipants": 200,
        "currentParticipants": 45,
        "status": "upcoming",
        "isFeatured": True,
        "tags": ["hackathon", "embedded-systems", "iot"],
    },
    {
        "id": "event-2",
        "title": "Workshop on Embedded Systems",
        "description": "Hands-on workshop covering fundamentals of embedded systems programming.",
        "shortDescription": "Learn embedded systems programming basics",
        "eventType": "workshop",
        "date": _utc(2026, 2, 20),
        "time": "10:00 AM - 4:00 PM",
        "venue": "Lab 301, ECE Department",
        "isOnline": False,
        "maxParticipants": 50,
        "currentParticipants": 12,
        "status": "upcoming",
        "isFeatured": False,
        "tags": ["workshop", "embedded-systems", "programming"],
    },
]

DEMO_NEWS: list[dict[str, Any]] = [
    {
        "id": "news-1",
        "title": "DigiCon Hackathon Round 2",
        "content": "The second round of DigiCon Hackathon was successfully conducted with participation from over 100 students.",
        "excerpt": "Second round of DigiCon Hackathon conducted successfully.",
        "category": "event",
        "source": "KARE ACM SIGBED",
        "author": "Web Development Team",
        "isPublished": True,
        "isFeatured": True,
        "views": 150,
        "publishedAt": _utc(2025, 10, 27),
        "createdAt": _utc(2025, 10, 27),
    },
    {
        "id": "news-2",
        "title": "Gandhi Jayanti 2025",
        "content": "KARE ACM SIGBED wishes everyone a Happy Gandhi Jayanti.",
        "excerpt": "Gandhi Jayanti wishes from KARE ACM SIGBED",
        "category": "announcement",
        "source": "Web Development Division",
        "isPublished": True,
        "isFeatured": False,
        "views": 89,
        "publishedAt": _utc(2025, 10, 2),
        "createdAt": _utc(2025, 10, 2),
    },
    {
        "id": "news-3",
        "title": "SiGBED KARE Student Chapter Inauguration",
        "content": "The official inauguration of KARE ACM SIGBED Student Chapter was held with great enthusiasm.",
        "excerpt": "Official inauguration of the student chapter",
        "category": "event",
        "source": "Public Relations Team",
        "isPublished": True,
        "isFeatured": True,
        "views": 234,
        "publishedAt": _utc(2025, 7, 14),
        "createdAt": _utc(2025, 7, 14),
    },
]

DEMO_MEMBERS: list[dict[str, Any]] = [
    {
        "id": "member-1",
        "name": "Dr. Muneeswaran V",
        "position": "Faculty Sponsor",
        "department": "Electronics & Communication Engineering",
        "team": "faculty",
        "isActive": True,
        "order": 1,
    },
    {
        "id": "member-2",
        "name": "Dr. P Manikandan",
        "position": "Faculty Coordinator",
        "department": "Electronics & Communication Engineering",
        "team": "faculty",
        "isActive": True,
        "order": 2,
    },
    {
        "id": "member-3",
        "name": "Sai Siddardha Davuluri",
        "position": "Chairperson",
        "department": "Computer Science",
        "team": "core",
        "bio": "Leading the KARE ACM SIGBED Student Chapter with passion for embedded systems.",
        "isActive": True,
        "order": 3,
    },
    {
        "id": "member-4",
        "name": "Selva Jotheha C A",
        "position": "Secretary",
        "department": "Electronics & Communications",
        "team": "core",
        "isActive": True,
        "order": 4,
    },
    {
        "id": "member-5",
        "name": "Nischal S Tumbeti",
        "position": "Web Information Manager",
        "department": "Computer Science",
        "team": "web-development",
        "isActive": True,
        "order": 5,
    },
    {
        "id": "member-6",
        "name": "Neelakanteswar Reddy B",
        "position": "Public Relations Team",
        "department": "Electronics & Communication",
        "team": "public-relations",
        "isActive": True,
        "order": 6,
    },
]


def demo_seed() -> dict[str, list[dict[str, Any]]]:
    """Fresh copies of the demo records, keyed by collection name."""
    return {
        "events": copy.deepcopy(DEMO_EVENTS),
        "news": copy.deepcopy(DEMO_NEWS),
        "members": copy.deepcopy(DEMO_MEMBERS),
    }
