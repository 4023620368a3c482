"""
Entity catalogue.

Enumerations shared by schemas and services, plus the per-collection
storage rules (creation timestamp field, unique fields) that both
storage backends enforce the same way.
"""

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    MODERATOR = "moderator"
    MEMBER = "member"


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    REVIEWING = "reviewing"
    SHORTLISTED = "shortlisted"
    ACCEPTED = "accepted"
    REJECTED = "rejected"


class Department(str, Enum):
    CSE = "CSE"
    ECE = "ECE"
    EEE = "EEE"
    MECH = "MECH"
    CIVIL = "CIVIL"
    IT = "IT"
    OTHER = "OTHER"


class StudyYear(str, Enum):
    FIRST = "1"
    SECOND = "2"
    THIRD = "3"
    FOURTH = "4"


class Position(str, Enum):
    WEB_DEV = "web-dev"
    PR = "pr"
    TECHNICAL = "technical"
    EVENT = "event"
    CONTENT = "content"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    ONGOING = "ongoing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class EventType(str, Enum):
    WORKSHOP = "workshop"
    HACKATHON = "hackathon"
    SEMINAR = "seminar"
    COMPETITION = "competition"
    WEBINAR = "webinar"
    MEETUP = "meetup"
    OTHER = "other"


class Team(str, Enum):
    FACULTY = "faculty"
    CORE = "core"
    WEB_DEVELOPMENT = "web-development"
    PUBLIC_RELATIONS = "public-relations"
    TECHNICAL = "technical"
    EVENT_MANAGEMENT = "event-management"
    CONTENT = "content"


class NewsCategory(str, Enum):
    ANNOUNCEMENT = "announcement"
    ACHIEVEMENT = "achievement"
    EVENT = "event"
    GENERAL = "general"
    UPDATE = "update"


class ContactStatus(str, Enum):
    NEW = "new"
    READ = "read"
    REPLIED = "replied"
    ARCHIVED = "archived"


class ContactCategory(str, Enum):
    GENERAL = "general"
    FEEDBACK = "feedback"
    QUERY = "query"
    COMPLAINT = "complaint"
    PARTNERSHIP = "partnership"
    OTHER = "other"


@dataclass(frozen=True)
class CollectionSpec:
    """
    Storage rules for one collection.

    Attributes:
        name: Collection name in MongoDB and key in the storage context
        label: Human-readable entity name used in error messages
        created_field: Field stamped once at insert
        updated_field: Field stamped at insert and on every mutation
        unique_fields: Fields that must not repeat across records
    """
    name: str
    label: str
    created_field: str = "createdAt"
    updated_field: str = "updatedAt"
    unique_fields: tuple[str, ...] = field(default_factory=tuple)


USERS = CollectionSpec(name="users", label="User", unique_fields=("email",))
APPLICATIONS = CollectionSpec(
    name="applications",
    label="Application",
    created_field="submittedAt",
    unique_fields=("applicationId", "email", "rollNo"),
)
CONTACTS = CollectionSpec(name="contacts", label="Contact message")
EVENTS = CollectionSpec(name="events", label="Event")
MEMBERS = CollectionSpec(name="members", label="Member")
NEWS = CollectionSpec(name="news", label="News")

ALL_COLLECTIONS: tuple[CollectionSpec, ...] = (
    USERS,
    APPLICATIONS,
    CONTACTS,
    EVENTS,
    MEMBERS,
    NEWS,
)
