"""Event schemas."""

from typing import ClassVar, Optional

from pydantic import Field

from api.schemas.common import CamelModel, EmailStr, PartialUpdate, RequiredStr, UtcDatetime
from core.entities import EventStatus, EventType


class Speaker(CamelModel):
    name: RequiredStr
    designation: Optional[str] = None
    organization: Optional[str] = None
    image: Optional[str] = None


class EventCreate(CamelModel):
    title: RequiredStr
    description: RequiredStr
    date: UtcDatetime
    short_description: Optional[str] = None
    event_type: EventType = EventType.OTHER
    end_date: Optional[UtcDatetime] = None
    time: Optional[str] = None
    venue: Optional[str] = None
    is_online: bool = False
    meeting_link: Optional[str] = None
    image: Optional[str] = None
    registration_link: Optional[str] = None
    max_participants: Optional[int] = Field(default=None, ge=0)
    speakers: list[Speaker] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    status: EventStatus = EventStatus.UPCOMING
    is_featured: bool = False


class EventUpdate(PartialUpdate):
    clearable: ClassVar[frozenset[str]] = frozenset({
        "short_description",
        "end_date",
        "time",
        "venue",
        "meeting_link",
        "image",
        "registration_link",
        "max_participants",
    })

    title: Optional[RequiredStr] = None
    description: Optional[RequiredStr] = None
    date: Optional[UtcDatetime] = None
    short_description: Optional[str] = None
    event_type: Optional[EventType] = None
    end_date: Optional[UtcDatetime] = None
    time: Optional[str] = None
    venue: Optional[str] = None
    is_online: Optional[bool] = None
    meeting_link: Optional[str] = None
    image: Optional[str] = None
    registration_link: Optional[str] = None
    max_participants: Optional[int] = Field(default=None, ge=0)
    current_participants: Optional[int] = Field(default=None, ge=0)
    speakers: Optional[list[Speaker]] = None
    tags: Optional[list[str]] = None
    status: Optional[EventStatus] = None
    is_featured: Optional[bool] = None


class EventRegistration(CamelModel):
    name: RequiredStr
    email: EmailStr
    phone: Optional[str] = None
    roll_no: Optional[str] = None
    department: Optional[str] = None
