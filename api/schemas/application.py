"""Recruitment application schemas."""

from typing import Annotated, ClassVar, Optional

from pydantic import Field

from api.schemas.common import (
    CamelModel,
    EmailStr,
    PartialUpdate,
    PhoneStr,
    RequiredStr,
    Stringish,
    UtcDatetime,
)
from core.entities import ApplicationStatus, Department, Position, StudyYear


class ApplicationCreate(CamelModel):
    """Public recruitment form."""

    full_name: RequiredStr
    email: EmailStr
    phone: PhoneStr
    roll_no: RequiredStr
    department: Department
    year: Annotated[StudyYear, Stringish]
    position: Position
    motivation: RequiredStr
    skills: Optional[str] = None
    linkedin: Optional[str] = None
    github: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "fullName": "Asha Raman",
                    "email": "asha.raman@klu.ac.in",
                    "phone": "9876543210",
                    "rollNo": "99220040123",
                    "department": "ECE",
                    "year": "2",
                    "position": "web-dev",
                    "motivation": "I want to build the chapter website.",
                }
            ]
        }
    }


class ApplicationUpdate(PartialUpdate):
    """Reviewer changes; notes and interview date may be cleared."""

    clearable: ClassVar[frozenset[str]] = frozenset({"notes", "interview_date"})

    status: Optional[ApplicationStatus] = Field(default=None)
    notes: Optional[str] = Field(default=None)
    interview_date: Optional[UtcDatetime] = Field(default=None)
