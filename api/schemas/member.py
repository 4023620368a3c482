"""Chapter member schemas."""

from typing import ClassVar, Optional

from pydantic import Field

from api.schemas.common import CamelModel, PartialUpdate, RequiredStr
from core.entities import Team


class SocialLinks(CamelModel):
    linkedin: Optional[str] = None
    instagram: Optional[str] = None
    github: Optional[str] = None
    twitter: Optional[str] = None


class MemberCreate(CamelModel):
    name: RequiredStr
    department: RequiredStr
    position: RequiredStr
    team: Team = Team.CORE
    email: Optional[str] = None
    phone: Optional[str] = None
    roll_no: Optional[str] = None
    year: Optional[str] = None
    bio: Optional[str] = None
    image: Optional[str] = None
    social_links: Optional[SocialLinks] = None
    is_active: bool = True
    # Omitted: placed after the current last member
    order: Optional[int] = Field(default=None, ge=0)


class MemberUpdate(PartialUpdate):
    clearable: ClassVar[frozenset[str]] = frozenset(
        {"email", "phone", "roll_no", "year", "bio", "image", "social_links"}
    )

    name: Optional[RequiredStr] = None
    department: Optional[RequiredStr] = None
    position: Optional[RequiredStr] = None
    team: Optional[Team] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    roll_no: Optional[str] = None
    year: Optional[str] = None
    bio: Optional[str] = None
    image: Optional[str] = None
    social_links: Optional[SocialLinks] = None
    is_active: Optional[bool] = None
    order: Optional[int] = Field(default=None, ge=0)
