"""
Pydantic schemas for API request/response validation.
"""

from api.schemas.application import ApplicationCreate, ApplicationUpdate
from api.schemas.auth import ChangePasswordRequest, LoginRequest, RegisterRequest
from api.schemas.common import ApiResponse, ok
from api.schemas.contact import ContactCreate, ContactUpdate
from api.schemas.event import EventCreate, EventRegistration, EventUpdate
from api.schemas.member import MemberCreate, MemberUpdate
from api.schemas.news import NewsCreate, NewsUpdate

__all__ = [
    "ApiResponse",
    "ok",
    "ApplicationCreate",
    "ApplicationUpdate",
    "ChangePasswordRequest",
    "LoginRequest",
    "RegisterRequest",
    "ContactCreate",
    "ContactUpdate",
    "EventCreate",
    "EventRegistration",
    "EventUpdate",
    "MemberCreate",
    "MemberUpdate",
    "NewsCreate",
    "NewsUpdate",
]
