"""Contact form schemas."""

from typing import ClassVar, Optional

from api.schemas.common import CamelModel, EmailStr, PartialUpdate, RequiredStr
from core.entities import ContactCategory, ContactStatus


class ContactCreate(CamelModel):
    name: RequiredStr
    email: EmailStr
    subject: RequiredStr
    message: RequiredStr
    category: ContactCategory = ContactCategory.GENERAL


class ContactUpdate(PartialUpdate):
    clearable: ClassVar[frozenset[str]] = frozenset({"reply"})

    status: Optional[ContactStatus] = None
    reply: Optional[str] = None
