"""
Shared schema building blocks.

Every endpoint answers with ApiResponse so front-end consumers parse
success and failure the same way. Request models accept camelCase JSON
and expose snake_case attributes.
"""

import re
from datetime import datetime
from typing import Annotated, Any, ClassVar, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    model_validator,
)
from pydantic.alias_generators import to_camel

from core.identifiers import ensure_utc


EMAIL_PATTERN = re.compile(r"^\w+(?:[.-]\w+)*@\w+(?:[.-]\w+)*(?:\.\w{2,3})+$", re.ASCII)
EMAIL_MAX_LENGTH = 254
PHONE_PATTERN = re.compile(r"^\d{10}$")

REQUIRED_MESSAGE = "Please fill in all required fields"


def _not_blank(value: str) -> str:
    if not value:
        raise ValueError(REQUIRED_MESSAGE)
    return value


def _valid_email(value: str) -> str:
    value = value.strip().lower()
    if len(value) > EMAIL_MAX_LENGTH or not EMAIL_PATTERN.match(value):
        raise ValueError("Please provide a valid email address")
    return value


def _valid_phone(value: str) -> str:
    digits = re.sub(r"\D", "", value)
    if not PHONE_PATTERN.match(digits):
        raise ValueError("Please provide a valid 10-digit phone number")
    return digits


def _as_str(value: Any) -> Any:
    return str(value) if isinstance(value, int) and not isinstance(value, bool) else value


RequiredStr = Annotated[str, AfterValidator(_not_blank)]
EmailStr = Annotated[str, AfterValidator(_valid_email)]
PhoneStr = Annotated[str, AfterValidator(_valid_phone)]
UtcDatetime = Annotated[datetime, AfterValidator(ensure_utc)]
# Form posts sometimes send numbers for string enums such as year "2"
Stringish = BeforeValidator(_as_str)


class CamelModel(BaseModel):
    """Request body base: camelCase on the wire, stripped strings."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
        use_enum_values=True,
        validate_default=True,
    )

    def to_document(self, *, partial: bool = False) -> dict[str, Any]:
        """Field values keyed the way they are stored."""
        return self.model_dump(by_alias=True, exclude_unset=partial)


class PartialUpdate(CamelModel):
    """
    Base for PUT bodies: only the fields sent are applied.

    Sending null is allowed only for fields listed in `clearable`; every
    other field keeps a value once the record exists.
    """

    clearable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_null_for_kept_fields(self):
        for name in sorted(self.model_fields_set - self.clearable):
            if getattr(self, name) is None:
                alias = type(self).model_fields[name].alias or name
                raise ValueError(f"{alias} cannot be empty")
        return self


class ApiResponse(BaseModel):
    """Envelope for every response."""

    success: bool = Field(default=True)
    message: Optional[str] = Field(default=None)
    data: Optional[Any] = Field(default=None)


def ok(data: Any = None, message: Optional[str] = None) -> ApiResponse:
    return ApiResponse(success=True, message=message, data=data)
