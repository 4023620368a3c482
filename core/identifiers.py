"""
Identifier and timestamp policy.

Record ids and business ids are generated here, and every stored
datetime comes from utcnow() so both storage modes hold timezone-aware
UTC values.
"""

import re
import secrets
import string
import uuid
from datetime import datetime, timezone
from typing import Optional


APPLICATION_ID_PREFIX = "KARE"
APPLICATION_ID_RANDOM_LENGTH = 6
APPLICATION_ID_ALPHABET = string.digits + string.ascii_uppercase
APPLICATION_ID_PATTERN = re.compile(r"^KARE-\d{4}-[0-9A-Z]{6}$")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Treat naive datetimes as UTC and normalise aware ones to UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def new_record_id() -> str:
    return uuid.uuid4().hex


def generate_application_id(
    now: Optional[datetime] = None,
    rng: Optional[secrets.SystemRandom] = None,
) -> str:
    """
    Build a business id of the form KARE-<year>-<6 base36 chars>.

    Not guaranteed unique; callers check it against stored applications
    and draw again on collision.
    """
    now = now or utcnow()
    rng = rng or secrets.SystemRandom()
    suffix = "".join(
        rng.choice(APPLICATION_ID_ALPHABET)
        for _ in range(APPLICATION_ID_RANDOM_LENGTH)
    )
    return f"{APPLICATION_ID_PREFIX}-{now.year:04d}-{suffix}"


def is_application_id(value: str) -> bool:
    return bool(APPLICATION_ID_PATTERN.match(value))
