"""
Credential service.

Login, admin-driven registration, password changes, token-to-principal
resolution and the default administrator bootstrap. Works against the
users collection of whichever storage backend is active.
"""

from typing import Any, Optional

from starlette.concurrency import run_in_threadpool

from core.config import Settings, settings as default_settings
from core.entities import Role
from core.exceptions import (
    AccountDeactivatedError,
    DuplicateError,
    InvalidCredentialsError,
    UnauthorizedError,
)
from core.identifiers import utcnow
from core.logging import get_logger
from core.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)
from core.storage import BaseCollection, Query


logger = get_logger(__name__)

PASSWORD_FIELD = "passwordHash"


def normalize_email(email: str) -> str:
    return email.strip().lower()


def public_user(doc: dict[str, Any]) -> dict[str, Any]:
    """User document without the password hash."""
    return {k: v for k, v in doc.items() if k != PASSWORD_FIELD}


def user_summary(doc: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": doc["id"],
        "name": doc.get("name"),
        "email": doc.get("email"),
        "role": doc.get("role"),
        "position": doc.get("position"),
        "department": doc.get("department"),
    }


class CredentialService:
    """
    Authentication and credential management.

    Usage:
        credentials = CredentialService(storage.users, settings)
        token, user = await credentials.login("a@b.org", "secret")
        principal = await credentials.resolve_principal(token)
    """

    def __init__(self, users: BaseCollection, settings: Settings = default_settings):
        self.users = users
        self.settings = settings

    # bcrypt is CPU-bound; keep it off the event loop
    async def _hash(self, password: str) -> str:
        return await run_in_threadpool(hash_password, password, self.settings.bcrypt_rounds)

    async def _verify(self, password: str, hashed: Optional[str]) -> bool:
        return await run_in_threadpool(verify_password, password, hashed)

    async def login(self, email: str, password: str) -> tuple[str, dict[str, Any]]:
        """
        Verify credentials and issue an access token.

        Returns:
            (token, public user document)
        """
        email = normalize_email(email)
        user = await self.users.first(Query(equals={"email": email}))

        if user is None or not await self._verify(password, user.get(PASSWORD_FIELD)):
            logger.info("Login rejected", email=email)
            raise InvalidCredentialsError()

        if not user.get("isActive", True):
            logger.info("Login rejected for deactivated account", user_id=user["id"])
            raise AccountDeactivatedError()

        user = await self.users.update(Query.by_id(user["id"]), {"lastLogin": utcnow()})
        token = create_access_token(user["id"], user["role"], settings=self.settings)

        logger.info("Login successful", user_id=user["id"], role=user["role"])
        return token, public_user(user)

    async def register(
        self,
        name: str,
        email: str,
        password: str,
        role: Role = Role.MEMBER,
        position: Optional[str] = None,
        department: Optional[str] = None,
    ) -> dict[str, Any]:
        email = normalize_email(email)
        if await self.users.first(Query(equals={"email": email})) is not None:
            raise DuplicateError("User already exists with this email", field="email")

        try:
            user = await self.users.insert({
                "name": name,
                "email": email,
                PASSWORD_FIELD: await self._hash(password),
                "role": Role(role).value,
                "position": position,
                "department": department,
                "isActive": True,
                "lastLogin": None,
            })
        except DuplicateError as exc:
            raise DuplicateError("User already exists with this email", field=exc.field) from exc

        logger.info("User registered", user_id=user["id"], role=user["role"])
        return public_user(user)

    async def change_password(self, user_id: str, current_password: str, new_password: str) -> None:
        user = await self.users.find_one(Query.by_id(user_id))
        if not await self._verify(current_password, user.get(PASSWORD_FIELD)):
            raise InvalidCredentialsError("Current password is incorrect")

        await self.users.update(Query.by_id(user_id), {PASSWORD_FIELD: await self._hash(new_password)})
        logger.info("Password changed", user_id=user_id)

    async def resolve_principal(self, token: Optional[str]) -> dict[str, Any]:
        """
        Turn a bearer token into the acting user.

        Raises UnauthorizedError with a message naming the failed step.
        """
        if not token:
            raise UnauthorizedError("No token provided")

        payload = decode_access_token(token, settings=self.settings)

        user = await self.users.first(Query.by_id(payload["sub"]))
        if user is None:
            raise UnauthorizedError("User not found")
        if not user.get("isActive", True):
            raise UnauthorizedError("Account deactivated")

        return public_user(user)

    async def ensure_default_admin(self) -> bool:
        """
        Create the configured administrator if no admin exists yet.

        Idempotent across restarts. Returns True when a user was created.
        """
        email = normalize_email(self.settings.admin_email)
        existing = await self.users.first(
            Query(any_of=[{"role": Role.ADMIN.value}, {"email": email}])
        )
        if existing is not None:
            logger.debug("Default admin already present", user_id=existing["id"])
            return False

        try:
            user = await self.users.insert({
                "name": "Administrator",
                "email": email,
                PASSWORD_FIELD: await self._hash(self.settings.admin_password),
                "role": Role.ADMIN.value,
                "isActive": True,
                "lastLogin": None,
            })
        except DuplicateError:
            logger.debug("Default admin created concurrently", email=email)
            return False

        logger.info("Default admin created", user_id=user["id"], email=email)
        return True
