"""
Recruitment application service.

Submission assigns the human-readable application id, retrying when a
generated id is already taken, and rejects a second application from
the same email or roll number.
"""

from typing import Any

from core.entities import ApplicationStatus, Position
from core.exceptions import DuplicateError, PortalError
from core.identifiers import generate_application_id
from core.logging import get_logger
from core.storage import BaseCollection, Query


logger = get_logger(__name__)

DUPLICATE_MESSAGE = "An application with this email or roll number already exists"


class ApplicationService:

    MAX_ID_ATTEMPTS = 5

    def __init__(self, applications: BaseCollection):
        self.applications = applications

    async def _id_taken(self, application_id: str) -> bool:
        return await self.applications.first(
            Query(equals={"applicationId": application_id})
        ) is not None

    async def submit(self, data: dict[str, Any]) -> dict[str, Any]:
        """
        Store a new application in status pending.

        Args:
            data: Validated form fields; email is expected lowercase

        Raises:
            DuplicateError: email or roll number already used
        """
        existing = await self.applications.first(
            Query(any_of=[{"email": data["email"]}, {"rollNo": data["rollNo"]}])
        )
        if existing is not None:
            raise DuplicateError(DUPLICATE_MESSAGE)

        for attempt in range(1, self.MAX_ID_ATTEMPTS + 1):
            application_id = generate_application_id()
            if await self._id_taken(application_id):
                logger.debug("Application id collision", application_id=application_id)
                continue

            try:
                application = await self.applications.insert({
                    **data,
                    "applicationId": application_id,
                    "status": ApplicationStatus.PENDING.value,
                })
            except DuplicateError as exc:
                if exc.field == "applicationId":
                    continue
                raise DuplicateError(DUPLICATE_MESSAGE, field=exc.field) from exc

            logger.info(
                "Application submitted",
                application_id=application_id,
                position=application.get("position"),
                attempts=attempt,
            )
            return application

        raise PortalError("Could not allocate an application id, please retry")

    async def email_exists(self, email: str) -> bool:
        return await self.applications.first(
            Query(equals={"email": email.strip().lower()})
        ) is not None

    async def stats(self) -> dict[str, Any]:
        stats: dict[str, Any] = {"total": await self.applications.count()}
        for status in ApplicationStatus:
            stats[status.value] = await self.applications.count(
                Query(equals={"status": status.value})
            )
        stats["byPosition"] = {
            position.value: await self.applications.count(
                Query(equals={"position": position.value})
            )
            for position in Position
        }
        return stats
