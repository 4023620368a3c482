"""
Background scheduler for startup maintenance jobs.

Uses APScheduler to run the default-administrator bootstrap once, a few
seconds after startup, so the storage mode has settled before the users
collection is touched.

Behaviour:
- The job runs in the background; startup does not wait for it
- A failing bootstrap is logged and the app keeps serving
"""

import asyncio
from datetime import timedelta
from typing import TYPE_CHECKING, Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from core.identifiers import utcnow
from core.logging import get_logger

if TYPE_CHECKING:
    from services.credentials import CredentialService


logger = get_logger(__name__)


class BootstrapScheduler:
    """
    One-shot scheduler for the default admin bootstrap.

    Usage:
        scheduler = BootstrapScheduler(credentials, delay_seconds=2)
        await scheduler.start()
        # ... application runs ...
        await scheduler.shutdown()
    """

    JOB_ID = "bootstrap_default_admin"

    def __init__(
        self,
        credentials: "CredentialService",
        delay_seconds: Optional[float] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            credentials: Service owning the users collection
            delay_seconds: Seconds to wait after start (default from config)
        """
        self.credentials = credentials
        self.delay_seconds = (
            delay_seconds
            if delay_seconds is not None
            else credentials.settings.admin_bootstrap_delay_seconds
        )

        self._scheduler: Optional[AsyncIOScheduler] = None
        self.completed = asyncio.Event()

    async def start(self) -> None:
        """
        Start the background scheduler.

        Should be called during application startup (in lifespan).
        """
        if self._scheduler is not None:
            logger.warning("Scheduler already running")
            return

        self._scheduler = AsyncIOScheduler()
        self._scheduler.add_job(
            self.run_bootstrap,
            trigger=DateTrigger(run_date=utcnow() + timedelta(seconds=self.delay_seconds)),
            id=self.JOB_ID,
            name="Ensure default administrator",
            replace_existing=True,
            misfire_grace_time=None,
        )
        self._scheduler.start()

        logger.info("Admin bootstrap scheduled", delay_seconds=self.delay_seconds)

    async def shutdown(self) -> None:
        if self._scheduler is None:
            return

        self._scheduler.shutdown(wait=False)
        self._scheduler = None
        logger.info("Scheduler shut down")

    async def run_bootstrap(self) -> None:
        """Ensure the default admin exists. Called by APScheduler."""
        try:
            created = await self.credentials.ensure_default_admin()
            logger.info("Admin bootstrap finished", created=created)
        except Exception as e:
            logger.error(
                "Admin bootstrap failed",
                error=str(e),
                exc_info=True,
            )
        finally:
            self.completed.set()

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._scheduler is not None and self._scheduler.running
