"""
FastAPI dependencies for dependency injection.

The storage context and services are created once in the app lifespan
and kept on app.state; these dependencies hand them to route handlers.
"""

from fastapi import Request

from core.storage import StorageContext
from services.applications import ApplicationService
from services.credentials import CredentialService


def get_storage(request: Request) -> StorageContext:
    """
    Dependency that provides the process storage context.

    Usage:
        @router.get("/events")
        async def list_events(
            storage: StorageContext = Depends(get_storage)
        ):
            ...
    """
    storage = getattr(request.app.state, "storage", None)
    if storage is None:
        raise RuntimeError("Storage not initialized")
    return storage


def get_credentials(request: Request) -> CredentialService:
    credentials = getattr(request.app.state, "credentials", None)
    if credentials is None:
        raise RuntimeError("Credential service not initialized")
    return credentials


def get_application_service(request: Request) -> ApplicationService:
    return ApplicationService(get_storage(request).applications)
