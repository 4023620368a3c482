"""
Storage factory for creating the process-wide storage context.

The backend is chosen exactly once, at startup. When MongoDB is
configured but cannot be reached, the process degrades to the in-memory
backend instead of failing, and says so with a single warning.
"""

from typing import TYPE_CHECKING

from core.exceptions import StorageUnavailableError
from core.logging import get_logger
from core.storage.base import StorageContext, StorageMode
from core.storage.memory import create_memory_context
from core.storage.seed import demo_seed


if TYPE_CHECKING:
    from core.config import Settings


logger = get_logger(__name__)


def get_storage_mode(settings: "Settings") -> StorageMode:
    """
    Determine which storage backend is requested by settings.

    Args:
        settings: Application settings

    Returns:
        The requested storage mode (the active one may still fall back)
    """
    backend_str = settings.storage_backend.lower()

    try:
        return StorageMode(backend_str)
    except ValueError:
        raise ValueError(
            f"Unsupported storage backend: {backend_str}. "
            f"Supported backends: {[b.value for b in StorageMode]}"
        )


def create_fallback_context(settings: "Settings") -> StorageContext:
    seed = demo_seed() if settings.seed_fallback_data else None
    return create_memory_context(seed)


async def create_storage_context(settings: "Settings") -> StorageContext:
    """
    Create the storage context for this process.

    Args:
        settings: Application settings

    Returns:
        A MongoDB-backed context when the database answers, otherwise
        an in-memory context (seeded with demo data when enabled)
    """
    mode = get_storage_mode(settings)

    if mode == StorageMode.MEMORY:
        logger.info("Using in-memory storage (configured)")
        return create_fallback_context(settings)

    from core.storage.mongodb import MongoDBStorage

    logger.info(
        "Connecting to MongoDB",
        database=settings.mongodb_database,
        timeout_ms=settings.mongodb_connect_timeout_ms,
    )
    storage = MongoDBStorage(
        connection_string=settings.mongodb_url,
        database_name=settings.mongodb_database,
        connect_timeout_ms=settings.mongodb_connect_timeout_ms,
    )

    try:
        await storage.setup()
    except StorageUnavailableError as exc:
        logger.warning(
            "MongoDB unavailable, continuing with in-memory storage",
            error=exc.message,
        )
        return create_fallback_context(settings)

    return storage.context()
