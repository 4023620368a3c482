"""
Storage abstraction layer.

One collection interface, two interchangeable backends:
- MongoDB (durable, via motor)
- In-memory (fallback when the database cannot be reached)

The backend is selected once per process by create_storage_context().
"""

from core.storage.base import (
    BaseCollection,
    StorageContext,
    StorageMode,
)
from core.storage.factory import (
    create_storage_context,
    get_storage_mode,
)
from core.storage.memory import InMemoryCollection, create_memory_context
from core.storage.query import (
    ASCENDING,
    DESCENDING,
    Page,
    PageResult,
    Query,
    Range,
    Search,
)

__all__ = [
    # Abstract interfaces
    "BaseCollection",
    "StorageContext",
    "StorageMode",
    # Query vocabulary
    "ASCENDING",
    "DESCENDING",
    "Page",
    "PageResult",
    "Query",
    "Range",
    "Search",
    # Backends and factory
    "InMemoryCollection",
    "create_memory_context",
    "create_storage_context",
    "get_storage_mode",
]
