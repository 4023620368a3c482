"""
Abstract base classes for storage backends.

This module defines the contract every collection implementation must
follow, so route handlers and services work unchanged whether records
live in MongoDB or in the in-process fallback store.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from core.entities import CollectionSpec
from core.exceptions import NotFoundError
from core.storage.query import Page, PageResult, Query, SortSpec


class StorageMode(str, Enum):
    """Which backend a storage context is bound to."""
    MONGODB = "mongodb"
    MEMORY = "memory"


class BaseCollection(ABC):
    """
    Abstract interface over one document collection.

    Documents are plain dicts exposing their record id under "id".
    Implementations stamp the creation and update timestamps named by
    the collection spec and enforce its unique fields.
    """

    def __init__(self, spec: CollectionSpec):
        self.spec = spec

    @property
    def name(self) -> str:
        return self.spec.name

    def not_found(self) -> NotFoundError:
        return NotFoundError(self.spec.label)

    @abstractmethod
    async def insert(self, document: dict[str, Any]) -> dict[str, Any]:
        """
        Store a new document and return it with id and timestamps set.

        Raises DuplicateError when a unique field is already taken.
        """
        pass

    @abstractmethod
    async def first(
        self,
        query: Query,
        sort: Optional[SortSpec] = None,
    ) -> Optional[dict[str, Any]]:
        """Return the first matching document, or None."""
        pass

    async def find_one(self, query: Query) -> dict[str, Any]:
        """Return the matching document or raise NotFoundError."""
        doc = await self.first(query)
        if doc is None:
            raise self.not_found()
        return doc

    @abstractmethod
    async def find_many(
        self,
        query: Optional[Query] = None,
        sort: Optional[SortSpec] = None,
        page: Optional[Page] = None,
    ) -> list[dict[str, Any]]:
        """Return matching documents in sort order, sliced by page."""
        pass

    @abstractmethod
    async def count(self, query: Optional[Query] = None) -> int:
        pass

    async def find_page(
        self,
        query: Optional[Query],
        sort: Optional[SortSpec],
        page: Page,
    ) -> PageResult:
        total = await self.count(query)
        items = await self.find_many(query, sort, page)
        return PageResult(items=items, total=total, page=page.page, limit=page.limit)

    @abstractmethod
    async def update(self, query: Query, changes: dict[str, Any]) -> dict[str, Any]:
        """
        Apply field changes to the first matching document.

        Refreshes the update timestamp and returns the updated document.
        Raises NotFoundError when nothing matches.
        """
        pass

    @abstractmethod
    async def increment(
        self,
        query: Query,
        field: str,
        amount: int = 1,
        *,
        limit_field: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        """
        Atomically add `amount` to a numeric field.

        When `limit_field` is given and holds a truthy value, the increment
        only happens while `field` is below it. Returns the updated document,
        None when the limit has been reached, and raises NotFoundError when
        nothing matches.
        """
        pass

    @abstractmethod
    async def delete(self, query: Query) -> dict[str, Any]:
        """Remove the first matching document and return it."""
        pass


@dataclass
class StorageContext:
    """
    The collections of one process, all bound to the same backend.

    Created once at startup and passed to every handler; the mode never
    changes for the lifetime of the context.
    """
    mode: StorageMode
    users: BaseCollection
    applications: BaseCollection
    contacts: BaseCollection
    events: BaseCollection
    members: BaseCollection
    news: BaseCollection
    closer: Optional[Callable[[], Awaitable[None]]] = None

    @property
    def is_fallback(self) -> bool:
        return self.mode == StorageMode.MEMORY

    def collections(self) -> dict[str, BaseCollection]:
        return {
            coll.name: coll
            for coll in (
                self.users,
                self.applications,
                self.contacts,
                self.events,
                self.members,
                self.news,
            )
        }

    async def close(self) -> None:
        """Clean up resources (connections)."""
        if self.closer is not None:
            await self.closer()
            self.closer = None
