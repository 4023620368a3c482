"""
In-process fallback storage backend.

Used when MongoDB is not reachable. Each collection is a list of dicts
guarded by its own asyncio.Lock; every read-modify-write happens under
that lock so concurrent requests cannot lose updates. Documents are
deep-copied on the way in and out, matching the isolation MongoDB gives.
"""

import asyncio
import copy
from typing import Any, Iterable, Optional

from core.entities import ALL_COLLECTIONS, CollectionSpec
from core.exceptions import DuplicateError
from core.identifiers import new_record_id, utcnow
from core.logging import get_logger
from core.storage.base import BaseCollection, StorageContext, StorageMode
from core.storage.query import ID_FIELD, Page, Query, SortSpec, matches, sort_documents


logger = get_logger(__name__)


class InMemoryCollection(BaseCollection):
    """List-backed collection with MongoDB-equivalent query semantics."""

    def __init__(
        self,
        spec: CollectionSpec,
        documents: Optional[Iterable[dict[str, Any]]] = None,
    ):
        super().__init__(spec)
        self._documents: list[dict[str, Any]] = []
        self._lock = asyncio.Lock()
        for doc in documents or []:
            self._documents.append(self._stamp_new(copy.deepcopy(doc)))

    def _stamp_new(self, doc: dict[str, Any]) -> dict[str, Any]:
        now = utcnow()
        doc.setdefault(ID_FIELD, new_record_id())
        if doc.get(self.spec.created_field) is None:
            doc[self.spec.created_field] = now
        if doc.get(self.spec.updated_field) is None:
            doc[self.spec.updated_field] = now
        return doc

    def _check_unique(self, doc: dict[str, Any], ignore_id: Optional[str] = None) -> None:
        for name in (ID_FIELD, *self.spec.unique_fields):
            value = doc.get(name)
            if value is None:
                continue
            for existing in self._documents:
                if existing.get(ID_FIELD) == ignore_id:
                    continue
                if existing.get(name) == value:
                    raise DuplicateError(
                        f"{self.spec.label} with this {name} already exists",
                        field=name,
                    )

    def _index_of(self, query: Query) -> int:
        for index, doc in enumerate(self._documents):
            if matches(doc, query):
                return index
        raise self.not_found()

    async def insert(self, document: dict[str, Any]) -> dict[str, Any]:
        doc = self._stamp_new(copy.deepcopy(document))
        async with self._lock:
            self._check_unique(doc)
            self._documents.append(doc)
        return copy.deepcopy(doc)

    async def first(
        self,
        query: Query,
        sort: Optional[SortSpec] = None,
    ) -> Optional[dict[str, Any]]:
        candidates = [doc for doc in self._documents if matches(doc, query)]
        if not candidates:
            return None
        if sort:
            candidates = sort_documents(candidates, sort)
        return copy.deepcopy(candidates[0])

    async def find_many(
        self,
        query: Optional[Query] = None,
        sort: Optional[SortSpec] = None,
        page: Optional[Page] = None,
    ) -> list[dict[str, Any]]:
        filtered = [doc for doc in self._documents if matches(doc, query)]
        ordered = sort_documents(filtered, sort)
        if page is not None:
            ordered = ordered[page.offset:page.offset + page.limit]
        return copy.deepcopy(ordered)

    async def count(self, query: Optional[Query] = None) -> int:
        return sum(1 for doc in self._documents if matches(doc, query))

    async def update(self, query: Query, changes: dict[str, Any]) -> dict[str, Any]:
        changes = {k: v for k, v in changes.items() if k != ID_FIELD}
        async with self._lock:
            index = self._index_of(query)
            current = self._documents[index]
            updated = {**current, **copy.deepcopy(changes)}
            updated[self.spec.updated_field] = utcnow()
            self._check_unique(updated, ignore_id=current[ID_FIELD])
            self._documents[index] = updated
        return copy.deepcopy(updated)

    async def increment(
        self,
        query: Query,
        field: str,
        amount: int = 1,
        *,
        limit_field: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        async with self._lock:
            index = self._index_of(query)
            doc = self._documents[index]
            current = doc.get(field) or 0
            limit = doc.get(limit_field) if limit_field else None
            if limit and current >= limit:
                return None
            doc[field] = current + amount
            doc[self.spec.updated_field] = utcnow()
            return copy.deepcopy(doc)

    async def delete(self, query: Query) -> dict[str, Any]:
        async with self._lock:
            index = self._index_of(query)
            removed = self._documents.pop(index)
        return removed


def create_memory_context(
    seed: Optional[dict[str, list[dict[str, Any]]]] = None,
) -> StorageContext:
    """
    Build a storage context backed entirely by in-process collections.

    Args:
        seed: Optional collection name -> documents to preload
    """
    seed = seed or {}
    collections = {
        spec.name: InMemoryCollection(spec, seed.get(spec.name))
        for spec in ALL_COLLECTIONS
    }
    logger.info(
        "In-memory storage initialized",
        seeded={name: len(docs) for name, docs in seed.items()},
    )
    return StorageContext(
        mode=StorageMode.MEMORY,
        users=collections["users"],
        applications=collections["applications"],
        contacts=collections["contacts"],
        events=collections["events"],
        members=collections["members"],
        news=collections["news"],
    )
