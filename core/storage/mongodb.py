"""
MongoDB storage backend implementation.

Provides the durable collection implementation on top of motor, and the
connection holder that creates indexes and hands out a StorageContext.
Counters use $inc inside a conditional find_one_and_update so concurrent
registrations and view counts never lose updates.
"""

from typing import Any, Awaitable, Callable, Optional

from motor.motor_asyncio import (
    AsyncIOMotorClient,
    AsyncIOMotorCollection,
    AsyncIOMotorDatabase,
)
from pymongo import ASCENDING, DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from core.entities import ALL_COLLECTIONS, CollectionSpec
from core.exceptions import DuplicateError, StorageUnavailableError
from core.identifiers import new_record_id, utcnow
from core.logging import get_logger
from core.storage.base import BaseCollection, StorageContext, StorageMode
from core.storage.query import (
    ID_FIELD,
    MONGO_ID_FIELD,
    Page,
    Query,
    SortSpec,
    to_mongo,
    to_mongo_sort,
)


logger = get_logger(__name__)


# Secondary indexes backing the default listing order of each collection
SORT_INDEXES: dict[str, list[tuple[str, int]]] = {
    "applications": [("submittedAt", DESCENDING), ("status", ASCENDING)],
    "contacts": [("createdAt", DESCENDING), ("status", ASCENDING)],
    "events": [("date", ASCENDING), ("status", ASCENDING)],
    "members": [("order", ASCENDING), ("team", ASCENDING)],
    "news": [("publishedAt", DESCENDING), ("isPublished", ASCENDING)],
}


def _to_record(doc: Optional[dict[str, Any]]) -> Optional[dict[str, Any]]:
    """Expose MongoDB's _id as the portal's id field."""
    if doc is None:
        return None
    doc[ID_FIELD] = doc.pop(MONGO_ID_FIELD)
    return doc


def _duplicate_field(exc: DuplicateKeyError) -> Optional[str]:
    key_pattern = (exc.details or {}).get("keyPattern") or {}
    return next(iter(key_pattern), None)


class MongoDBCollection(BaseCollection):
    """Collection backed by a motor collection."""

    def __init__(self, spec: CollectionSpec, collection: AsyncIOMotorCollection):
        super().__init__(spec)
        self._collection = collection

    async def _colliding_field(self, doc: dict[str, Any]) -> Optional[str]:
        for name in self.spec.unique_fields:
            value = doc.get(name)
            if not isinstance(value, str):
                continue
            condition: dict[str, Any] = {name: value}
            if doc.get(MONGO_ID_FIELD) is not None:
                condition[MONGO_ID_FIELD] = {"$ne": doc[MONGO_ID_FIELD]}
            if await self._collection.count_documents(condition, limit=1):
                return name
        return None

    async def _duplicate(self, exc: DuplicateKeyError, doc: dict[str, Any]) -> DuplicateError:
        # Servers older than 4.2 omit keyPattern from the error details
        field = _duplicate_field(exc) or await self._colliding_field(doc)
        if field == MONGO_ID_FIELD:
            field = ID_FIELD
        return DuplicateError(
            f"{self.spec.label} with this {field or 'value'} already exists",
            field=field,
        )

    async def ensure_indexes(self) -> None:
        for name in self.spec.unique_fields:
            # Records without the field (or with null) are not constrained
            await self._collection.create_index(
                name,
                unique=True,
                partialFilterExpression={name: {"$type": "string"}},
            )
        for name, direction in SORT_INDEXES.get(self.spec.name, []):
            await self._collection.create_index([(name, direction)])

    async def insert(self, document: dict[str, Any]) -> dict[str, Any]:
        now = utcnow()
        doc = dict(document)
        doc[MONGO_ID_FIELD] = doc.pop(ID_FIELD, None) or new_record_id()
        if doc.get(self.spec.created_field) is None:
            doc[self.spec.created_field] = now
        if doc.get(self.spec.updated_field) is None:
            doc[self.spec.updated_field] = now

        try:
            await self._collection.insert_one(doc)
        except DuplicateKeyError as exc:
            raise await self._duplicate(exc, doc) from exc

        logger.debug("Document inserted", collection=self.name, record_id=doc[MONGO_ID_FIELD])
        return _to_record(doc)

    async def first(
        self,
        query: Query,
        sort: Optional[SortSpec] = None,
    ) -> Optional[dict[str, Any]]:
        kwargs: dict[str, Any] = {}
        if sort:
            kwargs["sort"] = to_mongo_sort(sort)
        doc = await self._collection.find_one(to_mongo(query), **kwargs)
        return _to_record(doc)

    async def find_many(
        self,
        query: Optional[Query] = None,
        sort: Optional[SortSpec] = None,
        page: Optional[Page] = None,
    ) -> list[dict[str, Any]]:
        cursor = self._collection.find(to_mongo(query)).sort(to_mongo_sort(sort))
        if page is not None:
            cursor = cursor.skip(page.offset).limit(page.limit)
        docs = await cursor.to_list(length=None)
        return [_to_record(doc) for doc in docs]

    async def count(self, query: Optional[Query] = None) -> int:
        return await self._collection.count_documents(to_mongo(query))

    async def update(self, query: Query, changes: dict[str, Any]) -> dict[str, Any]:
        fields = {k: v for k, v in changes.items() if k not in (ID_FIELD, MONGO_ID_FIELD)}
        fields[self.spec.updated_field] = utcnow()

        try:
            doc = await self._collection.find_one_and_update(
                to_mongo(query),
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as exc:
            raise await self._duplicate(exc, fields) from exc

        if doc is None:
            raise self.not_found()
        return _to_record(doc)

    async def increment(
        self,
        query: Query,
        field: str,
        amount: int = 1,
        *,
        limit_field: Optional[str] = None,
    ) -> Optional[dict[str, Any]]:
        target = to_mongo(query)
        condition = target
        if limit_field:
            below_limit = {
                "$or": [
                    {limit_field: {"$in": [None, 0, False]}},
                    {"$expr": {"$lt": [{"$ifNull": [f"${field}", 0]}, f"${limit_field}"]}},
                ]
            }
            condition = {"$and": [target, below_limit]}

        doc = await self._collection.find_one_and_update(
            condition,
            {
                "$inc": {field: amount},
                "$set": {self.spec.updated_field: utcnow()},
            },
            return_document=ReturnDocument.AFTER,
        )
        if doc is not None:
            return _to_record(doc)

        if await self._collection.count_documents(target, limit=1) == 0:
            raise self.not_found()
        return None

    async def delete(self, query: Query) -> dict[str, Any]:
        doc = await self._collection.find_one_and_delete(to_mongo(query))
        if doc is None:
            raise self.not_found()
        return _to_record(doc)


def bind_collections(db: AsyncIOMotorDatabase) -> dict[str, MongoDBCollection]:
    return {spec.name: MongoDBCollection(spec, db[spec.name]) for spec in ALL_COLLECTIONS}


def mongodb_context(
    collections: dict[str, MongoDBCollection],
    closer: Optional[Callable[[], Awaitable[None]]] = None,
) -> StorageContext:
    return StorageContext(
        mode=StorageMode.MONGODB,
        users=collections["users"],
        applications=collections["applications"],
        contacts=collections["contacts"],
        events=collections["events"],
        members=collections["members"],
        news=collections["news"],
        closer=closer,
    )


class MongoDBStorage:
    """
    Connection holder for the durable backend.

    Usage:
        storage = MongoDBStorage(url, "kare_acm_sigbed")
        await storage.setup()        # raises StorageUnavailableError
        context = storage.context()
        ...
        await storage.close()
    """

    def __init__(
        self,
        connection_string: str,
        database_name: str = "kare_acm_sigbed",
        connect_timeout_ms: int = 3000,
    ):
        self._connection_string = connection_string
        self._database_name = database_name
        self._connect_timeout_ms = connect_timeout_ms
        self._client: Optional[AsyncIOMotorClient] = None
        self._db: Optional[AsyncIOMotorDatabase] = None
        self._collections: dict[str, MongoDBCollection] = {}

    async def setup(self) -> None:
        """Connect, verify the server answers, and create indexes."""
        self._client = AsyncIOMotorClient(
            self._connection_string,
            serverSelectionTimeoutMS=self._connect_timeout_ms,
            tz_aware=True,
        )
        try:
            await self._client.admin.command("ping")
            self._db = self._client[self._database_name]
            self._collections = bind_collections(self._db)
            for collection in self._collections.values():
                await collection.ensure_indexes()
        except PyMongoError as exc:
            await self.close()
            raise StorageUnavailableError(f"MongoDB unreachable: {exc}") from exc

        logger.info(
            "MongoDB storage initialized",
            database=self._database_name,
            collections=sorted(self._collections),
        )

    def context(self) -> StorageContext:
        if self._db is None:
            raise RuntimeError("Storage not initialized. Call setup() first.")
        return mongodb_context(self._collections, closer=self.close)

    async def close(self) -> None:
        """Close MongoDB connection."""
        if self._client is not None:
            self._client.close()
            self._client = None
            self._db = None
            logger.info("MongoDB storage closed")
