"""MongoDB implementation of the document store."""

from typing import Any, Dict, List, Optional
from uuid import uuid4

import structlog
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING as MONGO_ASC, DESCENDING as MONGO_DESC, ReturnDocument
from pymongo.errors import PyMongoError

from app.config import Settings
from app.core.errors import InternalError
from app.db import store
from app.db.store import DocumentStore, Filters, Sort

logger = structlog.get_logger(__name__)


def _to_query(filters: Optional[Filters]) -> Dict[str, Any]:
    query = {}
    for field, value in (filters or {}).items():
        if field == "id":
            field = "_id"
        if isinstance(value, (list, tuple, set)):
            query[field] = {"$in": list(value)}
        else:
            query[field] = value
    return query


def _from_mongo(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if document is None:
        return None
    document = dict(document)
    document["id"] = str(document.pop("_id"))
    return document


def _to_mongo(data: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in data.items() if k not in ("id", "_id")}


class MongoDocumentStore(DocumentStore):
    """
    Document store on MongoDB via Motor.

    Documents use string keys in `_id`; callers see them as `id`.
    """

    def __init__(self, client: AsyncIOMotorClient, database: str):
        self.client = client
        self.db: AsyncIOMotorDatabase = client[database]

    @classmethod
    def from_settings(cls, settings: Settings) -> "MongoDocumentStore":
        """Connect using the configured URI with conservative pool settings."""
        client = AsyncIOMotorClient(
            settings.MONGODB_URI,
            tz_aware=True,
            maxPoolSize=settings.MONGODB_MAX_POOL_SIZE,
            minPoolSize=1,
            maxIdleTimeMS=45000,
            serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
            connectTimeoutMS=10000,
            socketTimeoutMS=20000,
        )
        logger.info("mongodb_client_created", database=settings.MONGODB_DATABASE)
        return cls(client, settings.MONGODB_DATABASE)

    async def create_indexes(self) -> None:
        """Create indexes for the screening and listing queries."""
        try:
            await self.db[store.USERS].create_index("email", unique=True)
            await self.db[store.JOB_APPLICATIONS].create_index([("appliedAt", MONGO_DESC)])
            await self.db[store.JOB_APPLICATIONS].create_index("status")
            await self.db[store.JOB_APPLICATIONS].create_index("personalDetails.email")
            await self.db[store.JOB_POSTINGS].create_index([("postedDate", MONGO_DESC)])
            await self.db[store.JOB_POSTINGS].create_index("expiryDateTime")
            await self.db[store.DEPARTMENTS].create_index([("name", MONGO_ASC)])
            # TTL only garbage-collects; expiry is still checked on every verification
            await self.db[store.PENDING_VERIFICATIONS].create_index("expiresAt", expireAfterSeconds=0)
            logger.info("mongodb_indexes_created")
        except PyMongoError as e:
            logger.warning("mongodb_index_creation_failed", error=str(e))

    async def get(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        try:
            document = await self.db[collection].find_one({"_id": key})
        except PyMongoError as e:
            logger.error("mongodb_read_failed", collection=collection, key=key, error=str(e))
            raise InternalError("Database read failed") from e
        return _from_mongo(document)

    async def set(self, collection: str, key: str, data: Dict[str, Any]) -> None:
        try:
            await self.db[collection].replace_one({"_id": key}, _to_mongo(data), upsert=True)
        except PyMongoError as e:
            logger.error("mongodb_write_failed", collection=collection, key=key, error=str(e))
            raise InternalError("Database write failed") from e

    async def insert(self, collection: str, data: Dict[str, Any]) -> str:
        key = uuid4().hex
        document = _to_mongo(data)
        document["_id"] = key
        try:
            await self.db[collection].insert_one(document)
        except PyMongoError as e:
            logger.error("mongodb_write_failed", collection=collection, error=str(e))
            raise InternalError("Database write failed") from e
        return key

    async def update(
        self,
        collection: str,
        key: str,
        changes: Dict[str, Any],
        where: Optional[Filters] = None,
    ) -> bool:
        query = _to_query(where)
        query["_id"] = key
        try:
            result = await self.db[collection].update_one(query, {"$set": _to_mongo(changes)})
        except PyMongoError as e:
            logger.error("mongodb_write_failed", collection=collection, key=key, error=str(e))
            raise InternalError("Database write failed") from e
        return result.matched_count > 0

    async def increment(self, collection: str, key: str, field: str, amount: int = 1) -> Optional[int]:
        try:
            document = await self.db[collection].find_one_and_update(
                {"_id": key},
                {"$inc": {field: amount}},
                projection={field: True},
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as e:
            logger.error("mongodb_write_failed", collection=collection, key=key, error=str(e))
            raise InternalError("Database write failed") from e
        return None if document is None else document.get(field)

    async def delete(self, collection: str, key: str) -> bool:
        try:
            result = await self.db[collection].delete_one({"_id": key})
        except PyMongoError as e:
            logger.error("mongodb_delete_failed", collection=collection, key=key, error=str(e))
            raise InternalError("Database delete failed") from e
        return result.deleted_count > 0

    async def find(
        self,
        collection: str,
        filters: Optional[Filters] = None,
        sort: Optional[Sort] = None,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        cursor = self.db[collection].find(_to_query(filters))
        if sort:
            cursor = cursor.sort([("_id" if f == "id" else f, d) for f, d in sort])
        if limit:
            cursor = cursor.limit(limit)
        try:
            documents = await cursor.to_list(length=limit)
        except PyMongoError as e:
            logger.error("mongodb_query_failed", collection=collection, error=str(e))
            raise InternalError("Database query failed") from e
        return [_from_mongo(d) for d in documents]

    async def count(self, collection: str, filters: Optional[Filters] = None) -> int:
        try:
            return await self.db[collection].count_documents(_to_query(filters))
        except PyMongoError as e:
            logger.error("mongodb_query_failed", collection=collection, error=str(e))
            raise InternalError("Database query failed") from e

    async def ping(self) -> bool:
        try:
            await self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.warning("mongodb_ping_failed", error=str(e))
            return False

    async def close(self) -> None:
        self.client.close()
        logger.info("mongodb_client_closed")
