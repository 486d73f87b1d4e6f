"""Document Store — async MongoDB client, per-collection repositories and health checks.

Invariants:
    - One AsyncMongoClient per process, created on startup and closed on shutdown
    - Every driver exception is mapped to DatabaseError (core/errors.py);
      duplicate-key violations map to ConflictError
    - Repositories return raw documents: ObjectId and datetime values are left
      for the normalizer

Design Decisions:
    - Singleton document_store initialized on startup: FastAPI lifespan manages
      lifecycle (no global import side effects)
    - toggle() uses a pipeline update so the flip is atomic on the server
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

from bson import ObjectId
from pymongo import AsyncMongoClient, ReturnDocument
from pymongo.errors import (
    ConnectionFailure, DuplicateKeyError, OperationFailure, PyMongoError,
)

from app.core.errors import ConflictError, DatabaseError

logger = logging.getLogger(__name__)

USERS = "users"
COURSES = "courses"
PRODUCTS = "products"


@asynccontextmanager
async def driver_errors(operation: str) -> AsyncGenerator[None, None]:
    """Translate pymongo failures raised inside the block."""
    try:
        yield
    except DuplicateKeyError as e:
        logger.warning(f"DB duplicate key on {operation}: {e}")
        raise ConflictError("Document already exists")
    except ConnectionFailure as e:
        logger.error(f"DB connection error on {operation}: {e}")
        raise DatabaseError("Connection error", operation)
    except OperationFailure as e:
        logger.error(f"DB operation error on {operation}: {e}")
        raise DatabaseError("Operation rejected by server", operation)
    except PyMongoError as e:
        logger.error(f"DB driver error on {operation}: {e}")
        raise DatabaseError("Database driver error", operation)


class MongoDocumentRepository:
    """DocumentRepository over a single Mongo collection."""

    def __init__(self, collection):
        self._collection = collection

    async def insert(self, document: dict[str, Any]) -> dict[str, Any]:
        doc = dict(document)
        async with driver_errors("insert"):
            result = await self._collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    async def find_by_id(self, document_id: ObjectId) -> dict[str, Any] | None:
        async with driver_errors("find"):
            return await self._collection.find_one({"_id": document_id})

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        async with driver_errors("find"):
            return await self._collection.find_one(query)

    async def update(
        self, document_id: ObjectId, fields: dict[str, Any],
    ) -> dict[str, Any] | None:
        async with driver_errors("update"):
            return await self._collection.find_one_and_update(
                {"_id": document_id},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )

    async def delete(self, document_id: ObjectId) -> bool:
        async with driver_errors("delete"):
            result = await self._collection.delete_one({"_id": document_id})
        return result.deleted_count > 0

    async def toggle(
        self, document_id: ObjectId, field: str,
    ) -> dict[str, Any] | None:
        async with driver_errors("update"):
            return await self._collection.find_one_and_update(
                {"_id": document_id},
                [{"$set": {field: {"$not": [f"${field}"]}, "updatedAt": "$$NOW"}}],
                return_document=ReturnDocument.AFTER,
            )


class DocumentStore:
    """Owns the Mongo client and hands out collection repositories."""

    def __init__(self, url: str, database: str, timeout_ms: int = 5000):
        self.client = AsyncMongoClient(
            url, serverSelectionTimeoutMS=timeout_ms, tz_aware=True,
        )
        self.database = self.client[database]

    def repository(self, collection: str) -> MongoDocumentRepository:
        return MongoDocumentRepository(self.database[collection])

    async def ensure_indexes(self) -> None:
        """Unique email index for users. Logged, not fatal, when the server is down."""
        try:
            await self.database[USERS].create_index("email", unique=True)
        except PyMongoError as e:
            logger.warning(f"Could not ensure indexes: {e}")

    async def health_check(self) -> bool:
        """Ping the server (for readiness probes)."""
        try:
            await self.client.admin.command("ping")
            return True
        except PyMongoError as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def close(self) -> None:
        await self.client.close()


# Singleton (initialized on startup)
document_store: DocumentStore | None = None


def init_store(url: str, database: str, **kwargs) -> DocumentStore:
    global document_store
    document_store = DocumentStore(url, database, **kwargs)
    return document_store


async def close_store() -> None:
    global document_store
    if document_store:
        await document_store.close()
        document_store = None


def _repository(collection: str) -> MongoDocumentRepository:
    if not document_store:
        raise RuntimeError("Document store not initialized")
    return document_store.repository(collection)


def get_user_repository() -> MongoDocumentRepository:
    """FastAPI dependency for the users collection."""
    return _repository(USERS)


def get_course_repository() -> MongoDocumentRepository:
    """FastAPI dependency for the courses collection."""
    return _repository(COURSES)


def get_product_repository() -> MongoDocumentRepository:
    """FastAPI dependency for the products collection."""
    return _repository(PRODUCTS)
